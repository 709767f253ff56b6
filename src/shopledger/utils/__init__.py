"""Utility functions for shopledger."""

from shopledger.utils.date_parser import parse_date, get_date_range
from shopledger.utils.amount_parser import parse_amount

__all__ = ["parse_date", "get_date_range", "parse_amount"]
