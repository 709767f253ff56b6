"""SQLAlchemy models for the shopledger document store."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Date,
    Numeric,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class LedgerAccount(Base):
    """Ledger account document."""

    __tablename__ = "ledger_accounts"

    id = Column(Integer, primary_key=True)
    shop_id = Column(String, nullable=False, index=True)
    account_name = Column(String, nullable=False)
    account_type = Column(String, nullable=False)
    opening_balance = Column(Numeric(12, 2), nullable=False, default=0)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)


class LedgerEntry(Base):
    """Journal entry document.

    Account references are plain integers without foreign keys: the store does
    not enforce referential integrity, the ledger services do.
    """

    __tablename__ = "ledger_entries"

    id = Column(Integer, primary_key=True)
    shop_id = Column(String, nullable=False, index=True)
    entry_date = Column(Date, nullable=False)
    description = Column(String, nullable=False)
    debit_account_id = Column(Integer, nullable=False)
    credit_account_id = Column(Integer, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    reference = Column(String, nullable=True)
    payment_method = Column(String, nullable=True)
    transaction_type = Column(String, nullable=False, default="Manual")
    receipt_id = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
