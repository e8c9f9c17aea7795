"""SQLAlchemy models for ledgerbook database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    UniqueConstraint,
    create_engine,
    event,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Account(Base):
    """Chart of accounts model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    code = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    subtype = Column(String, nullable=True)
    nature = Column(String, nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships (no cascade: accounts are only referenced)
    movements = relationship("Movement", back_populates="account")


class User(Base):
    """User model."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    username = Column(String, unique=True, nullable=False)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    entries = relationship("JournalEntry", back_populates="author")


class JournalEntry(Base):
    """Journal entry model (libro diario)."""

    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True)
    sequence_number = Column(Integer, nullable=False)
    date = Column(Date, nullable=False)
    memo = Column(String, nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("sequence_number", name="uq_entry_sequence_number"),)

    # Relationships
    author = relationship("User", back_populates="entries")
    movements = relationship(
        "Movement",
        back_populates="entry",
        cascade="all, delete-orphan",
        order_by="Movement.id",
    )


class Movement(Base):
    """Debit/credit movement model."""

    __tablename__ = "movements"

    id = Column(Integer, primary_key=True)
    entry_id = Column(Integer, ForeignKey("journal_entries.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    debit = Column(Numeric(12, 2), default=0, nullable=False)
    credit = Column(Numeric(12, 2), default=0, nullable=False)

    # Relationships
    entry = relationship("JournalEntry", back_populates="movements")
    account = relationship("Account", back_populates="movements")


class CashCount(Base):
    """Cash count model (arqueo de caja)."""

    __tablename__ = "cash_counts"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    counted_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    system_balance = Column(Numeric(12, 2), nullable=False)
    physical_total = Column(Numeric(12, 2), nullable=False)
    difference = Column(Numeric(12, 2), nullable=False)
    notes = Column(String, nullable=True)

    denominations = relationship(
        "CashCountDenomination",
        back_populates="cash_count",
        cascade="all, delete-orphan",
        order_by="CashCountDenomination.id",
    )


class CashCountDenomination(Base):
    """Quantity counted of one bill or coin denomination."""

    __tablename__ = "cash_count_denominations"

    id = Column(Integer, primary_key=True)
    cash_count_id = Column(Integer, ForeignKey("cash_counts.id"), nullable=False)
    kind = Column(String, nullable=False)  # "bill" or "coin"
    denomination = Column(Numeric(8, 2), nullable=False)
    quantity = Column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint("cash_count_id", "kind", "denomination", name="uq_cash_count_denomination"),
    )

    cash_count = relationship("CashCount", back_populates="denominations")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory, creating missing tables.

    SQLite only checks foreign keys when asked to on each connection.
    """
    engine = create_engine(database_url, echo=False)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
