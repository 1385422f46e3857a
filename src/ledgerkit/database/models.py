"""SQLAlchemy models for ledgerkit database."""

from datetime import datetime, UTC
from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Column,
    DateTime,
    Engine,
    ForeignKey,
    Index,
    Integer,
    String,
    create_engine,
    event,
    text,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

# Seconds a SQLite connection waits for a competing writer before giving up.
SQLITE_BUSY_TIMEOUT = 30


class Account(Base):
    """Ledger account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False, index=True)
    kind = Column(String(16), nullable=False)
    currency = Column(String(3), nullable=False)
    status = Column(String(16), nullable=False, default="active")
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (
        CheckConstraint("kind IN ('user', 'system')", name="ck_account_kind"),
        # At most one system account per currency
        Index(
            "uq_system_account_currency",
            "currency",
            unique=True,
            sqlite_where=text("kind = 'system'"),
            postgresql_where=text("kind = 'system'"),
        ),
    )

    # Relationships
    ledger_entries = relationship("LedgerEntry", back_populates="account")


class Transaction(Base):
    """Transaction model. Amounts are stored in minor units."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    kind = Column(String(16), nullable=False)
    amount = Column(BigInteger, nullable=False)
    currency = Column(String(3), nullable=False)
    status = Column(String(16), nullable=False, default="pending")
    description = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transaction_amount_positive"),
        CheckConstraint(
            "kind IN ('deposit', 'withdrawal', 'transfer')", name="ck_transaction_kind"
        ),
        CheckConstraint(
            "status IN ('pending', 'completed', 'failed')", name="ck_transaction_status"
        ),
    )

    # Relationships
    ledger_entries = relationship("LedgerEntry", back_populates="transaction")


class LedgerEntry(Base):
    """Ledger entry model. Amounts are stored in minor units."""

    __tablename__ = "ledger_entries"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    transaction_id = Column(
        Integer, ForeignKey("transactions.id"), nullable=False, index=True
    )
    entry_type = Column(String(8), nullable=False)
    amount = Column(BigInteger, nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_ledger_entry_amount_positive"),
        CheckConstraint("entry_type IN ('debit', 'credit')", name="ck_ledger_entry_type"),
    )

    # Relationships
    account = relationship("Account", back_populates="ledger_entries")
    transaction = relationship("Transaction", back_populates="ledger_entries")


def _configure_sqlite(engine: Engine) -> None:
    """Make SQLite transactions explicit and writer-serializing.

    pysqlite's implicit BEGIN is disabled so every unit of work starts with
    BEGIN IMMEDIATE, which takes the database write lock up front. Two units
    can then never both read a balance before either of them writes.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            echo=False,
            connect_args={"timeout": SQLITE_BUSY_TIMEOUT, "check_same_thread": False},
        )
        _configure_sqlite(engine)
    else:
        engine = create_engine(database_url, echo=False, pool_pre_ping=True)
    return sessionmaker(bind=engine, expire_on_commit=False)
