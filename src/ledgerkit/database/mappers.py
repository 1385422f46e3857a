"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, including the translation between
integer minor units in the database and Decimal amounts in the domain.
"""

from datetime import datetime, UTC

from ledgerkit.domain import entities as domain
from ledgerkit.domain.money import from_minor_units
from ledgerkit.database.models import (
    Account as ORMAccount,
    LedgerEntry as ORMLedgerEntry,
    Transaction as ORMTransaction,
)


def _as_utc(value: datetime) -> datetime:
    """Attach UTC to timestamps read back naive (SQLite drops the offset)."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        owner_id=orm_account.owner_id,
        kind=domain.AccountKind(orm_account.kind),
        currency=orm_account.currency,
        status=domain.AccountStatus(orm_account.status),
        created_at=_as_utc(orm_account.created_at),
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        kind=domain.TransactionKind(orm_transaction.kind),
        amount=from_minor_units(orm_transaction.amount, orm_transaction.currency),
        currency=orm_transaction.currency,
        status=domain.TransactionStatus(orm_transaction.status),
        description=orm_transaction.description,
        created_at=_as_utc(orm_transaction.created_at),
    )


def ledger_entry_to_domain(orm_entry: ORMLedgerEntry, currency: str) -> domain.LedgerEntry:
    """Convert SQLAlchemy LedgerEntry model to domain LedgerEntry entity.

    Entries do not carry a currency column; the caller passes the currency
    of the entry's account so the minor units can be scaled.
    """
    return domain.LedgerEntry(
        id=orm_entry.id,
        account_id=orm_entry.account_id,
        transaction_id=orm_entry.transaction_id,
        entry_type=domain.EntryType(orm_entry.entry_type),
        amount=from_minor_units(orm_entry.amount, currency),
        created_at=_as_utc(orm_entry.created_at),
    )
