"""Tests for database mappers."""

from datetime import datetime, UTC
from decimal import Decimal

from ledgerkit.database.models import (
    Account as ORMAccount,
    LedgerEntry as ORMLedgerEntry,
    Transaction as ORMTransaction,
)
from ledgerkit.database.mappers import (
    account_to_domain,
    ledger_entry_to_domain,
    transaction_to_domain,
)
from ledgerkit.domain.entities import (
    Account,
    AccountKind,
    AccountStatus,
    EntryType,
    LedgerEntry,
    Transaction,
    TransactionKind,
    TransactionStatus,
)


class TestAccountMapper:
    """Tests for Account mapper."""

    def test_account_to_domain(self):
        created_at = datetime.now(UTC)
        orm_account = ORMAccount(
            id=1,
            owner_id="system",
            kind="system",
            currency="EUR",
            status="active",
            created_at=created_at,
        )
        account = account_to_domain(orm_account)

        assert isinstance(account, Account)
        assert account.id == 1
        assert account.kind is AccountKind.SYSTEM
        assert account.status is AccountStatus.ACTIVE
        assert account.currency == "EUR"
        assert account.created_at == created_at


class TestTransactionMapper:
    """Tests for Transaction mapper."""

    def test_scales_minor_units(self):
        orm_transaction = ORMTransaction(
            id=3,
            kind="withdrawal",
            amount=1250,
            currency="USD",
            status="completed",
            description="ATM",
            created_at=datetime.now(UTC),
        )
        txn = transaction_to_domain(orm_transaction)

        assert isinstance(txn, Transaction)
        assert txn.kind is TransactionKind.WITHDRAWAL
        assert txn.status is TransactionStatus.COMPLETED
        assert txn.amount == Decimal("12.50")
        assert txn.description == "ATM"

    def test_zero_decimal_currency(self):
        orm_transaction = ORMTransaction(
            id=4,
            kind="deposit",
            amount=1250,
            currency="JPY",
            status="pending",
            description=None,
            created_at=datetime.now(UTC),
        )
        assert transaction_to_domain(orm_transaction).amount == Decimal("1250")


class TestLedgerEntryMapper:
    """Tests for LedgerEntry mapper."""

    def test_ledger_entry_to_domain(self):
        orm_entry = ORMLedgerEntry(
            id=9,
            account_id=2,
            transaction_id=3,
            entry_type="debit",
            amount=5,
            created_at=datetime.now(UTC),
        )
        entry = ledger_entry_to_domain(orm_entry, "USD")

        assert isinstance(entry, LedgerEntry)
        assert entry.entry_type is EntryType.DEBIT
        assert entry.amount == Decimal("0.05")
        assert entry.account_id == 2
        assert entry.transaction_id == 3
