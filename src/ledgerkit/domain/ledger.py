"""Ledger transaction service.

Deposits, withdrawals and transfers each run as one unit of work: validate,
lock what must not change underneath the balance check, write a pending
transaction, write its debit and credit entries, then mark it completed.
"""

from decimal import Decimal
from typing import Callable, Optional

from ledgerkit.database.base import Database, UnitOfWork
from ledgerkit.domain.account import AccountStore
from ledgerkit.domain.balance import compute_balance, is_balanced
from ledgerkit.domain.entities import (
    Account,
    EntryLeg,
    EntryType,
    LedgerEntry,
    Transaction,
    TransactionKind,
    TransactionStatus,
)
from ledgerkit.domain.errors import (
    CurrencyMismatchError,
    DomainError,
    InsufficientBalanceError,
    SameAccountTransferError,
    TransactionNotFoundError,
    currency_mismatch,
    insufficient_balance,
    same_account_transfer,
    transaction_not_found,
)
from ledgerkit.domain.money import normalize_currency, validate_amount
from ledgerkit.domain.system_account import SystemAccountRegistry
from ledgerkit.logging_config import get_logger

logger = get_logger(__name__)


def _check_currency(account: Account, currency: str) -> None:
    if account.currency != currency:
        raise CurrencyMismatchError(currency_mismatch(account.id, account.currency, currency))


def _check_funds(uow: UnitOfWork, account: Account, amount: Decimal) -> None:
    """Reject a debit larger than the account's current balance.

    Must be called with the account locked in the same unit of work.
    """
    balance = compute_balance(uow.list_ledger_entries(account_id=account.id))
    if amount > balance:
        raise InsufficientBalanceError(insufficient_balance(account.id, balance, amount))


class LedgerService:
    """Service recording balanced transactions against accounts."""

    def __init__(self, db: Database):
        """Initialize ledger service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_deposit(
        self,
        account_id: int,
        amount,
        currency: str,
        description: Optional[str] = None,
    ) -> Transaction:
        """Credit an account with money coming from outside the ledger.

        The system account of the currency takes the debit side.

        Args:
            account_id: Account to credit
            amount: Positive amount (Decimal, int or str)
            currency: Currency code; must match the account
            description: Optional free text

        Returns:
            The completed transaction

        Raises:
            InvalidAmountError: If amount is not a positive currency amount
            AccountNotFoundError: If the account does not exist
            CurrencyMismatchError: If the account holds another currency
        """
        currency = normalize_currency(currency)
        amount = validate_amount(amount, currency)

        def protocol(uow: UnitOfWork) -> list[EntryLeg]:
            account = AccountStore(uow).find_by_id(account_id)
            _check_currency(account, currency)
            system = SystemAccountRegistry(uow).get_or_create(currency)
            return [
                EntryLeg(system.id, EntryType.DEBIT, amount),
                EntryLeg(account.id, EntryType.CREDIT, amount),
            ]

        return self._record(TransactionKind.DEPOSIT, amount, currency, description, protocol)

    def create_withdrawal(
        self,
        account_id: int,
        amount,
        currency: str,
        description: Optional[str] = None,
    ) -> Transaction:
        """Debit an account with money leaving the ledger.

        The account row stays locked from the balance check until the
        entries are committed, so concurrent withdrawals cannot both pass
        the check against the same balance.

        Raises:
            InvalidAmountError: If amount is not a positive currency amount
            AccountNotFoundError: If the account does not exist
            CurrencyMismatchError: If the account holds another currency
            InsufficientBalanceError: If the balance does not cover amount
        """
        currency = normalize_currency(currency)
        amount = validate_amount(amount, currency)

        def protocol(uow: UnitOfWork) -> list[EntryLeg]:
            account = AccountStore(uow).find_by_id(account_id, lock=True)
            _check_currency(account, currency)
            _check_funds(uow, account, amount)
            system = SystemAccountRegistry(uow).get_or_create(currency)
            return [
                EntryLeg(account.id, EntryType.DEBIT, amount),
                EntryLeg(system.id, EntryType.CREDIT, amount),
            ]

        return self._record(TransactionKind.WITHDRAWAL, amount, currency, description, protocol)

    def create_transfer(
        self,
        from_account_id: int,
        to_account_id: int,
        amount,
        currency: str,
        description: Optional[str] = None,
    ) -> Transaction:
        """Move money between two accounts of the same currency.

        Both accounts are locked in ascending ID order, so opposite transfers
        between the same pair cannot deadlock.

        Raises:
            SameAccountTransferError: If both IDs are the same account
            InvalidAmountError: If amount is not a positive currency amount
            AccountNotFoundError: If either account does not exist
            CurrencyMismatchError: If either account holds another currency
            InsufficientBalanceError: If the source balance does not cover amount
        """
        if from_account_id == to_account_id:
            raise SameAccountTransferError(same_account_transfer(from_account_id))
        currency = normalize_currency(currency)
        amount = validate_amount(amount, currency)

        def protocol(uow: UnitOfWork) -> list[EntryLeg]:
            accounts = AccountStore(uow).find_many([from_account_id, to_account_id], lock=True)
            source, target = accounts[from_account_id], accounts[to_account_id]
            _check_currency(source, currency)
            _check_currency(target, currency)
            _check_funds(uow, source, amount)
            return [
                EntryLeg(source.id, EntryType.DEBIT, amount),
                EntryLeg(target.id, EntryType.CREDIT, amount),
            ]

        return self._record(TransactionKind.TRANSFER, amount, currency, description, protocol)

    def get_transaction(self, transaction_id: int) -> Transaction:
        """Get transaction by ID.

        Raises:
            TransactionNotFoundError: If the transaction does not exist
        """
        with self.db.unit_of_work() as uow:
            txn = uow.get_transaction(transaction_id)
        if txn is None:
            raise TransactionNotFoundError(transaction_not_found(transaction_id))
        return txn

    def get_transaction_entries(self, transaction_id: int) -> list[LedgerEntry]:
        """Get the ledger entries written by a transaction.

        Raises:
            TransactionNotFoundError: If the transaction does not exist
        """
        with self.db.unit_of_work() as uow:
            if uow.get_transaction(transaction_id) is None:
                raise TransactionNotFoundError(transaction_not_found(transaction_id))
            return uow.list_ledger_entries(transaction_id=transaction_id)

    def _record(
        self,
        kind: TransactionKind,
        amount: Decimal,
        currency: str,
        description: Optional[str],
        protocol: Callable[[UnitOfWork], list[EntryLeg]],
    ) -> Transaction:
        """Run a protocol and write its transaction in one unit of work.

        ``protocol`` performs the checks and returns the entry legs; it must
        not write anything that would need undoing, since every domain check
        happens before the transaction row exists.
        """
        try:
            with self.db.unit_of_work() as uow:
                legs = protocol(uow)
                if not is_balanced(legs):
                    raise RuntimeError(f"Unbalanced {kind.value} legs: {legs}")
                txn = uow.create_transaction(
                    kind=kind, amount=amount, currency=currency, description=description
                )
                try:
                    txn = uow.complete_transaction(txn.id, legs)
                except Exception:
                    if not self.db.supports_rollback:
                        self._mark_failed(uow, txn)
                    raise
        except DomainError as exc:
            logger.info("Rejected %s: %s (%s)", kind.value, exc.kind, exc)
            raise

        logger.info(
            "Completed %s %s: %s %s", kind.value, txn.id, txn.amount, txn.currency
        )
        return txn

    def _mark_failed(self, uow: UnitOfWork, txn: Transaction) -> None:
        """Give a pending transaction a terminal status on a store without rollback."""
        logger.error("Recording %s %s as failed", txn.kind.value, txn.id)
        uow.update_transaction_status(txn.id, TransactionStatus.FAILED)
