"""In-memory database implementation.

Keeps all data in Python dicts and is lost when the process ends. Writes
are applied immediately and are not undone when a unit of work fails, so
this store reports ``supports_rollback = False`` and the ledger falls back to
recording failed transactions explicitly.
"""

import threading
from collections import defaultdict
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, UTC
from decimal import Decimal
from itertools import count
from typing import Iterable, Iterator, Optional

from ledgerkit.database.base import Database, UnitOfWork
from ledgerkit.domain.entities import (
    SYSTEM_OWNER_ID,
    Account,
    AccountKind,
    AccountStatus,
    EntryLeg,
    LedgerEntry,
    Transaction,
    TransactionKind,
    TransactionStatus,
)
from ledgerkit.domain.errors import (
    DuplicateSystemAccountError,
    TransactionNotFoundError,
    duplicate_system_account,
    transaction_not_found,
)
from ledgerkit.logging_config import get_logger

logger = get_logger(__name__)


class MemoryUnitOfWork(UnitOfWork):
    """Unit of work over a MemoryDatabase.

    Account locks taken through ``lock=True`` are held until the unit ends.
    """

    def __init__(self, db: "MemoryDatabase"):
        self.db = db
        self._held: list[threading.Lock] = []
        self._held_ids: set[int] = set()

    def _lock_accounts(self, account_ids: Iterable[int]) -> None:
        for account_id in sorted(set(account_ids) - self._held_ids):
            lock = self.db._account_lock(account_id)
            lock.acquire()
            self._held.append(lock)
            self._held_ids.add(account_id)
            logger.debug("Locked account %s", account_id)

    def release(self) -> None:
        """Release account locks in reverse acquisition order."""
        while self._held:
            self._held.pop().release()
        self._held_ids.clear()

    # Account operations
    def create_account(
        self,
        owner_id: str,
        kind: AccountKind,
        currency: str,
        status: AccountStatus = AccountStatus.ACTIVE,
    ) -> Account:
        with self.db._mutex:
            if kind is AccountKind.SYSTEM and self._system_account(currency):
                raise DuplicateSystemAccountError(duplicate_system_account(currency))
            account = Account(
                id=next(self.db._account_ids),
                owner_id=owner_id,
                kind=kind,
                currency=currency,
                status=status,
                created_at=datetime.now(UTC),
            )
            self.db._accounts[account.id] = account
        return account

    def get_account(self, account_id: int, lock: bool = False) -> Optional[Account]:
        if lock and account_id in self.db._accounts:
            self._lock_accounts([account_id])
        return self.db._accounts.get(account_id)

    def get_accounts(self, account_ids: Iterable[int], lock: bool = False) -> list[Account]:
        ids = sorted(set(account_ids))
        existing = [i for i in ids if i in self.db._accounts]
        if lock:
            self._lock_accounts(existing)
        return [self.db._accounts[i] for i in existing]

    def list_accounts(self, kind: Optional[AccountKind] = None) -> list[Account]:
        with self.db._mutex:
            accounts = sorted(self.db._accounts.values(), key=lambda a: a.id)
        if kind is not None:
            accounts = [a for a in accounts if a.kind is kind]
        return accounts

    def _system_account(self, currency: str) -> Optional[Account]:
        for account in self.db._accounts.values():
            if account.kind is AccountKind.SYSTEM and account.currency == currency:
                return account
        return None

    def find_system_account(self, currency: str) -> Optional[Account]:
        with self.db._mutex:
            return self._system_account(currency)

    def create_system_account(self, currency: str) -> Account:
        return self.create_account(
            owner_id=SYSTEM_OWNER_ID, kind=AccountKind.SYSTEM, currency=currency
        )

    # Transaction operations
    def create_transaction(
        self,
        kind: TransactionKind,
        amount: Decimal,
        currency: str,
        description: Optional[str] = None,
        status: TransactionStatus = TransactionStatus.PENDING,
    ) -> Transaction:
        with self.db._mutex:
            txn = Transaction(
                id=next(self.db._transaction_ids),
                kind=kind,
                amount=amount,
                currency=currency,
                status=status,
                description=description,
                created_at=datetime.now(UTC),
            )
            self.db._transactions[txn.id] = txn
        return txn

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        return self.db._transactions.get(transaction_id)

    def update_transaction_status(
        self, transaction_id: int, status: TransactionStatus
    ) -> Transaction:
        with self.db._mutex:
            txn = self.db._transactions.get(transaction_id)
            if txn is None:
                raise TransactionNotFoundError(transaction_not_found(transaction_id))
            txn = replace(txn, status=status)
            self.db._transactions[transaction_id] = txn
        return txn

    # Ledger entry operations
    def _build_entries(self, transaction_id: int, legs: list[EntryLeg]) -> list[LedgerEntry]:
        now = datetime.now(UTC)
        return [
            LedgerEntry(
                id=next(self.db._entry_ids),
                account_id=leg.account_id,
                transaction_id=transaction_id,
                entry_type=leg.entry_type,
                amount=leg.amount,
                created_at=now,
            )
            for leg in legs
        ]

    def create_ledger_entries(
        self, transaction_id: int, legs: list[EntryLeg]
    ) -> list[LedgerEntry]:
        # All legs are built before any is stored, so a failure cannot leave
        # one side of a transaction behind.
        with self.db._mutex:
            if transaction_id not in self.db._transactions:
                raise TransactionNotFoundError(transaction_not_found(transaction_id))
            entries = self._build_entries(transaction_id, legs)
            self.db._entries.extend(entries)
        return entries

    def complete_transaction(
        self, transaction_id: int, legs: list[EntryLeg]
    ) -> Transaction:
        # Entries and status are built first and stored together under the mutex.
        with self.db._mutex:
            txn = self.db._transactions.get(transaction_id)
            if txn is None:
                raise TransactionNotFoundError(transaction_not_found(transaction_id))
            entries = self._build_entries(transaction_id, legs)
            txn = replace(txn, status=TransactionStatus.COMPLETED)
            self.db._entries.extend(entries)
            self.db._transactions[transaction_id] = txn
        return txn

    def list_ledger_entries(
        self,
        account_id: Optional[int] = None,
        transaction_id: Optional[int] = None,
    ) -> list[LedgerEntry]:
        with self.db._mutex:
            entries = list(self.db._entries)
        if account_id is not None:
            entries = [e for e in entries if e.account_id == account_id]
        if transaction_id is not None:
            entries = [e for e in entries if e.transaction_id == transaction_id]
        return sorted(entries, key=lambda e: (e.created_at, e.id))


class MemoryDatabase(Database):
    """In-memory implementation of Database interface.

    Thread-safe. Suitable for development and testing, not for production.
    """

    supports_rollback = False

    def __init__(self):
        self._mutex = threading.RLock()
        self._locks_guard = threading.Lock()
        self._account_locks: dict[int, threading.Lock] = defaultdict(threading.Lock)
        self._accounts: dict[int, Account] = {}
        self._transactions: dict[int, Transaction] = {}
        self._entries: list[LedgerEntry] = []
        self._account_ids = count(1)
        self._transaction_ids = count(1)
        self._entry_ids = count(1)

    def _account_lock(self, account_id: int) -> threading.Lock:
        with self._locks_guard:
            return self._account_locks[account_id]

    def connect(self) -> None:
        """Connect to the database."""
        pass

    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    def initialize_schema(self) -> None:
        """Initialize database schema."""
        pass

    @contextmanager
    def unit_of_work(self) -> Iterator[MemoryUnitOfWork]:
        """Open a unit of work; account locks are released when it ends."""
        uow = MemoryUnitOfWork(self)
        try:
            yield uow
        finally:
            uow.release()
