"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from decimal import Decimal
from typing import Iterable, Optional

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerkit.domain.entities import (
    Account,
    AccountKind,
    AccountStatus,
    EntryLeg,
    LedgerEntry,
    Transaction,
    TransactionKind,
    TransactionStatus,
)


class UnitOfWork(ABC):
    """Operations available inside one atomic unit of work.

    Every call made on a unit of work is committed together when the unit
    exits cleanly. Whether anything is undone when it exits with an error
    depends on ``Database.supports_rollback``.
    """

    # Account operations
    @abstractmethod
    def create_account(
        self,
        owner_id: str,
        kind: AccountKind,
        currency: str,
        status: AccountStatus = AccountStatus.ACTIVE,
    ) -> Account:
        """Create an account."""
        pass

    @abstractmethod
    def get_account(self, account_id: int, lock: bool = False) -> Optional[Account]:
        """Get account by ID, optionally locking it until the unit ends."""
        pass

    @abstractmethod
    def get_accounts(self, account_ids: Iterable[int], lock: bool = False) -> list[Account]:
        """Get the accounts that exist among the given IDs.

        With ``lock=True`` the rows are locked in ascending ID order so two
        units locking the same pair cannot deadlock.
        """
        pass

    @abstractmethod
    def list_accounts(self, kind: Optional[AccountKind] = None) -> list[Account]:
        """List accounts ordered by ID, optionally filtered by kind."""
        pass

    @abstractmethod
    def find_system_account(self, currency: str) -> Optional[Account]:
        """Get the system account for a currency, if it exists."""
        pass

    @abstractmethod
    def create_system_account(self, currency: str) -> Account:
        """Create the system account for a currency.

        Raises:
            DuplicateSystemAccountError: If one already exists. The unit of
                work stays usable after this error.
        """
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        kind: TransactionKind,
        amount: Decimal,
        currency: str,
        description: Optional[str] = None,
        status: TransactionStatus = TransactionStatus.PENDING,
    ) -> Transaction:
        """Create a transaction record."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def update_transaction_status(
        self, transaction_id: int, status: TransactionStatus
    ) -> Transaction:
        """Move a transaction to a new status. Returns the updated transaction."""
        pass

    # Ledger entry operations. Entries are append-only: there is no update
    # or delete counterpart.
    @abstractmethod
    def create_ledger_entries(
        self, transaction_id: int, legs: list[EntryLeg]
    ) -> list[LedgerEntry]:
        """Write all legs of a transaction together."""
        pass

    @abstractmethod
    def complete_transaction(
        self, transaction_id: int, legs: list[EntryLeg]
    ) -> Transaction:
        """Write the legs of a pending transaction and mark it completed.

        Either both the entries and the new status are stored or neither is,
        even on a store without rollback.
        """
        pass

    @abstractmethod
    def list_ledger_entries(
        self,
        account_id: Optional[int] = None,
        transaction_id: Optional[int] = None,
    ) -> list[LedgerEntry]:
        """List ledger entries ascending by creation time.

        Args:
            account_id: Optional account ID filter
            transaction_id: Optional transaction ID filter
        """
        pass


class Database(ABC):
    """Abstract transactional store for ledgerkit."""

    # Whether a unit of work that exits with an error leaves no writes behind.
    supports_rollback = True

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def unit_of_work(self) -> AbstractContextManager[UnitOfWork]:
        """Open an atomic unit of work.

        Commits when the block exits normally. Infrastructure failures are
        raised as StoreUnavailableError.
        """
        pass
