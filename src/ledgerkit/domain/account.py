"""Account domain service."""

from typing import Iterable, Optional

from ledgerkit.database.base import Database, UnitOfWork
from ledgerkit.domain.balance import compute_balance
from ledgerkit.domain.entities import (
    SYSTEM_OWNER_ID,
    Account,
    AccountBalance,
    AccountKind,
    AccountStatus,
    LedgerEntry,
)
from ledgerkit.domain.errors import (
    AccountNotFoundError,
    ValidationError,
    account_not_found,
    accounts_not_found,
)
from ledgerkit.domain.money import normalize_currency
from ledgerkit.logging_config import get_logger

logger = get_logger(__name__)


class AccountStore:
    """Account lookups and creation inside an open unit of work."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def find_by_id(self, account_id: int, lock: bool = False) -> Account:
        """Get an account or raise AccountNotFoundError.

        Args:
            account_id: Account ID
            lock: Hold the account row until the unit of work ends
        """
        account = self.uow.get_account(account_id, lock=lock)
        if account is None:
            raise AccountNotFoundError(account_not_found(account_id))
        return account

    def find_many(self, account_ids: Iterable[int], lock: bool = False) -> dict[int, Account]:
        """Get several accounts in one batch, keyed by ID.

        Locks, when requested, are taken in ascending ID order regardless of
        the order of ``account_ids``.

        Raises:
            AccountNotFoundError: If any of the IDs does not resolve
        """
        ids = list(account_ids)
        accounts = {acc.id: acc for acc in self.uow.get_accounts(ids, lock=lock)}
        missing = sorted({i for i in ids if i not in accounts})
        if missing:
            raise AccountNotFoundError(accounts_not_found(missing))
        return accounts

    def create(self, owner_id: str, currency: str) -> Account:
        """Create a user account. Does not deduplicate."""
        return self.uow.create_account(
            owner_id=owner_id,
            kind=AccountKind.USER,
            currency=currency,
            status=AccountStatus.ACTIVE,
        )

    def balance(self, account_id: int) -> AccountBalance:
        """Load an account with the balance derived from its entries."""
        account = self.find_by_id(account_id)
        entries = self.uow.list_ledger_entries(account_id=account_id)
        return AccountBalance(account=account, balance=compute_balance(entries))


class AccountService:
    """Service for managing accounts and reading their ledgers."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self, *, owner_id: str, account_type: str = AccountKind.USER.value, currency: str
    ) -> Account:
        """Create a new user account.

        Args:
            owner_id: Opaque owner identifier
            account_type: Only "user" is accepted; system accounts are
                created by the ledger on first use of a currency
            currency: Currency code, fixed for the life of the account

        Returns:
            The created account

        Raises:
            ValidationError: If the owner, type or currency is invalid
        """
        try:
            kind = AccountKind(account_type)
        except ValueError:
            raise ValidationError(f"Unknown account type '{account_type}'")
        if kind is AccountKind.SYSTEM:
            raise ValidationError("System accounts are managed by the ledger")

        owner_id = (owner_id or "").strip()
        if not owner_id:
            raise ValidationError("Owner ID must not be empty")
        if owner_id == SYSTEM_OWNER_ID:
            raise ValidationError(f"Owner ID '{SYSTEM_OWNER_ID}' is reserved")

        currency = normalize_currency(currency)

        with self.db.unit_of_work() as uow:
            account = AccountStore(uow).create(owner_id=owner_id, currency=currency)
        logger.info("Created account %s (%s) for owner %s", account.id, currency, owner_id)
        return account

    def get_account(self, account_id: int) -> AccountBalance:
        """Get an account with its current balance.

        Raises:
            AccountNotFoundError: If the account does not exist
        """
        with self.db.unit_of_work() as uow:
            return AccountStore(uow).balance(account_id)

    def get_ledger(self, account_id: int) -> list[LedgerEntry]:
        """Get all ledger entries of an account, oldest first.

        Raises:
            AccountNotFoundError: If the account does not exist
        """
        with self.db.unit_of_work() as uow:
            AccountStore(uow).find_by_id(account_id)
            return uow.list_ledger_entries(account_id=account_id)

    def list_accounts(self, include_system: bool = False) -> list[Account]:
        """List accounts ordered by ID.

        Args:
            include_system: Also list the per-currency system accounts
        """
        with self.db.unit_of_work() as uow:
            if include_system:
                return uow.list_accounts()
            return uow.list_accounts(kind=AccountKind.USER)

    def get_system_account(self, currency: str) -> Optional[AccountBalance]:
        """Get the system account for a currency with its balance.

        Never creates the account; returns None until the currency was first
        used by a deposit or withdrawal.
        """
        currency = normalize_currency(currency)
        with self.db.unit_of_work() as uow:
            account = uow.find_system_account(currency)
            if account is None:
                return None
            return AccountStore(uow).balance(account.id)
