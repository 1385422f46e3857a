"""Per-currency system account registry."""

from ledgerkit.database.base import UnitOfWork
from ledgerkit.domain.entities import Account
from ledgerkit.domain.errors import DuplicateSystemAccountError
from ledgerkit.logging_config import get_logger

logger = get_logger(__name__)


class SystemAccountRegistry:
    """Finds or creates the counterparty account of deposits and withdrawals.

    The store enforces one system account per currency. When two units of
    work race to create it, the loser's insert is rejected and it re-reads
    the winner's row instead of failing.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def get_or_create(self, currency: str) -> Account:
        """Return the system account for a currency, creating it on first use.

        Args:
            currency: Normalized currency code

        Returns:
            The single system account of the currency
        """
        account = self.uow.find_system_account(currency)
        if account is not None:
            return account

        try:
            account = self.uow.create_system_account(currency)
        except DuplicateSystemAccountError:
            logger.warning("Lost system account creation race for %s, re-reading", currency)
            account = self.uow.find_system_account(currency)
            if account is None:
                # Rejected as a duplicate yet not visible: nothing to return
                raise
            return account

        logger.info("Created system account %s for %s", account.id, currency)
        return account
