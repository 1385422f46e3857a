"""Domain layer for ledgerkit.

Services live in their own modules (``ledgerkit.domain.account``,
``ledgerkit.domain.ledger``) and are not re-exported here, since they depend
on the database layer which itself imports the entities below.
"""

from ledgerkit.domain.entities import (
    Account,
    AccountBalance,
    LedgerEntry,
    Transaction,
)

__all__ = ["Account", "AccountBalance", "LedgerEntry", "Transaction"]
