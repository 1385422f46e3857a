"""Domain model entities for ledgerkit.

These are pure data classes representing ledger concepts, independent of
database schema. Stores convert their own row representation into these
entities, so the ledger logic never depends on a particular storage engine.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

# Owner identifier of the per-currency system (house) accounts.
SYSTEM_OWNER_ID = "system"


class AccountKind(str, Enum):
    USER = "user"
    SYSTEM = "system"


class AccountStatus(str, Enum):
    ACTIVE = "active"
    FROZEN = "frozen"
    CLOSED = "closed"


class TransactionKind(str, Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    TRANSFER = "transfer"


class TransactionStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not TransactionStatus.PENDING


class EntryType(str, Enum):
    DEBIT = "debit"
    CREDIT = "credit"


@dataclass(frozen=True)
class Account:
    """Ledger account domain entity."""

    id: int
    owner_id: str
    kind: AccountKind
    currency: str
    status: AccountStatus
    created_at: datetime

    @property
    def is_system(self) -> bool:
        return self.kind is AccountKind.SYSTEM


@dataclass(frozen=True)
class AccountBalance:
    """An account together with its balance derived from the ledger."""

    account: Account
    balance: Decimal

    @property
    def id(self) -> int:
        return self.account.id

    @property
    def currency(self) -> str:
        return self.account.currency


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: int
    kind: TransactionKind
    amount: Decimal
    currency: str
    status: TransactionStatus
    description: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class LedgerEntry:
    """Immutable debit or credit against one account."""

    id: int
    account_id: int
    transaction_id: int
    entry_type: EntryType
    amount: Decimal
    created_at: datetime


@dataclass(frozen=True)
class EntryLeg:
    """One side of a transaction, before it is written to the ledger."""

    account_id: int
    entry_type: EntryType
    amount: Decimal
