"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling. ``kind`` is a stable
    identifier callers can switch on without parsing the message.
    """

    kind = "domain_error"


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""

    kind = "validation_error"


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""

    kind = "not_found"


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""

    kind = "conflict"


class InvalidAmountError(ValidationError):
    kind = "invalid_amount"


class InvalidCurrencyError(ValidationError):
    kind = "invalid_currency"


class CurrencyMismatchError(ValidationError):
    kind = "currency_mismatch"


class SameAccountTransferError(ValidationError):
    kind = "same_account_transfer"


class InsufficientBalanceError(ConflictError):
    kind = "insufficient_balance"


class AccountNotFoundError(NotFoundError):
    pass


class TransactionNotFoundError(NotFoundError):
    pass


class DuplicateSystemAccountError(ConflictError):
    """A second system account for a currency was rejected by the store.

    Raised by stores and absorbed by the system account registry.
    """

    kind = "duplicate_system_account"


class StoreUnavailableError(Exception):
    """The backing store could not complete a unit of work."""

    kind = "store_unavailable"


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def accounts_not_found(account_ids: list[int]) -> str:
    """Return message for one or more missing accounts."""
    if len(account_ids) == 1:
        return account_not_found(account_ids[0])
    return f"Accounts {', '.join(str(i) for i in account_ids)} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def amount_not_positive(amount) -> str:
    return f"Amount must be positive, got {amount}"


def currency_mismatch(account_id: int, account_currency: str, currency: str) -> str:
    """Return message when an account is used with a foreign currency."""
    return (
        f"Currency mismatch: account {account_id} holds {account_currency}, "
        f"operation is in {currency}"
    )


def insufficient_balance(account_id: int, balance: Decimal, amount: Decimal) -> str:
    """Return message when a debit exceeds the available balance."""
    return (
        f"Insufficient balance in account {account_id}: "
        f"available {balance}, requested {amount}"
    )


def same_account_transfer(account_id: int) -> str:
    return f"Cannot transfer from account {account_id} to itself"


def duplicate_system_account(currency: str) -> str:
    return f"System account for {currency} already exists"
