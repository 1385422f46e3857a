"""Balance derivation from ledger entries."""

from decimal import Decimal
from typing import Iterable

from ledgerkit.domain.entities import EntryLeg, EntryType, LedgerEntry


def compute_balance(entries: Iterable[LedgerEntry]) -> Decimal:
    """Compute an account balance from its ledger entries.

    Credits increase the balance and debits decrease it. Order does not
    matter and an empty collection yields zero.

    Args:
        entries: Ledger entries of a single account

    Returns:
        Signed balance as a Decimal
    """
    balance = Decimal(0)
    for entry in entries:
        if entry.entry_type is EntryType.CREDIT:
            balance += entry.amount
        else:
            balance -= entry.amount
    return balance


def is_balanced(entries: Iterable[LedgerEntry | EntryLeg]) -> bool:
    """Check the double-entry shape of one transaction's entries.

    True when there is exactly one debit and one credit of the same amount
    on two different accounts.
    """
    entries = list(entries)
    if len(entries) != 2:
        return False
    debits = [e for e in entries if e.entry_type is EntryType.DEBIT]
    credits = [e for e in entries if e.entry_type is EntryType.CREDIT]
    if len(debits) != 1 or len(credits) != 1:
        return False
    debit, credit = debits[0], credits[0]
    return (
        debit.amount == credit.amount
        and debit.amount > 0
        and debit.account_id != credit.account_id
    )
