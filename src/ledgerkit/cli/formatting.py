"""Plain-text rendering of ledger entities."""

from ledgerkit.domain.entities import Account, AccountBalance, LedgerEntry, Transaction


def format_account(account: Account) -> str:
    return (
        f"ID: {account.id:4d} | Owner: {account.owner_id:20s} | "
        f"{account.currency} | {account.kind.value:6s} | {account.status.value}"
    )


def format_balance(account: AccountBalance) -> str:
    return f"{format_account(account.account)} | Balance: {account.balance}"


def format_transaction(txn: Transaction) -> str:
    line = (
        f"Transaction {txn.id}: {txn.kind.value} {txn.amount} {txn.currency} "
        f"[{txn.status.value}]"
    )
    if txn.description:
        line += f" - {txn.description}"
    return line


def format_entry(entry: LedgerEntry) -> str:
    return (
        f"{entry.created_at:%Y-%m-%d %H:%M:%S} | Entry {entry.id:5d} | "
        f"Account {entry.account_id:4d} | Txn {entry.transaction_id:5d} | "
        f"{entry.entry_type.value:6s} | {entry.amount}"
    )
