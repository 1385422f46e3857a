"""Concurrent use of the ledger against one store."""

import os
import threading
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
import pytest

from ledgerkit.database.memory import MemoryDatabase
from ledgerkit.database.models import Base
from ledgerkit.database.sqlalchemy_db import SQLAlchemyDatabase
from ledgerkit.domain.account import AccountService
from ledgerkit.domain.balance import compute_balance
from ledgerkit.domain.entities import AccountKind, Transaction
from ledgerkit.domain.errors import DomainError, InsufficientBalanceError
from ledgerkit.domain.ledger import LedgerService


# PostgreSQL honors FOR UPDATE and runs units of work side by side, unlike
# SQLite which serializes every writer.
POSTGRES_URL = os.environ.get("LEDGERKIT_TEST_DATABASE_URL")


@pytest.fixture(
    params=["sqlite", "memory", pytest.param("postgres", marks=pytest.mark.postgres)]
)
def db(request):
    if request.param == "memory":
        yield MemoryDatabase()
    elif request.param == "postgres":
        if not POSTGRES_URL:
            pytest.skip("LEDGERKIT_TEST_DATABASE_URL is not set")
        database = SQLAlchemyDatabase(POSTGRES_URL)
        engine = database.session_factory.kw["bind"]
        Base.metadata.drop_all(engine)
        database.initialize_schema()
        yield database
        Base.metadata.drop_all(engine)
        database.disconnect()
    else:
        yield request.getfixturevalue("temp_db")


@pytest.fixture
def services(db):
    return AccountService(db), LedgerService(db)


def run_concurrently(fn, calls):
    """Start all calls at the same moment; return results or raised domain errors."""
    barrier = threading.Barrier(len(calls))

    def worker(args):
        barrier.wait()
        try:
            return fn(*args)
        except DomainError as exc:
            return exc

    with ThreadPoolExecutor(max_workers=len(calls)) as pool:
        return list(pool.map(worker, calls))


def _funded(services, owner, amount="100.00", currency="USD"):
    accounts, ledger = services
    account = accounts.create_account(owner_id=owner, currency=currency)
    ledger.create_deposit(account.id, amount, currency)
    return account


def test_two_withdrawals_cannot_overdraw(services):
    """Scenario F: two withdrawals of 60 against 100, exactly one succeeds."""
    accounts, ledger = services
    account = _funded(services, "alice")

    results = run_concurrently(
        ledger.create_withdrawal, [(account.id, "60.00", "USD")] * 2
    )

    succeeded = [r for r in results if isinstance(r, Transaction)]
    rejected = [r for r in results if isinstance(r, InsufficientBalanceError)]
    assert len(succeeded) == 1
    assert len(rejected) == 1
    assert accounts.get_account(account.id).balance == Decimal("40.00")


def test_many_withdrawals_stop_at_zero(services):
    accounts, ledger = services
    account = _funded(services, "alice")

    results = run_concurrently(
        ledger.create_withdrawal, [(account.id, "30.00", "USD")] * 8
    )

    succeeded = [r for r in results if isinstance(r, Transaction)]
    assert len(succeeded) == 3
    assert sum(isinstance(r, InsufficientBalanceError) for r in results) == 5
    balance = accounts.get_account(account.id).balance
    assert balance == Decimal("10.00")
    assert balance == compute_balance(accounts.get_ledger(account.id))


def test_withdrawals_and_transfers_share_the_balance(services):
    accounts, ledger = services
    source = _funded(services, "alice")
    target = accounts.create_account(owner_id="bob", currency="USD")

    def debit(*args):
        if len(args) == 4:
            return ledger.create_transfer(*args)
        return ledger.create_withdrawal(*args)

    withdrawals = [(source.id, "25.00", "USD")] * 4
    transfers = [(source.id, target.id, "25.00", "USD")] * 4
    results = run_concurrently(debit, withdrawals + transfers)

    succeeded = [r for r in results if isinstance(r, Transaction)]
    assert len(succeeded) == 4
    assert accounts.get_account(source.id).balance == Decimal("0.00")


def test_opposite_transfers_do_not_deadlock(services):
    accounts, ledger = services
    first = _funded(services, "alice")
    second = _funded(services, "bob")

    calls = []
    for i in range(10):
        if i % 2:
            calls.append((first.id, second.id, "1.00", "USD"))
        else:
            calls.append((second.id, first.id, "1.00", "USD"))
    results = run_concurrently(ledger.create_transfer, calls)

    assert all(isinstance(r, Transaction) for r in results)
    assert accounts.get_account(first.id).balance == Decimal("100.00")
    assert accounts.get_account(second.id).balance == Decimal("100.00")


def test_first_use_of_currency_creates_one_system_account(services, db):
    accounts, ledger = services
    holders = [accounts.create_account(owner_id=f"owner-{i}", currency="CHF") for i in range(6)]

    results = run_concurrently(
        ledger.create_deposit, [(holder.id, "10.00", "CHF") for holder in holders]
    )

    assert all(isinstance(r, Transaction) for r in results)
    with db.unit_of_work() as uow:
        system_accounts = [
            a for a in uow.list_accounts(kind=AccountKind.SYSTEM) if a.currency == "CHF"
        ]
    assert len(system_accounts) == 1
    assert accounts.get_system_account("CHF").balance == Decimal("-60.00")
