"""Shared pytest fixtures for ledgerkit tests."""

import logging
import tempfile
import os
from decimal import Decimal
import pytest

from ledgerkit.database.factories import create_sqlite_database
from ledgerkit.database.memory import MemoryDatabase
from ledgerkit.domain.account import AccountService
from ledgerkit.domain.ledger import LedgerService
from ledgerkit.logging_config import LOGGER_NAME


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def memory_db():
    """Create an in-memory database (no rollback support)."""
    db = MemoryDatabase()
    db.connect()
    yield db
    db.disconnect()


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def ledger_service(temp_db):
    """Create a LedgerService with a temporary database."""
    return LedgerService(temp_db)


@pytest.fixture
def usd_account(account_service):
    """Create an empty USD account."""
    return account_service.create_account(owner_id="alice", currency="USD")


@pytest.fixture
def second_usd_account(account_service):
    """Create a second empty USD account."""
    return account_service.create_account(owner_id="bob", currency="USD")


@pytest.fixture
def funded_account(usd_account, ledger_service):
    """USD account holding a balance of 100.00."""
    ledger_service.create_deposit(usd_account.id, Decimal("100.00"), "USD", "Initial funding")
    return usd_account


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers the CLI bound to the runner's streams."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
