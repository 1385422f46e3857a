"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from ledgerkit.database.base import Database
from ledgerkit.database.memory import MemoryDatabase
from ledgerkit.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks LEDGERKIT_DB_PATH
            environment variable, then defaults to ~/.ledgerkit/ledgerkit.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("LEDGERKIT_DB_PATH")

    if database_path is None:
        # Default to ~/.ledgerkit/ledgerkit.db
        home = Path.home()
        db_dir = home / ".ledgerkit"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "ledgerkit.db")

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)


def create_database(
    database_url: Optional[str] = None, database_path: Optional[str] = None
) -> Database:
    """Create a database from a URL, falling back to a SQLite file.

    Args:
        database_url: SQLAlchemy URL, or "memory://" for the in-memory store.
            If None, checks LEDGERKIT_DATABASE_URL environment variable.
        database_path: SQLite file used when no URL is configured

    Returns:
        Database instance
    """
    if database_url is None:
        database_url = os.environ.get("LEDGERKIT_DATABASE_URL")

    if database_url is None:
        return create_sqlite_database(database_path=database_path)
    if database_url == "memory://":
        return MemoryDatabase()
    return SQLAlchemyDatabase(database_url)
