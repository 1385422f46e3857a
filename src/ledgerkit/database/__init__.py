"""Database layer for ledgerkit."""

from ledgerkit.database.base import Database, UnitOfWork
from ledgerkit.database.factories import create_database, create_sqlite_database

__all__ = ["Database", "UnitOfWork", "create_database", "create_sqlite_database"]
