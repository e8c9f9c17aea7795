"""Ledger store for ledgerbook: abstract interface and SQLite factory."""

from ledgerbook.database.base import Database
from ledgerbook.database.factories import create_sqlite_database
from ledgerbook.database.sqlalchemy_db import SQLAlchemyDatabase

__all__ = ["Database", "SQLAlchemyDatabase", "create_sqlite_database"]
