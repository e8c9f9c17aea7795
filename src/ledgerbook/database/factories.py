"""Database factory functions for creating database instances."""

import logging
import os
from pathlib import Path
from typing import Optional

from ledgerbook.database.sqlalchemy_db import SQLAlchemyDatabase

logger = logging.getLogger(__name__)

DB_PATH_ENV = "LEDGERBOOK_DB_PATH"


def default_database_path() -> Path:
    """Return ~/.ledgerbook/ledgerbook.db, creating the directory if needed."""
    db_dir = Path.home() / ".ledgerbook"
    db_dir.mkdir(parents=True, exist_ok=True)
    return db_dir / "ledgerbook.db"


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite ledger store.

    Args:
        database_path: Path to the SQLite file. If None, LEDGERBOOK_DB_PATH is
            used, then ~/.ledgerbook/ledgerbook.db. Missing parent directories
            are created and "~" is expanded.

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get(DB_PATH_ENV) or None

    if database_path is None:
        path = default_database_path()
    else:
        path = Path(database_path).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)

    logger.debug("Using SQLite database at %s", path)
    return SQLAlchemyDatabase(f"sqlite:///{path}")
