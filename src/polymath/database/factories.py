"""Factory functions for creating storage instances."""

import os
from pathlib import Path
from typing import Optional

from polymath.database.sqlalchemy_store import SQLAlchemyStore

DB_PATH_ENV = "POLYMATH_DB_PATH"


def default_database_path() -> str:
    """Return ~/.polymath/polymath.db, creating the directory."""
    db_dir = Path.home() / ".polymath"
    db_dir.mkdir(exist_ok=True)
    return str(db_dir / "polymath.db")


def create_sqlite_store(database_path: Optional[str] = None) -> SQLAlchemyStore:
    """Create a SQLite-backed key-value store.

    Args:
        database_path: Path to SQLite database file. If None, checks
            POLYMATH_DB_PATH environment variable, then defaults to
            ~/.polymath/polymath.db

    Returns:
        SQLAlchemyStore instance configured for SQLite

    Raises:
        StorageError: If the database file cannot be opened
    """
    if database_path is None:
        database_path = os.environ.get(DB_PATH_ENV)

    if database_path is None:
        database_path = default_database_path()

    return SQLAlchemyStore(f"sqlite:///{database_path}")
