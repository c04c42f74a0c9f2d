"""Database factory functions for creating database instances."""

import logging
import os
from pathlib import Path
from typing import Optional

from salarizare.database.sqlalchemy_db import SQLAlchemyDatabase

logger = logging.getLogger(__name__)

DB_PATH_ENV = "SALARIZARE_DB_PATH"


def default_database_path() -> str:
    """Return ~/.salarizare/salarizare.db, creating the directory if needed."""
    db_dir = Path.home() / ".salarizare"
    db_dir.mkdir(exist_ok=True)
    return str(db_dir / "salarizare.db")


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks SALARIZARE_DB_PATH
            environment variable, then defaults to ~/.salarizare/salarizare.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get(DB_PATH_ENV)

    if database_path is None:
        database_path = default_database_path()

    logger.debug("Opening SQLite database at %s", database_path)
    return SQLAlchemyDatabase(f"sqlite:///{database_path}")
