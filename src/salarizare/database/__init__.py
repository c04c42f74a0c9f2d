"""Database layer for salarizare application."""

from salarizare.database.base import Database, WorkingDaysData
from salarizare.database.factories import create_sqlite_database

__all__ = ["Database", "WorkingDaysData", "create_sqlite_database"]
