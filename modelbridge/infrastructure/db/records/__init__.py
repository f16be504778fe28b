"""Minimal SQLite record layer used as the adapter's persistence collaborator."""

from .base import BaseRepository
from .database import Database, default_database
from .errors import RecordError, RecordNotFoundError
from .manager import Manager
from .record import Record, Relationship, load_related

__all__ = [
    "BaseRepository",
    "Database",
    "Manager",
    "Record",
    "RecordError",
    "RecordNotFoundError",
    "Relationship",
    "default_database",
    "load_related",
]
