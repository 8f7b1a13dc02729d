"""Storage layer for polymath."""

from polymath.database.base import KeyValueStore
from polymath.database.factories import create_sqlite_store
from polymath.database.gateway import PersistenceGateway
from polymath.database.memory import InMemoryStore

__all__ = ["KeyValueStore", "create_sqlite_store", "PersistenceGateway", "InMemoryStore"]
