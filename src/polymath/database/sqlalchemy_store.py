"""SQLAlchemy implementation of the key-value store."""

from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from polymath.database.base import KeyValueStore
from polymath.database.models import KeyValueEntry, create_session_factory
from polymath.domain.errors import StorageError, storage_failure


class SQLAlchemyStore(KeyValueStore):
    """Key-value store backed by a single SQLAlchemy table."""

    def __init__(self, database_url: str):
        """Initialize the store.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db')

        Raises:
            StorageError: If the database cannot be opened
        """
        self.database_url = database_url
        try:
            self.session_factory = create_session_factory(database_url)
        except SQLAlchemyError as e:
            raise StorageError(storage_failure("open", database_url, e)) from e
        self._session: Optional[Session] = None

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def connect(self) -> None:
        """Connect to the database."""
        # Connection is lazy, so this is a no-op
        pass

    def disconnect(self) -> None:
        """Disconnect from the database."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def get(self, key: str) -> Optional[str]:
        session = self._get_session()
        try:
            row = session.get(KeyValueEntry, key)
        except SQLAlchemyError as e:
            session.rollback()
            raise StorageError(storage_failure("read", key, e)) from e
        return None if row is None else row.value

    def set(self, key: str, value: str) -> None:
        session = self._get_session()
        try:
            row = session.get(KeyValueEntry, key)
            if row is None:
                session.add(KeyValueEntry(key=key, value=value))
            else:
                row.value = value
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise StorageError(storage_failure("write", key, e)) from e

    def delete(self, key: str) -> None:
        session = self._get_session()
        try:
            row = session.get(KeyValueEntry, key)
            if row is not None:
                session.delete(row)
                session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise StorageError(storage_failure("delete", key, e)) from e
