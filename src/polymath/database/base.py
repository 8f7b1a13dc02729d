"""Abstract key-value storage interface."""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """String-by-key storage medium used by the persistence gateway.

    Implementations raise StorageError when the medium cannot be read or
    written.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the storage medium."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the storage medium."""
        pass

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key if present."""
        pass
