"""In-memory key-value store."""

from typing import Optional

from polymath.database.base import KeyValueStore


class InMemoryStore(KeyValueStore):
    """Dictionary-backed store for tests and storage-less operation."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(initial or {})

    def connect(self) -> None:
        pass

    def disconnect(self) -> None:
        pass

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)
