"""Persistence gateway: write-through storage of the portfolio and its history."""

import json
from typing import Optional, Sequence

import structlog

from polymath.database.base import KeyValueStore
from polymath.database.mappers import history_to_json, portfolio_to_json
from polymath.domain.errors import StorageError, ValidationError
from polymath.domain.ledger import BusinessLedger
from polymath.domain.migration import (
    load_history_payload,
    load_portfolio_payload,
    needs_upgrade,
)

logger = structlog.get_logger(__name__)

DATA_KEY = "polymath-dashboard-data"
HISTORY_KEY = "polymath-dashboard-history"
HISTORY_LIMIT = 52

Snapshot = list[BusinessLedger]


class PersistenceGateway:
    """Reads and writes the full portfolio state through a key-value store.

    Storage failures never propagate. A failed read is treated as "no data";
    a failed write is logged and sets ``degraded`` so callers can warn that
    changes are only held in memory.
    """

    def __init__(self, store: KeyValueStore, history_limit: int = HISTORY_LIMIT):
        """Initialize the gateway.

        Args:
            store: Storage medium
            history_limit: Maximum number of snapshots kept

        Raises:
            ValidationError: If history_limit is not positive
        """
        if history_limit < 1:
            raise ValidationError(f"History limit must be positive, got {history_limit}")
        self.store = store
        self.history_limit = history_limit
        self.degraded = False

    def _read(self, key: str) -> Optional[str]:
        try:
            return self.store.get(key)
        except StorageError as e:
            logger.warning("storage read failed, using empty state", key=key, error=str(e))
            self.degraded = True
            return None

    def _write(self, key: str, value: str) -> bool:
        try:
            self.store.set(key, value)
        except StorageError as e:
            logger.error("storage write failed, keeping state in memory", key=key, error=str(e))
            self.degraded = True
            return False
        return True

    def load_portfolio(self) -> list[BusinessLedger]:
        """Load the five ledgers, migrating legacy records; never raises."""
        ledgers = load_portfolio_payload(self._read(DATA_KEY))
        logger.debug("portfolio loaded", entries=sum(len(l.entries) for l in ledgers))
        return ledgers

    def save_portfolio(self, ledgers: Sequence[BusinessLedger]) -> bool:
        """Write the whole portfolio under a single key.

        Returns:
            True if the store accepted the write
        """
        return self._write(DATA_KEY, portfolio_to_json(ledgers))

    def load_history(self) -> list[Snapshot]:
        """Load stored snapshots, oldest first; never raises."""
        return load_history_payload(self._read(HISTORY_KEY))

    def commit_snapshot(
        self, history: Sequence[Snapshot], ledgers: Sequence[BusinessLedger]
    ) -> list[Snapshot]:
        """Append a copy of the portfolio to history and persist it.

        The oldest snapshots are evicted once the limit is exceeded.

        Args:
            history: Current snapshot history, oldest first
            ledgers: Portfolio state to archive

        Returns:
            The new history list
        """
        snapshot = [ledger.copy() for ledger in ledgers]
        new_history = [*history, snapshot][-self.history_limit:]
        self._write(HISTORY_KEY, history_to_json(new_history))
        logger.info("snapshot committed", snapshots=len(new_history))
        return new_history

    def upgrade_stored_payload(self) -> bool:
        """Rewrite a stored legacy-shaped payload in the current shape.

        Returns:
            True if the stored payload was rewritten
        """
        text = self._read(DATA_KEY)
        if not text:
            return False
        try:
            payload = json.loads(text)
        except ValueError:
            logger.warning("stored payload is not valid JSON, leaving it untouched")
            return False
        if not needs_upgrade(payload):
            return False
        upgraded = self.save_portfolio(load_portfolio_payload(text))
        if upgraded:
            logger.info("stored payload upgraded to current shape")
        return upgraded

    def clear(self) -> None:
        """Remove stored portfolio and history."""
        for key in (DATA_KEY, HISTORY_KEY):
            try:
                self.store.delete(key)
            except StorageError as e:
                logger.error("storage delete failed", key=key, error=str(e))
                self.degraded = True
