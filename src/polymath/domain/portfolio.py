"""Portfolio domain service: the dashboard's query and command surface."""

from datetime import date, datetime
from typing import Any, Callable, Mapping, Optional

import structlog

from polymath.database.gateway import PersistenceGateway, Snapshot
from polymath.domain.entities import BusinessMetrics, Entry, OverallHealth
from polymath.domain.errors import NotFoundError, ValidationError, business_not_found, invalid_date
from polymath.domain.ledger import BusinessLedger
from polymath.domain.metrics import business_metrics, empty_metrics, overall_health
from polymath.domain.migration import empty_portfolio
from polymath.utils.date_parser import to_date, utc_now

logger = structlog.get_logger(__name__)


class PortfolioService:
    """Service holding the in-memory portfolio and writing it through storage.

    Every command mutates one ledger and then persists the complete
    portfolio. Queries only read in-memory state.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize portfolio service and load stored state.

        Args:
            gateway: Persistence gateway
            clock: Returns the current timezone-aware instant (defaults to UTC now)
        """
        self.gateway = gateway
        self.clock = clock or utc_now
        self._ledgers: list[BusinessLedger] = gateway.load_portfolio()
        self._history: list[Snapshot] = gateway.load_history()

    @property
    def businesses(self) -> tuple[BusinessLedger, ...]:
        """All ledgers in registry order."""
        return tuple(self._ledgers)

    @property
    def history(self) -> tuple[Snapshot, ...]:
        """Committed snapshots, oldest first."""
        return tuple(self._history)

    @property
    def degraded(self) -> bool:
        """True once storage has failed and state lives only in memory."""
        return self.gateway.degraded

    def today(self) -> date:
        return self.clock().date()

    def find_ledger(self, business_id: str) -> Optional[BusinessLedger]:
        for ledger in self._ledgers:
            if ledger.id == business_id:
                return ledger
        return None

    def require_ledger(self, business_id: str) -> BusinessLedger:
        """Get a ledger by business id.

        Raises:
            NotFoundError: If the id is not in the registry
        """
        ledger = self.find_ledger(business_id)
        if ledger is None:
            raise NotFoundError(business_not_found(business_id))
        return ledger

    # Queries
    def get_current_entry(self, business_id: str) -> Entry:
        """Latest entry of a business, or a zero entry dated today."""
        ledger = self.find_ledger(business_id)
        if ledger is None:
            return Entry.blank(self.today())
        return ledger.latest_entry(self.today())

    def get_business_metrics(self, business_id: str) -> BusinessMetrics:
        """Windowed metrics for a business; unknown ids get zeroed metrics."""
        ledger = self.find_ledger(business_id)
        if ledger is None:
            return empty_metrics()
        return business_metrics(ledger, self.clock())

    def get_overall_health(self) -> OverallHealth:
        return overall_health(self._ledgers)

    # Commands
    def update_current_entry(self, business_id: str, updates: Mapping[str, Any]) -> Entry:
        """Merge a partial update into today's entry for a business.

        Args:
            business_id: Registry id
            updates: Partial entry fields

        Returns:
            The updated or newly created entry

        Raises:
            NotFoundError: If the id is not in the registry
            ValidationError: If a supplied date cannot be parsed
        """
        ledger = self.require_ledger(business_id)
        entry = ledger.upsert_today(updates, self.today())
        self._persist()
        logger.info("current entry updated", business_id=business_id, date=entry.date.isoformat())
        return entry

    def add_business_entry(self, business_id: str, entry: Mapping[str, Any]) -> Entry:
        """Append an explicit entry for a business.

        An entry without a date is recorded for today.

        Raises:
            NotFoundError: If the id is not in the registry
            ValidationError: If a supplied date cannot be parsed
        """
        ledger = self.require_ledger(business_id)
        raw_date = entry.get("date")
        if raw_date is None:
            day = self.today()
        else:
            try:
                day = to_date(raw_date)
            except ValueError:
                raise ValidationError(invalid_date(raw_date))
        stored = ledger.append(entry, day)
        self._persist()
        logger.info("entry added", business_id=business_id, date=stored.date.isoformat())
        return stored

    def save_data(self) -> int:
        """Persist the portfolio and commit a snapshot to history.

        Returns:
            Number of snapshots now held
        """
        self._persist()
        self._history = self.gateway.commit_snapshot(self._history, self._ledgers)
        return len(self._history)

    def reset(self) -> None:
        """Discard all ledgers and history, in memory and in storage."""
        self._ledgers = empty_portfolio()
        self._history = []
        self.gateway.clear()
        logger.info("portfolio reset")

    def _persist(self) -> None:
        self.gateway.save_portfolio(self._ledgers)
