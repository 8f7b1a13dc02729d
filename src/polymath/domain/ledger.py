"""Business ledger: the entries of one business unit and their running totals."""

from datetime import date
from typing import Any, Mapping, Optional

import structlog

from polymath.domain.entities import Entry, extras_type_for, normalize_fields
from polymath.domain.registry import Business

logger = structlog.get_logger(__name__)


class BusinessLedger:
    """Ordered entries for one business plus running totals.

    Entries keep insertion order, which is the order updates were applied
    and not necessarily date order. ``upsert_today`` only ever looks at the
    last element: if a caller backfills a past date, a later update for
    today appends a new entry instead of merging into any earlier one.
    """

    def __init__(
        self,
        id: str,
        name: str,
        color: str,
        entries: Optional[list[Entry]] = None,
        total_revenue: float = 0.0,
        total_salaries: float = 0.0,
        total_expenses: float = 0.0,
        total_net_profit: float = 0.0,
    ):
        self.id = id
        self.name = name
        self.color = color
        self.entries: list[Entry] = list(entries or [])
        self.total_revenue = total_revenue
        self.total_salaries = total_salaries
        self.total_expenses = total_expenses
        self.total_net_profit = total_net_profit

    @classmethod
    def empty(cls, business: Business) -> "BusinessLedger":
        """Create a ledger with no entries for a registry business."""
        return cls(id=business.id, name=business.name, color=business.color)

    def __repr__(self) -> str:
        return (
            f"BusinessLedger(id={self.id!r}, entries={len(self.entries)}, "
            f"total_net_profit={self.total_net_profit!r})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BusinessLedger):
            return NotImplemented
        return (
            self.id == other.id
            and self.name == other.name
            and self.color == other.color
            and self.entries == other.entries
            and self.totals() == other.totals()
        )

    def totals(self) -> tuple[float, float, float, float]:
        """Return (revenue, salaries, expenses, net profit) totals."""
        return (
            self.total_revenue,
            self.total_salaries,
            self.total_expenses,
            self.total_net_profit,
        )

    def append(self, fields: Mapping[str, Any], day: date) -> Entry:
        """Append a new entry and add its contribution to the totals.

        Numeric fields are coerced, so this never fails.

        Args:
            fields: Entry payload. Any ``date`` or net profit in it is ignored.
            day: Entry date

        Returns:
            The stored entry
        """
        changes = normalize_fields(self.id, {k: v for k, v in fields.items() if k != "date"})
        entry = Entry.blank(day).merge(changes, extras_type_for(self.id))
        self._push(entry)
        logger.debug("entry appended", business_id=self.id, date=day.isoformat())
        return entry

    def upsert_today(self, updates: Mapping[str, Any], today: date) -> Entry:
        """Merge an update into today's entry, creating it if needed.

        If the last entry is dated ``today`` the update is overlaid in place
        and all totals are recomputed from the full entry list. Otherwise a
        zero-valued entry for ``today`` is created, the update overlaid, and
        the entry appended with incremental totals.

        Args:
            updates: Partial entry payload
            today: Current reporting date

        Returns:
            The merged or newly created entry
        """
        changes = normalize_fields(self.id, updates)
        extras_type = extras_type_for(self.id)
        last = self.entries[-1] if self.entries else None

        if last is not None and last.date == today:
            entry = last.merge(changes, extras_type)
            self.entries[-1] = entry
            self.recompute_totals()
            logger.debug("today's entry updated", business_id=self.id, date=today.isoformat())
            return entry

        entry = Entry.blank(today).merge(changes, extras_type)
        self._push(entry)
        logger.debug("today's entry created", business_id=self.id, date=today.isoformat())
        return entry

    def latest_entry(self, today: date) -> Entry:
        """Return the last entry, or a zero entry dated ``today``."""
        if self.entries:
            return self.entries[-1]
        return Entry.blank(today)

    def recompute_totals(self) -> None:
        """Recompute all four totals from the entry list."""
        self.total_revenue = sum(e.revenue for e in self.entries)
        self.total_salaries = sum(e.salaries for e in self.entries)
        self.total_expenses = sum(e.expenses for e in self.entries)
        self.total_net_profit = sum(e.net_profit for e in self.entries)

    def copy(self) -> "BusinessLedger":
        """Independent copy; entries are immutable so a list copy suffices."""
        return BusinessLedger(
            id=self.id,
            name=self.name,
            color=self.color,
            entries=list(self.entries),
            total_revenue=self.total_revenue,
            total_salaries=self.total_salaries,
            total_expenses=self.total_expenses,
            total_net_profit=self.total_net_profit,
        )

    def _push(self, entry: Entry) -> None:
        self.entries.append(entry)
        self.total_revenue += entry.revenue
        self.total_salaries += entry.salaries
        self.total_expenses += entry.expenses
        self.total_net_profit += entry.net_profit
