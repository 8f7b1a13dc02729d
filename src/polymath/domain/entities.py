"""Domain model entities for polymath.

These are pure data classes describing one reporting-day measurement for a
business unit, the business-specific extras attached to it, and the derived
metric records handed to the presentation layer. They know nothing about how
the portfolio is stored.
"""

from dataclasses import dataclass, field, fields, replace
from datetime import date
from enum import Enum
from typing import Any, Mapping, Optional, Union

import structlog

from polymath.domain.errors import ValidationError, invalid_date
from polymath.utils.amount_parser import coerce_number, coerce_optional_number
from polymath.utils.date_parser import to_date

logger = structlog.get_logger(__name__)

MONEY_FIELDS = ("revenue", "salaries", "expenses")
DERIVED_FIELDS = ("netProfit", "net_profit")
TEXT_EXTRAS = frozenset({"items"})


@dataclass(frozen=True)
class CleaningExtras:
    """iClean: client visits and staff hours."""

    clients: Optional[float] = None
    hours: Optional[float] = None


@dataclass(frozen=True)
class CandyExtras:
    """iCandy Factory: clients, staff hours and investor funds."""

    clients: Optional[float] = None
    hours: Optional[float] = None
    investor: Optional[float] = None


@dataclass(frozen=True)
class LogisticsExtras:
    """Angry Panda Logistics: purchased item list and investor funds."""

    items: Optional[str] = None
    investor: Optional[float] = None


@dataclass(frozen=True)
class MusicExtras:
    """Angry Panda Music Group: video and promotion spend."""

    video: Optional[float] = None
    promotion: Optional[float] = None


@dataclass(frozen=True)
class FundExtras:
    """Insta Fund: transaction count."""

    transactions: Optional[float] = None


Extras = Union[CleaningExtras, CandyExtras, LogisticsExtras, MusicExtras, FundExtras]

EXTRAS_BY_BUSINESS: dict[str, type] = {
    "iclean": CleaningExtras,
    "icandy": CandyExtras,
    "apl": LogisticsExtras,
    "apmg": MusicExtras,
    "instafund": FundExtras,
}


def extras_type_for(business_id: str) -> Optional[type]:
    """Return the extras record class declared for a business."""
    return EXTRAS_BY_BUSINESS.get(business_id)


def extra_field_names(business_id: str) -> tuple[str, ...]:
    """Return the business-specific field names a business uses."""
    extras_type = extras_type_for(business_id)
    if extras_type is None:
        return ()
    return tuple(f.name for f in fields(extras_type))


def extras_to_dict(extras: Optional[Extras]) -> dict[str, Any]:
    """Return the present (non-None) extras fields."""
    if extras is None:
        return {}
    return {
        f.name: getattr(extras, f.name)
        for f in fields(extras)
        if getattr(extras, f.name) is not None
    }


@dataclass(frozen=True)
class Entry:
    """One dated measurement for one business unit.

    ``net_profit`` is not an init argument: it is always derived from the
    three money fields when the entry is built, so no caller can store an
    inconsistent value.
    """

    date: date
    revenue: float = 0.0
    salaries: float = 0.0
    expenses: float = 0.0
    notes: str = ""
    extras: Optional[Extras] = None
    net_profit: float = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "net_profit", self.revenue - self.salaries - self.expenses
        )

    @classmethod
    def blank(cls, day: date) -> "Entry":
        """Zero-valued entry for the given day."""
        return cls(date=day)

    def merge(self, changes: Mapping[str, Any], extras_type: Optional[type] = None) -> "Entry":
        """Return a copy with normalized changes overlaid.

        Args:
            changes: Output of normalize_fields; base fields and extras keys
            extras_type: Extras class to instantiate when this entry has none

        Returns:
            New Entry with net profit recomputed
        """
        base_changes = {k: v for k, v in changes.items() if k in _BASE_FIELDS}
        extra_changes = {k: v for k, v in changes.items() if k not in _BASE_FIELDS}

        extras = self.extras
        if extra_changes:
            if extras is None:
                if extras_type is None:
                    raise ValidationError(
                        f"Entry has no extras schema for {sorted(extra_changes)}"
                    )
                extras = extras_type()
            extras = replace(extras, **extra_changes)

        return replace(self, extras=extras, **base_changes)


_BASE_FIELDS = frozenset({"date", "notes", *MONEY_FIELDS})


def normalize_fields(business_id: str, raw: Mapping[str, Any]) -> dict[str, Any]:
    """Coerce a partial entry payload into canonical field values.

    Money fields and numeric extras are coerced to numbers (invalid input
    becomes 0), ``items`` and ``notes`` to text, and ``date`` to a date.
    Derived net profit and fields outside the business's schema are dropped.

    Raises:
        ValidationError: If a supplied date cannot be parsed
    """
    allowed_extras = set(extra_field_names(business_id))
    result: dict[str, Any] = {}
    ignored = []

    for key, value in raw.items():
        if key in DERIVED_FIELDS:
            continue
        if key == "date":
            try:
                result["date"] = to_date(value)
            except ValueError:
                raise ValidationError(invalid_date(value))
        elif key in MONEY_FIELDS:
            result[key] = coerce_number(value)
        elif key == "notes":
            result["notes"] = "" if value is None else str(value)
        elif key in allowed_extras:
            if key in TEXT_EXTRAS:
                result[key] = None if value is None else str(value)
            else:
                result[key] = coerce_optional_number(value)
        else:
            ignored.append(key)

    if ignored:
        logger.warning(
            "ignoring fields outside business schema",
            business_id=business_id,
            fields=sorted(ignored),
        )
    return result


class HealthStatus(str, Enum):
    """Per-business classification of all-time net profit."""

    EXCELLENT = "excellent"
    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"


class Trend(str, Enum):
    """Direction of the portfolio's most recent profit movement."""

    UP = "up"
    DOWN = "down"
    STABLE = "stable"


@dataclass(frozen=True)
class BusinessMetrics:
    """Time-windowed profit metrics for one business."""

    current_week: float
    previous_week: float
    month_to_date: float
    weekly_growth: float
    health_status: HealthStatus


@dataclass(frozen=True)
class HistoricalPoint:
    """Portfolio-wide totals for a single reporting date."""

    date: date
    total_net_profit: float
    total_revenue: float


@dataclass(frozen=True)
class OverallHealth:
    """Portfolio-wide aggregate health."""

    total_revenue: float
    total_net_profit: float
    total_expenses: float
    health_score: float
    trend: Trend
    profit_margin: float
    historical_data: tuple[HistoricalPoint, ...] = ()
