"""Decoding of persisted portfolio payloads, including the legacy flat shape.

Early versions stored one flattened entry per business::

    {"id": "iclean", "name": "iClean", "color": "iclean",
     "date": "2024-01-01", "revenue": 1000, "salaries": 200, "expenses": 300}

The current shape stores the full ledger (``entries`` plus ``total*``
fields). Every record is classified into exactly one of three shapes and
decoded by the matching branch.
"""

import json
from enum import Enum
from typing import Any, Mapping, Optional

import structlog

from polymath.domain.entities import (
    MONEY_FIELDS,
    Entry,
    extra_field_names,
    extras_type_for,
    normalize_fields,
)
from polymath.domain.errors import ValidationError
from polymath.domain.ledger import BusinessLedger
from polymath.domain.registry import BUSINESSES, Business, get_business
from polymath.utils.amount_parser import coerce_number

logger = structlog.get_logger(__name__)

TOTAL_KEYS = ("totalRevenue", "totalSalaries", "totalExpenses", "totalNetProfit")


class RecordShape(str, Enum):
    """Shape of a persisted business record."""

    CURRENT = "current"
    LEGACY = "legacy"
    EMPTY = "empty"


def empty_portfolio() -> list[BusinessLedger]:
    """One empty ledger per registry business, in registry order."""
    return [BusinessLedger.empty(business) for business in BUSINESSES]


def classify_record(raw: Mapping[str, Any]) -> RecordShape:
    """Decide which decoder applies to a stored record."""
    if raw.get("entries") is not None:
        return RecordShape.CURRENT
    if raw.get("date"):
        return RecordShape.LEGACY
    return RecordShape.EMPTY


def decode_entry(business_id: str, raw: Any) -> Entry:
    """Decode one stored entry; stored net profit is ignored and recomputed.

    Raises:
        ValueError: If the entry is not a mapping or has no usable date
    """
    if not isinstance(raw, Mapping):
        raise ValueError(f"Entry for '{business_id}' is not an object: {raw!r}")
    wanted = {"date", "notes", *MONEY_FIELDS, *extra_field_names(business_id)}
    changes = normalize_fields(business_id, {k: v for k, v in raw.items() if k in wanted})
    if "date" not in changes:
        raise ValidationError(f"Entry for '{business_id}' has no date")
    return Entry.blank(changes["date"]).merge(changes, extras_type_for(business_id))


def decode_current(business: Business, raw: Mapping[str, Any]) -> BusinessLedger:
    """Decode a record that already carries an ``entries`` list.

    Unreadable entries are skipped. Stored totals are kept as they are unless
    an entry was skipped or a total is missing; then all four are recomputed
    from the entries that remain.

    Raises:
        ValueError: If ``entries`` is not a list
    """
    raw_entries = raw["entries"]
    if not isinstance(raw_entries, list):
        raise ValueError(f"'entries' for '{business.id}' is not a list")

    ledger = BusinessLedger.empty(business)
    skipped = 0
    for item in raw_entries:
        try:
            ledger.entries.append(decode_entry(business.id, item))
        except ValueError as e:
            logger.warning("skipping unreadable entry", business_id=business.id, error=str(e))
            skipped += 1
    if not skipped and all(key in raw for key in TOTAL_KEYS):
        (
            ledger.total_revenue,
            ledger.total_salaries,
            ledger.total_expenses,
            ledger.total_net_profit,
        ) = (coerce_number(raw[key]) for key in TOTAL_KEYS)
    else:
        ledger.recompute_totals()
    return ledger


def decode_legacy(business: Business, raw: Mapping[str, Any]) -> BusinessLedger:
    """Promote a flattened single-entry record to a one-entry ledger."""
    entry = decode_entry(business.id, raw)
    return BusinessLedger(
        id=business.id,
        name=business.name,
        color=business.color,
        entries=[entry],
        total_revenue=entry.revenue,
        total_salaries=entry.salaries,
        total_expenses=entry.expenses,
        total_net_profit=entry.net_profit,
    )


def decode_business_record(business: Business, raw: Mapping[str, Any]) -> BusinessLedger:
    """Decode a stored record for ``business`` according to its shape.

    Raises:
        ValueError: If the record is malformed
    """
    shape = classify_record(raw)
    if shape is RecordShape.CURRENT:
        return decode_current(business, raw)
    if shape is RecordShape.LEGACY:
        logger.info("migrating legacy record", business_id=business.id)
        return decode_legacy(business, raw)
    return BusinessLedger.empty(business)


def decode_portfolio(payload: Any) -> list[BusinessLedger]:
    """Decode a parsed payload into the five registry ledgers.

    The payload may be a list of records carrying ``id`` or a mapping from
    business id to record. Identity fields always come from the registry.
    Records for unknown ids and records that cannot be decoded are dropped
    with a warning; the other businesses keep their data.

    Raises:
        ValueError: If the payload is neither a list nor an object
    """
    if isinstance(payload, Mapping):
        items = [(str(key), record) for key, record in payload.items()]
    elif isinstance(payload, list):
        items = [
            (record.get("id") if isinstance(record, Mapping) else None, record)
            for record in payload
        ]
    else:
        raise ValueError(f"Portfolio payload must be a list or object, got {type(payload).__name__}")

    decoded: dict[str, BusinessLedger] = {}
    seen: set[str] = set()
    for business_id, record in items:
        if not isinstance(record, Mapping):
            logger.warning("dropping business record that is not an object", record=repr(record))
            continue
        business = get_business(business_id) if isinstance(business_id, str) else None
        if business is None:
            logger.warning("dropping record for unknown business", business_id=business_id)
            continue
        if business.id in seen:
            logger.warning("dropping duplicate business record", business_id=business.id)
            continue
        seen.add(business.id)
        try:
            decoded[business.id] = decode_business_record(business, record)
        except ValueError as e:
            logger.warning("dropping unreadable business record", business_id=business.id, error=str(e))

    return [decoded.get(b.id) or BusinessLedger.empty(b) for b in BUSINESSES]


def load_portfolio_payload(text: Optional[str]) -> list[BusinessLedger]:
    """Parse stored portfolio JSON, falling back to an empty portfolio.

    Never raises. Only an absent or unparseable payload, or one that is
    neither a list nor an object, yields the empty portfolio; unreadable
    records and entries inside it are skipped individually.
    """
    if not text:
        return empty_portfolio()
    try:
        return decode_portfolio(json.loads(text))
    except (ValueError, TypeError) as e:
        logger.warning("discarding malformed portfolio payload", error=str(e))
        return empty_portfolio()


def load_history_payload(text: Optional[str]) -> list[list[BusinessLedger]]:
    """Parse stored snapshot history, falling back to no history.

    Snapshots that cannot be decoded are skipped; the rest are kept in order.
    """
    if not text:
        return []
    try:
        payload = json.loads(text)
    except (ValueError, TypeError) as e:
        logger.warning("discarding malformed history payload", error=str(e))
        return []
    if not isinstance(payload, list):
        logger.warning("discarding history payload that is not a list")
        return []

    history = []
    for index, snapshot in enumerate(payload):
        try:
            history.append(decode_portfolio(snapshot))
        except ValueError as e:
            logger.warning("skipping unreadable snapshot", index=index, error=str(e))
    return history


def needs_upgrade(payload: Any) -> bool:
    """True if a parsed payload holds any record not in the current shape."""
    if isinstance(payload, Mapping):
        records = list(payload.values())
    elif isinstance(payload, list):
        records = payload
    else:
        return False
    return any(
        isinstance(record, Mapping) and classify_record(record) is not RecordShape.CURRENT
        for record in records
    )
