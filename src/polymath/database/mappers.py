"""Mapper functions to convert domain ledgers into stored JSON records.

Records use the dashboard's wire names (camelCase, ISO dates) so payloads
written here can be read back by the migration loader, and by older
dashboard builds that only know the current shape.
"""

import json
from typing import Any, Sequence

from polymath.domain.entities import Entry, extras_to_dict
from polymath.domain.ledger import BusinessLedger


def entry_to_record(entry: Entry) -> dict[str, Any]:
    """Convert an Entry to its stored record; absent extras are omitted."""
    record: dict[str, Any] = {
        "date": entry.date.isoformat(),
        "revenue": entry.revenue,
        "salaries": entry.salaries,
        "expenses": entry.expenses,
        "netProfit": entry.net_profit,
    }
    record.update(extras_to_dict(entry.extras))
    record["notes"] = entry.notes
    return record


def ledger_to_record(ledger: BusinessLedger) -> dict[str, Any]:
    """Convert a BusinessLedger to its stored record."""
    return {
        "id": ledger.id,
        "name": ledger.name,
        "color": ledger.color,
        "entries": [entry_to_record(entry) for entry in ledger.entries],
        "totalRevenue": ledger.total_revenue,
        "totalSalaries": ledger.total_salaries,
        "totalExpenses": ledger.total_expenses,
        "totalNetProfit": ledger.total_net_profit,
    }


def portfolio_to_records(ledgers: Sequence[BusinessLedger]) -> list[dict[str, Any]]:
    return [ledger_to_record(ledger) for ledger in ledgers]


def portfolio_to_json(ledgers: Sequence[BusinessLedger]) -> str:
    """Serialize the whole portfolio as one JSON document."""
    return json.dumps(portfolio_to_records(ledgers))


def history_to_json(history: Sequence[Sequence[BusinessLedger]]) -> str:
    """Serialize snapshot history as a JSON array of portfolios."""
    return json.dumps([portfolio_to_records(snapshot) for snapshot in history])
