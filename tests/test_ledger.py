"""Tests for the business ledger."""

from datetime import date, timedelta

from polymath.domain.entities import CleaningExtras
from polymath.domain.ledger import BusinessLedger
from polymath.domain.registry import get_business


def _recomputed(ledger):
    return (
        sum(e.revenue for e in ledger.entries),
        sum(e.salaries for e in ledger.entries),
        sum(e.expenses for e in ledger.entries),
        sum(e.net_profit for e in ledger.entries),
    )


class TestAppend:
    """Tests for BusinessLedger.append."""

    def test_append_computes_profit_and_totals(self, iclean_ledger):
        entry = iclean_ledger.append(
            {"revenue": 1000, "salaries": 200, "expenses": 300}, date(2024, 1, 1)
        )
        assert entry.net_profit == 500
        assert iclean_ledger.entries == [entry]
        assert iclean_ledger.totals() == (1000, 200, 300, 500)

    def test_append_ignores_supplied_profit(self, iclean_ledger):
        entry = iclean_ledger.append({"revenue": 100, "netProfit": 1}, date(2024, 1, 1))
        assert entry.net_profit == 100
        assert iclean_ledger.total_net_profit == 100

    def test_append_keeps_same_date_entries_separate(self, iclean_ledger):
        iclean_ledger.append({"revenue": 100}, date(2024, 1, 1))
        iclean_ledger.append({"revenue": 50}, date(2024, 1, 1))
        assert len(iclean_ledger.entries) == 2
        assert iclean_ledger.total_revenue == 150

    def test_append_never_fails_on_field_values(self, iclean_ledger):
        entry = iclean_ledger.append(
            {"date": "not a date", "revenue": "lots", "clients": "many"}, date(2024, 1, 1)
        )
        assert entry.date == date(2024, 1, 1)
        assert entry.revenue == 0
        assert entry.extras == CleaningExtras(clients=0.0)

    def test_append_with_extras(self, iclean_ledger):
        entry = iclean_ledger.append({"clients": "12", "hours": 30}, date(2024, 1, 1))
        assert entry.extras == CleaningExtras(clients=12.0, hours=30.0)


class TestUpsertToday:
    """Tests for BusinessLedger.upsert_today."""

    def test_creates_entry_on_empty_ledger(self, iclean_ledger, today):
        entry = iclean_ledger.upsert_today({"revenue": 400}, today)
        assert entry.date == today
        assert entry.salaries == 0
        assert entry.notes == ""
        assert entry.net_profit == 400
        assert iclean_ledger.totals() == (400, 0, 0, 400)

    def test_same_day_updates_overlay(self, iclean_ledger, today):
        """Test that a second update overlays rather than accumulates."""
        iclean_ledger.upsert_today({"revenue": 400, "salaries": 100}, today)
        entry = iclean_ledger.upsert_today({"revenue": 250}, today)

        assert len(iclean_ledger.entries) == 1
        assert entry.revenue == 250
        assert entry.salaries == 100
        assert entry.net_profit == 150
        assert iclean_ledger.totals() == (250, 100, 0, 150)

    def test_new_day_appends(self, iclean_ledger, today):
        yesterday = today - timedelta(days=1)
        iclean_ledger.upsert_today({"revenue": 100}, yesterday)
        iclean_ledger.upsert_today({"revenue": 300}, today)

        assert [e.date for e in iclean_ledger.entries] == [yesterday, today]
        assert iclean_ledger.total_revenue == 400

    def test_update_recomputes_totals_from_all_entries(self, iclean_ledger, today):
        iclean_ledger.append({"revenue": 1000, "expenses": 100}, date(2024, 1, 1))
        iclean_ledger.upsert_today({"revenue": 10}, today)
        iclean_ledger.upsert_today({"expenses": 5, "salaries": 2}, today)

        assert iclean_ledger.totals() == (1010, 2, 105, 903)

    def test_extras_merge_into_today(self, iclean_ledger, today):
        iclean_ledger.upsert_today({"clients": 3}, today)
        entry = iclean_ledger.upsert_today({"hours": 7.5}, today)
        assert entry.extras == CleaningExtras(clients=3.0, hours=7.5)

    def test_totals_never_drift(self, iclean_ledger, today):
        """Test incremental totals against a full recompute after mixed operations."""
        day = today - timedelta(days=10)
        for i in range(10):
            iclean_ledger.append(
                {"revenue": 100 + i, "salaries": i, "expenses": 3}, day + timedelta(days=i)
            )
            iclean_ledger.upsert_today({"revenue": 7 * i, "expenses": i}, today)
            assert iclean_ledger.totals() == _recomputed(iclean_ledger)
            for entry in iclean_ledger.entries:
                assert entry.net_profit == entry.revenue - entry.salaries - entry.expenses


class TestOrderingAssumption:
    """upsert_today only ever inspects the last entry in insertion order."""

    def test_backfill_then_today_appends(self, iclean_ledger, today):
        iclean_ledger.upsert_today({"revenue": 100}, today)
        iclean_ledger.append({"revenue": 50}, today - timedelta(days=3))
        iclean_ledger.upsert_today({"revenue": 200}, today)

        assert [e.date for e in iclean_ledger.entries] == [
            today,
            today - timedelta(days=3),
            today,
        ]
        assert iclean_ledger.entries[0].revenue == 100
        assert iclean_ledger.total_revenue == 350

    def test_later_dated_last_entry_is_not_merged(self, iclean_ledger, today):
        tomorrow = today + timedelta(days=1)
        iclean_ledger.append({"revenue": 10}, tomorrow)
        iclean_ledger.upsert_today({"revenue": 20}, today)

        assert [e.date for e in iclean_ledger.entries] == [tomorrow, today]


class TestLatestEntry:
    """Tests for BusinessLedger.latest_entry."""

    def test_empty_ledger_returns_zero_entry(self, iclean_ledger, today):
        entry = iclean_ledger.latest_entry(today)
        assert entry.date == today
        assert entry.net_profit == 0
        assert iclean_ledger.entries == []

    def test_returns_last_entry(self, iclean_ledger, today):
        iclean_ledger.append({"revenue": 5}, date(2024, 1, 2))
        last = iclean_ledger.append({"revenue": 7}, date(2024, 1, 1))
        assert iclean_ledger.latest_entry(today) == last


def test_copy_is_independent(iclean_ledger, today):
    iclean_ledger.upsert_today({"revenue": 5}, today)
    copy = iclean_ledger.copy()
    iclean_ledger.upsert_today({"revenue": 9}, today)

    assert copy.entries[0].revenue == 5
    assert copy.total_revenue == 5
    assert copy != iclean_ledger


def test_empty_uses_registry_identity():
    ledger = BusinessLedger.empty(get_business("apmg"))
    assert (ledger.id, ledger.name, ledger.color) == ("apmg", "Angry Panda Music Group", "apmg")
    assert ledger.totals() == (0, 0, 0, 0)
    assert ledger.entries == []


def test_append_date_object(iclean_ledger):
    entry = iclean_ledger.append({}, date(2024, 2, 29))
    assert entry.date == date(2024, 2, 29)
