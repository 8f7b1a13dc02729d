"""Tests for the persistence gateway."""

import json
import pytest

from polymath.database.gateway import DATA_KEY, HISTORY_KEY, HISTORY_LIMIT, PersistenceGateway
from polymath.database.mappers import entry_to_record, ledger_to_record
from polymath.database.memory import InMemoryStore
from polymath.domain.errors import StorageError, ValidationError
from polymath.domain.migration import empty_portfolio
from polymath.domain.registry import BUSINESS_IDS


class FailingStore(InMemoryStore):
    """Store whose reads and/or writes fail."""

    def __init__(self, fail_reads=False, fail_writes=True, initial=None):
        super().__init__(initial)
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes

    def get(self, key):
        if self.fail_reads:
            raise StorageError(f"Could not read '{key}'")
        return super().get(key)

    def set(self, key, value):
        if self.fail_writes:
            raise StorageError(f"Could not write '{key}'")
        super().set(key, value)

    def delete(self, key):
        if self.fail_writes:
            raise StorageError(f"Could not delete '{key}'")
        super().delete(key)


def _portfolio_with_entry(today):
    ledgers = empty_portfolio()
    ledgers[0].upsert_today({"revenue": 1000, "salaries": 200, "clients": 4}, today)
    return ledgers


class TestMappers:
    """Tests for stored record encoding."""

    def test_entry_record_uses_wire_names(self, today):
        ledgers = _portfolio_with_entry(today)
        record = entry_to_record(ledgers[0].entries[0])
        assert record == {
            "date": today.isoformat(),
            "revenue": 1000.0,
            "salaries": 200.0,
            "expenses": 0.0,
            "netProfit": 800.0,
            "clients": 4.0,
            "notes": "",
        }

    def test_ledger_record(self, today):
        record = ledger_to_record(_portfolio_with_entry(today)[0])
        assert record["id"] == "iclean"
        assert record["totalNetProfit"] == 800.0
        assert len(record["entries"]) == 1


class TestPortfolioRoundTrip:
    """Tests for save/load through the store."""

    def test_load_from_empty_store(self, gateway):
        ledgers = gateway.load_portfolio()
        assert [l.id for l in ledgers] == list(BUSINESS_IDS)
        assert not gateway.degraded

    def test_save_writes_single_key(self, gateway, memory_store, today):
        assert gateway.save_portfolio(_portfolio_with_entry(today))
        assert list(memory_store.data) == [DATA_KEY]
        payload = json.loads(memory_store.data[DATA_KEY])
        assert [record["id"] for record in payload] == list(BUSINESS_IDS)

    def test_reload_matches_saved(self, gateway, today):
        ledgers = _portfolio_with_entry(today)
        gateway.save_portfolio(ledgers)
        assert gateway.load_portfolio() == ledgers

    def test_load_legacy_payload(self, memory_store):
        memory_store.set(DATA_KEY, json.dumps([
            {"id": "iclean", "name": "iClean", "color": "iclean", "date": "2024-01-01",
             "revenue": 1000, "salaries": 200, "expenses": 300}
        ]))
        ledgers = PersistenceGateway(memory_store).load_portfolio()
        assert ledgers[0].totals() == (1000, 200, 300, 500)

    def test_load_garbage_payload(self, memory_store):
        memory_store.set(DATA_KEY, "][")
        ledgers = PersistenceGateway(memory_store).load_portfolio()
        assert all(l.entries == [] for l in ledgers)


class TestSnapshots:
    """Tests for bounded snapshot history."""

    def test_commit_appends_copy(self, gateway, memory_store, today):
        ledgers = _portfolio_with_entry(today)
        history = gateway.commit_snapshot([], ledgers)
        ledgers[0].upsert_today({"revenue": 1}, today)

        assert len(history) == 1
        assert history[0][0].total_revenue == 1000
        assert len(json.loads(memory_store.data[HISTORY_KEY])) == 1

    def test_history_capped(self, gateway, today):
        ledgers = empty_portfolio()
        history = []
        for i in range(HISTORY_LIMIT + 1):
            ledgers[0].append({"revenue": i}, today)
            history = gateway.commit_snapshot(history, ledgers)
            assert len(history) <= HISTORY_LIMIT

        assert len(history) == HISTORY_LIMIT
        # the very first snapshot (one entry) has been evicted
        assert len(history[0][0].entries) == 2
        assert len(gateway.load_history()) == HISTORY_LIMIT

    def test_custom_limit(self, memory_store):
        gateway = PersistenceGateway(memory_store, history_limit=2)
        history = []
        for _ in range(5):
            history = gateway.commit_snapshot(history, empty_portfolio())
        assert len(history) == 2

    def test_invalid_limit(self, memory_store):
        with pytest.raises(ValidationError):
            PersistenceGateway(memory_store, history_limit=0)


class TestStorageFailures:
    """Tests for degraded operation when the store fails."""

    def test_failed_read_gives_empty_state(self):
        gateway = PersistenceGateway(FailingStore(fail_reads=True))
        ledgers = gateway.load_portfolio()
        assert all(l.entries == [] for l in ledgers)
        assert gateway.load_history() == []
        assert gateway.degraded

    def test_failed_write_is_reported_not_raised(self, today):
        gateway = PersistenceGateway(FailingStore(fail_writes=True))
        assert gateway.save_portfolio(_portfolio_with_entry(today)) is False
        assert gateway.degraded

    def test_failed_snapshot_still_returns_history(self):
        gateway = PersistenceGateway(FailingStore(fail_writes=True))
        history = gateway.commit_snapshot([], empty_portfolio())
        assert len(history) == 1
        assert gateway.degraded

    def test_failed_clear(self):
        gateway = PersistenceGateway(FailingStore(fail_writes=True))
        gateway.clear()
        assert gateway.degraded


class TestUpgradeStoredPayload:
    """Tests for rewriting legacy payloads in place."""

    def test_upgrades_legacy(self, memory_store):
        memory_store.set(DATA_KEY, json.dumps([{"id": "apl", "date": "2024-01-01", "revenue": 10}]))
        gateway = PersistenceGateway(memory_store)

        assert gateway.upgrade_stored_payload() is True
        payload = json.loads(memory_store.data[DATA_KEY])
        assert len(payload) == 5
        assert payload[2]["entries"][0]["netProfit"] == 10
        assert gateway.upgrade_stored_payload() is False

    def test_nothing_stored(self, gateway):
        assert gateway.upgrade_stored_payload() is False

    def test_unparseable_left_alone(self, memory_store):
        memory_store.set(DATA_KEY, "garbage")
        assert PersistenceGateway(memory_store).upgrade_stored_payload() is False
        assert memory_store.data[DATA_KEY] == "garbage"


def test_clear_removes_keys(gateway, memory_store, today):
    gateway.save_portfolio(_portfolio_with_entry(today))
    gateway.commit_snapshot([], empty_portfolio())
    gateway.clear()
    assert memory_store.data == {}
