"""Shared pytest fixtures for polymath tests."""

import tempfile
import os
from datetime import datetime, UTC
import pytest
import structlog

from polymath.database.factories import create_sqlite_store
from polymath.database.gateway import PersistenceGateway
from polymath.database.memory import InMemoryStore
from polymath.domain.ledger import BusinessLedger
from polymath.domain.portfolio import PortfolioService
from polymath.domain.registry import get_business

FIXED_NOW = datetime(2024, 1, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def now():
    """Fixed current instant used by service tests."""
    return FIXED_NOW


@pytest.fixture
def today(now):
    return now.date()


@pytest.fixture
def memory_store():
    """Create an empty in-memory key-value store."""
    return InMemoryStore()


@pytest.fixture
def gateway(memory_store):
    """Create a PersistenceGateway over the in-memory store."""
    return PersistenceGateway(memory_store)


@pytest.fixture
def portfolio_service(gateway, now):
    """Create a PortfolioService with a fixed clock."""
    return PortfolioService(gateway, clock=lambda: now)


@pytest.fixture
def iclean_ledger():
    """Empty ledger for iClean."""
    return BusinessLedger.empty(get_business("iclean"))


@pytest.fixture
def temp_db_path():
    """Path of a temporary SQLite file, removed afterwards."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    yield db_path

    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def temp_store(temp_db_path):
    """Create a temporary SQLite-backed store for testing."""
    store = create_sqlite_store(database_path=temp_db_path)
    store.connect()

    yield store

    store.disconnect()


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo CLI logging configuration, which binds the runner's stderr."""
    yield
    structlog.reset_defaults()
