"""
tests/conftest.py
─────────────────
Shared pytest fixtures for the GIS PD Monitor test suite.
"""
import os
import pytest
import numpy as np
from datetime import datetime, timezone

# Use in-memory SQLite for tests
os.environ.setdefault("DATABASE_URL", ":memory:")
os.environ.setdefault("HISTORY_DAYS", "2")
os.environ.setdefault("SIMULATION_SEED", "42")


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(42)


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_reading():
    """Factory for a ChannelReading."""
    from src.data.models import ChannelReading

    def _make(channel_type: str, amplitude: float, frequency: float, is_online: bool = True):
        return ChannelReading(
            channel_type=channel_type,
            amplitude=amplitude,
            frequency=frequency,
            is_online=is_online,
        )

    return _make


@pytest.fixture
def seeded_db():
    """Fresh in-memory store seeded with the catalogue and history."""
    from src.data import store
    store.close_db()
    store.initialize_db()
    yield store
    store.close_db()


@pytest.fixture
def empty_db():
    """Fresh in-memory store with tables but no rows."""
    from src.data import store
    store.close_db()
    store._create_tables(store._get_conn())
    yield store
    store.close_db()
