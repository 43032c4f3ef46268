"""Shared fixtures for Stone Ledger tests."""

from datetime import date
from decimal import Decimal

import pytest

from stone_ledger.ledger import WorkerLedger
from stone_ledger.services.storage import InMemoryStore


FIXED_DAY = date(2026, 3, 5)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def make_ledger(store):
    """Factory for ledgers on the shared store with a fixed clock and rate 5."""
    def _make(backing_store=None, **kwargs):
        kwargs.setdefault("rate_per_kg", Decimal("5"))
        kwargs.setdefault("storage_key", "stoneWorkers")
        kwargs.setdefault("today", lambda: FIXED_DAY)
        ledger = WorkerLedger(backing_store or store, **kwargs)
        ledger.load()
        return ledger
    return _make


@pytest.fixture
def ledger(make_ledger):
    return make_ledger()
