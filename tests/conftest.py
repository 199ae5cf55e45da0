"""Root conftest — file-backed async SQLite engine and ledger fixtures."""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from billbook.models.bill import Bill, BillType
from billbook.services.ledger_store import LedgerStore


@pytest.fixture()
async def db_engine(tmp_path) -> AsyncIterator[AsyncEngine]:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'billbook.db'}")
    yield engine
    await engine.dispose()


@pytest.fixture()
async def store(db_engine: AsyncEngine) -> LedgerStore:
    ledger = LedgerStore()
    assert await ledger.init(db_engine) is True
    return ledger


def _sample_bill(**overrides) -> Bill:
    defaults = dict(
        date="2025-03-10",
        type=BillType.EXPENSE,
        category="Food",
        amount=42.5,
        remark="Lunch",
    )
    defaults.update(overrides)
    return Bill(**defaults)


@pytest.fixture()
def sample_bill():
    return _sample_bill
