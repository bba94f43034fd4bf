"""Shared pytest fixtures."""

from collections.abc import AsyncIterator

import pytest

from storefront.buyers import MemoryBuyerDirectory, SQLAlchemyBuyerDirectory
from storefront.db import create_database
from storefront.inventory import MemoryLedger, SQLAlchemyLedger
from storefront.logs import configure_logging
from storefront.transactions import MemoryTransactionStore, SQLAlchemyTransactionStore

from tests._support import World, populate


@pytest.fixture(autouse=True, scope="session")
def _quiet_logs() -> None:
    configure_logging("warning", json=False)


@pytest.fixture
async def session_factory(tmp_path) -> AsyncIterator:
    """File-backed sqlite so concurrent sessions get their own connections."""
    factory, engine = await create_database(f"sqlite+aiosqlite:///{tmp_path / 'shop.db'}")
    yield factory
    await engine.dispose()


@pytest.fixture(params=["memory", "sql"])
async def world(request: pytest.FixtureRequest, tmp_path) -> AsyncIterator[World]:
    """Every store-level test runs against both backends."""
    if request.param == "memory":
        buyers = MemoryBuyerDirectory()
        yield await populate(
            World("memory", buyers, MemoryLedger(), MemoryTransactionStore(buyers))
        )
        return

    factory, engine = await create_database(f"sqlite+aiosqlite:///{tmp_path / 'world.db'}")
    try:
        yield await populate(
            World(
                "sql",
                SQLAlchemyBuyerDirectory(factory),
                SQLAlchemyLedger(factory),
                SQLAlchemyTransactionStore(factory),
            )
        )
    finally:
        await engine.dispose()
