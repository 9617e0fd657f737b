"""Pytest configuration and fixtures."""
from collections.abc import AsyncIterator, Iterator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from localstore.core import state_store
from localstore.core.state_store import LocalStore
from localstore.gateway.dispatcher import Dispatcher, reset_dispatcher
from localstore.storage.adapter import MemoryStoreAdapter

TEST_KEY = "test_db"


def pytest_configure(config):
    """Ensure asyncio_mode is auto so async fixtures work when pyproject is not in cwd."""
    if hasattr(config.option, "asyncio_mode") and config.option.asyncio_mode is None:
        config.option.asyncio_mode = "auto"


@pytest.fixture(autouse=True)
def _reset_singletons() -> Iterator[None]:
    """Reset the process-wide store and dispatcher between tests to prevent cross-test pollution."""
    state_store.reset_store()
    reset_dispatcher()
    yield
    state_store.reset_store()
    reset_dispatcher()


@pytest.fixture
def adapter() -> MemoryStoreAdapter:
    """Empty in-memory adapter that records every save."""
    return MemoryStoreAdapter()


@pytest_asyncio.fixture
async def store(adapter: MemoryStoreAdapter) -> AsyncIterator[LocalStore]:
    """A hydrated store with a short debounce so saves land quickly."""
    s = LocalStore(adapter, key=TEST_KEY, save_delay=0.01)
    await s.hydrate()
    yield s
    await s.close()


@pytest.fixture
def dispatcher(store: LocalStore) -> Dispatcher:
    """Dispatcher over the hydrated test store."""
    return Dispatcher(store, ready_timeout=0.5)


@pytest_asyncio.fixture
async def client(store: LocalStore) -> AsyncIterator[AsyncClient]:
    """Async test client wired to the test store (lifespan is not run)."""
    from localstore.main import app

    state_store._store = store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
