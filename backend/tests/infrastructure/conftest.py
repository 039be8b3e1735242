"""Infrastructure fixtures — both registry stores behind one parametrized fixture.

Invariants:
    - Every test gets a fresh store (fresh in-memory SQLite for the SQL store)
    - Contract tests run unchanged against durable and fallback backends
"""

import pytest

from eventix.infrastructure.database import DatabaseSessionManager
from eventix.infrastructure.memory_registry_store import MemoryRegistryStore
from eventix.infrastructure.sql_registry_store import SqlRegistryStore


@pytest.fixture
async def sql_manager():
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    await manager.probe(create_schema=True)
    yield manager
    await manager.dispose()


@pytest.fixture(params=["memory", "sql"])
async def store(request):
    if request.param == "memory":
        yield MemoryRegistryStore()
        return
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    await manager.probe(create_schema=True)
    yield SqlRegistryStore(manager)
    await manager.dispose()
