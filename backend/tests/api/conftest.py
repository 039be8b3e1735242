"""API test fixtures — ASGI client with the orchestrator dependency overridden.

Invariants:
    - Lifespan is not run: no database, ledger or catalog file is touched
    - get_orchestrator overridden with an orchestrator over memory + FakeLedger
"""

import pytest
from httpx import ASGITransport, AsyncClient

from eventix.infrastructure import registry as registry_module
from eventix.main import app
from eventix.services.ticket_lifecycle import get_orchestrator


@pytest.fixture
async def client(orchestrator, registry):
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    original_registry = registry_module.registry
    registry_module.registry = registry

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    registry_module.registry = original_registry
