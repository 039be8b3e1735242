"""Root conftest — shared test configuration and orchestrator fixtures.

Invariants:
    - Every test gets a fresh registry, ledger and lock table
    - Orchestrator fixtures run the registry degraded (memory store):
      the facade contract is the same on both backends
"""

import os

import pytest

# Tests never reach a real database or ledger
os.environ.setdefault("DATABASE_URL", "")
os.environ.setdefault("LEDGER_BASE_URL", "http://ledger.test")
os.environ.setdefault("LOG_FORMAT", "text")

from eventix.infrastructure.catalog import Catalog  # noqa: E402
from eventix.infrastructure.memory_registry_store import MemoryRegistryStore  # noqa: E402
from eventix.infrastructure.registry import RegistryFacade  # noqa: E402
from eventix.services.ticket_lifecycle import TicketLifecycleOrchestrator  # noqa: E402

from tests.factories import build_catalog_item  # noqa: E402
from tests.services.fake_ledger import FakeLedger  # noqa: E402


@pytest.fixture
def ledger():
    return FakeLedger()


@pytest.fixture
def catalog():
    return Catalog([
        build_catalog_item("summer-fest-2025", "0.10"),
        build_catalog_item("tech-conf-2025", "0.25"),
    ])


@pytest.fixture
def registry():
    return RegistryFacade(None, MemoryRegistryStore())


@pytest.fixture
def orchestrator(registry, ledger, catalog):
    return TicketLifecycleOrchestrator(registry, ledger, catalog)


@pytest.fixture
async def owned_ticket(orchestrator):
    """A ticket bought from the catalog at 0.10 SOL by WalletAlice."""
    outcome = await orchestrator.purchase("summer-fest-2025", "WalletAlice")
    assert outcome.success
    return outcome.ticket
