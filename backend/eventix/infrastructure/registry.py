"""Registry Facade — one registry contract over a durable store and a volatile fallback.

Invariants:
    - Callers never see StorageUnavailableError: it is the only error that
      triggers fallback; Duplicate*Error and everything else propagate
    - degraded is sticky for the process lifetime: once set, the durable store
      is never called again (no per-call retry against a dead backend)
    - degraded is written only by initialize() (startup probe) and by the
      read-through fallback path in _call()
    - Every durable call is bounded by operation_timeout_seconds
    - The two stores are never merged: after a mid-session failover, records
      written only to the durable store are not visible (logged at WARNING)

Design Decisions:
    - Plain bool for degraded: the event loop is single-threaded, so reads and
      writes are atomic; a race between concurrent first failures only costs
      extra timeouts, never correctness
    - Module-level singleton initialized on startup, same lifecycle as the
      session manager
"""

import asyncio
import logging
from decimal import Decimal
from typing import Awaitable, Callable, TypeVar

from eventix.core.domain_types import MintAddress, RegistryBackend, WalletAddress
from eventix.core.entities import ResaleHistoryRecord, Ticket, User
from eventix.core.errors import StorageUnavailableError
from eventix.core.repository_protocols import RegistryStore
from eventix.infrastructure.database import DatabaseSessionManager
from eventix.infrastructure.memory_registry_store import MemoryRegistryStore
from eventix.infrastructure.sql_registry_store import SqlRegistryStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RegistryFacade:
    """Routes each call to the durable store, falling back to memory on outage."""

    def __init__(
        self,
        durable: RegistryStore | None,
        fallback: RegistryStore | None = None,
        operation_timeout_seconds: float = 5.0,
    ):
        self._durable = durable
        self._fallback = fallback or MemoryRegistryStore()
        self._timeout = operation_timeout_seconds
        self.degraded = durable is None

    @property
    def backend(self) -> RegistryBackend:
        return RegistryBackend.FALLBACK if self.degraded else RegistryBackend.DURABLE

    async def initialize(self, probe_timeout_seconds: float | None = None) -> None:
        """Startup probe: decides once which store serves the process."""
        if self._durable is None:
            logger.warning(
                "No durable registry configured, using memory storage",
                extra={"backend": RegistryBackend.FALLBACK.value},
            )
            return
        try:
            await asyncio.wait_for(
                self._durable.probe(),
                timeout=probe_timeout_seconds or self._timeout,
            )
            logger.info(
                "Durable registry connected",
                extra={"backend": RegistryBackend.DURABLE.value},
            )
        except (StorageUnavailableError, asyncio.TimeoutError) as e:
            self._degrade("probe", e)

    def _degrade(self, operation: str, cause: Exception) -> None:
        was_degraded = self.degraded
        self.degraded = True
        if not was_degraded:
            logger.warning(
                f"Durable registry unavailable during {operation}, "
                f"switching to memory storage: {cause}",
                extra={"backend": RegistryBackend.FALLBACK.value},
            )
            if operation != "probe":
                logger.warning(
                    "Registry failover mid-session: records held only by the "
                    "durable store are not visible until restart",
                    extra={"backend": RegistryBackend.FALLBACK.value},
                )

    async def _call(
        self, operation: str, invoke: Callable[[RegistryStore], Awaitable[T]],
    ) -> T:
        if not self.degraded and self._durable is not None:
            try:
                return await asyncio.wait_for(
                    invoke(self._durable), timeout=self._timeout,
                )
            except asyncio.TimeoutError:
                self._degrade(
                    operation,
                    StorageUnavailableError(
                        f"no answer within {self._timeout}s", operation,
                    ),
                )
            except StorageUnavailableError as e:
                self._degrade(operation, e)
        return await invoke(self._fallback)

    # ─── Users ──────────────────────────────────────────────────

    async def create_user(
        self, name: str, email: str, password_hash: str,
    ) -> User:
        return await self._call(
            "create_user", lambda s: s.create_user(name, email, password_hash),
        )

    async def find_user_by_email(self, email: str) -> User | None:
        return await self._call(
            "find_user_by_email", lambda s: s.find_user_by_email(email),
        )

    # ─── Tickets ────────────────────────────────────────────────

    async def create_ticket(self, ticket: Ticket) -> Ticket:
        return await self._call(
            "create_ticket", lambda s: s.create_ticket(ticket),
        )

    async def get_ticket(self, mint: MintAddress) -> Ticket | None:
        return await self._call("get_ticket", lambda s: s.get_ticket(mint))

    async def list_tickets_by_owner(self, wallet: WalletAddress) -> list[Ticket]:
        return await self._call(
            "list_tickets_by_owner", lambda s: s.list_tickets_by_owner(wallet),
        )

    async def list_marketplace_tickets(self) -> list[Ticket]:
        return await self._call(
            "list_marketplace_tickets", lambda s: s.list_marketplace_tickets(),
        )

    async def update_ticket_listing(
        self, mint: MintAddress, price: Decimal, listed: bool,
    ) -> None:
        await self._call(
            "update_ticket_listing",
            lambda s: s.update_ticket_listing(mint, price, listed),
        )

    async def update_ticket_owner(
        self, mint: MintAddress, new_owner: WalletAddress,
    ) -> None:
        await self._call(
            "update_ticket_owner",
            lambda s: s.update_ticket_owner(mint, new_owner),
        )

    # ─── Resale history ─────────────────────────────────────────

    async def append_resale_history(self, record: ResaleHistoryRecord) -> None:
        await self._call(
            "append_resale_history", lambda s: s.append_resale_history(record),
        )

    async def count_resale_history(self, mint: MintAddress) -> int:
        return await self._call(
            "count_resale_history", lambda s: s.count_resale_history(mint),
        )

    async def list_resale_history(
        self, mint: MintAddress,
    ) -> list[ResaleHistoryRecord]:
        return await self._call(
            "list_resale_history", lambda s: s.list_resale_history(mint),
        )


# Singleton (initialized on startup)
registry: RegistryFacade | None = None
db_manager: DatabaseSessionManager | None = None


async def init_registry(
    database_url: str | None,
    *,
    pool_size: int = 20,
    max_overflow: int = 10,
    probe_timeout_seconds: float = 5.0,
    operation_timeout_seconds: float = 5.0,
    create_schema: bool = True,
) -> RegistryFacade:
    """Build the facade, probe the durable store once, degrade on failure."""
    global registry, db_manager
    durable: RegistryStore | None = None
    if database_url:
        db_manager = DatabaseSessionManager(
            database_url, pool_size=pool_size, max_overflow=max_overflow,
        )
        durable = SqlRegistryStore(db_manager, create_schema=create_schema)
    registry = RegistryFacade(
        durable, operation_timeout_seconds=operation_timeout_seconds,
    )
    await registry.initialize(probe_timeout_seconds)
    return registry


async def close_registry() -> None:
    global registry, db_manager
    if db_manager is not None:
        await db_manager.dispose()
    registry = None
    db_manager = None


def get_registry() -> RegistryFacade:
    if registry is None:
        raise RuntimeError("Registry not initialized")
    return registry
