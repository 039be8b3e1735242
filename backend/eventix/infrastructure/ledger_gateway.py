"""Ledger Gateway — httpx client for the external mint/list/transfer service.

Invariants:
    - Every call is bounded by a finite timeout per phase (connect/read/write/pool)
      and by the same timeout over the whole request
    - No automatic retry: one request per operation, the orchestrator aborts on failure
    - mint never fabricates a mint address: a reply without one is MintFailedError
    - Ledger rejections map to LedgerRejectedError(kind); transport failures,
      timeouts and unclassified errors map to LedgerUnavailableError
      (MintFailedError for mint)
    - Prices leave this module as JSON numbers (SOL)

Design Decisions:
    - Wrapper over raw client: isolates transport and error mapping from the orchestrator
    - Rejection kinds accepted from a structured errorCode field first, then by
      matching the program error names the ledger embeds in its error text
"""

import asyncio
import logging
from decimal import Decimal

import httpx

from eventix.core.domain_types import (
    LedgerOperation, LedgerRejectionKind, MintAddress, WalletAddress,
)
from eventix.core.entities import CatalogItem, MintReceipt
from eventix.core.errors import (
    ErrorContext, LedgerRejectedError, LedgerUnavailableError, MintFailedError,
)

logger = logging.getLogger(__name__)

# Ordered: first match wins
_REJECTION_MARKERS: tuple[tuple[str, LedgerRejectionKind], ...] = (
    ("exceedsmaxmarkup", LedgerRejectionKind.EXCEEDS_MARKUP),
    ("exceedsmarkup", LedgerRejectionKind.EXCEEDS_MARKUP),
    ("maximum allowed markup", LedgerRejectionKind.EXCEEDS_MARKUP),
    ("notticketowner", LedgerRejectionKind.NOT_OWNER),
    ("notowner", LedgerRejectionKind.NOT_OWNER),
    ("not the owner", LedgerRejectionKind.NOT_OWNER),
    ("maxresalesexceeded", LedgerRejectionKind.ALREADY_MAX_RESALES),
    ("alreadymaxresales", LedgerRejectionKind.ALREADY_MAX_RESALES),
    ("ticketalreadysold", LedgerRejectionKind.ALREADY_MAX_RESALES),
    ("maximum number of resales", LedgerRejectionKind.ALREADY_MAX_RESALES),
    ("already been sold", LedgerRejectionKind.ALREADY_MAX_RESALES),
    ("resalenotallowed", LedgerRejectionKind.RESALE_NOT_ALLOWED),
    ("cannot be resold.", LedgerRejectionKind.RESALE_NOT_ALLOWED),
)


def classify_rejection(payload: dict) -> LedgerRejectionKind | None:
    """Map a failed ledger reply to a rejection kind, or None if unclassified."""
    code = payload.get("errorCode")
    if code:
        for kind in LedgerRejectionKind:
            if kind.value.lower() == str(code).lower():
                return kind
    text = str(payload.get("error", "")).lower()
    for marker, kind in _REJECTION_MARKERS:
        if marker in text:
            return kind
    return None


def _price_to_wire(price: Decimal) -> float:
    return float(price)


class LedgerGateway:
    """Talks to the ledger service over HTTP with bounded timeouts."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout_seconds),
            transport=transport,
        )
        self.timeout_seconds = timeout_seconds

    async def aclose(self) -> None:
        await self.client.aclose()

    async def mint(self, item: CatalogItem) -> MintReceipt:
        """Create a new ticket token for a catalog item."""
        context = ErrorContext(operation=LedgerOperation.MINT.value)
        try:
            payload = await self._post(LedgerOperation.MINT, {
                "name": item.name,
                "description": item.description,
                "eventDate": item.event_date,
                "seat": item.seat,
                "price": _price_to_wire(item.price),
            })
        except LedgerUnavailableError as e:
            raise MintFailedError(e.detail, context=context)

        if not payload.get("success"):
            detail = str(payload.get("error") or "ledger refused to mint")
            logger.warning(
                f"Ledger mint failed: {detail}",
                extra={"ledger_operation": LedgerOperation.MINT.value},
            )
            raise MintFailedError(detail, context=context)

        mint_address = payload.get("mintAddress")
        if not mint_address:
            raise MintFailedError(
                "ledger reply carried no mint address", context=context,
            )
        proof = (
            payload.get("smartContractSignature")
            or payload.get("transaction")
            or payload.get("nftSignature")
            or ""
        )
        logger.info(
            "Ledger mint succeeded",
            extra={
                "ledger_operation": LedgerOperation.MINT.value,
                "mint": mint_address,
            },
        )
        return MintReceipt(mint_address=MintAddress(mint_address), proof=proof)

    async def list_ticket(self, mint: MintAddress, price: Decimal) -> str:
        """Record a new price and listed state on the ledger."""
        payload = await self._post(LedgerOperation.LIST, {
            "mintAddress": mint,
            "price": _price_to_wire(price),
        })
        return self._proof_or_raise(LedgerOperation.LIST, mint, payload)

    async def transfer(
        self,
        mint: MintAddress,
        from_owner: WalletAddress,
        to_owner: WalletAddress,
        price: Decimal,
    ) -> str:
        """Request an ownership change from from_owner to to_owner."""
        payload = await self._post(LedgerOperation.TRANSFER, {
            "mintAddress": mint,
            "fromWallet": from_owner,
            "toWallet": to_owner,
            "price": _price_to_wire(price),
        })
        return self._proof_or_raise(LedgerOperation.TRANSFER, mint, payload)

    def _proof_or_raise(
        self, operation: LedgerOperation, mint: MintAddress, payload: dict,
    ) -> str:
        context = ErrorContext(mint=mint, operation=operation.value)
        if payload.get("success"):
            logger.info(
                f"Ledger {operation.value} succeeded",
                extra={"ledger_operation": operation.value, "mint": mint},
            )
            return str(payload.get("transaction") or "")

        detail = str(payload.get("error") or "")
        kind = classify_rejection(payload)
        logger.warning(
            f"Ledger {operation.value} failed: {detail}",
            extra={
                "ledger_operation": operation.value,
                "mint": mint,
                "error_code": kind.value if kind else "UNCLASSIFIED",
            },
        )
        if kind is None:
            raise LedgerUnavailableError(operation.value, detail, context=context)
        raise LedgerRejectedError(kind, detail, context=context)

    async def _post(self, operation: LedgerOperation, body: dict) -> dict:
        """POST one request; transport and protocol failures become LedgerUnavailableError."""
        try:
            response = await asyncio.wait_for(
                self.client.post(f"/{operation.value}", json=body),
                timeout=self.timeout_seconds,
            )
        except (httpx.TimeoutException, asyncio.TimeoutError):
            raise LedgerUnavailableError(
                operation.value,
                f"no answer within {self.timeout_seconds}s",
            )
        except httpx.HTTPError as e:
            logger.error(
                f"Ledger transport error: {e}",
                extra={"ledger_operation": operation.value},
            )
            raise LedgerUnavailableError(operation.value, str(e))

        try:
            payload = response.json()
        except ValueError:
            raise LedgerUnavailableError(
                operation.value,
                f"non-JSON reply (HTTP {response.status_code})",
            )
        if not isinstance(payload, dict):
            raise LedgerUnavailableError(operation.value, "malformed reply")
        if response.status_code >= 500 and "success" not in payload:
            raise LedgerUnavailableError(
                operation.value, f"HTTP {response.status_code}",
            )
        return payload


# Singleton (initialized on startup)
ledger_gateway: LedgerGateway | None = None


def init_ledger(base_url: str, timeout_seconds: float) -> LedgerGateway:
    global ledger_gateway
    ledger_gateway = LedgerGateway(base_url, timeout_seconds)
    return ledger_gateway


async def close_ledger() -> None:
    global ledger_gateway
    if ledger_gateway is not None:
        await ledger_gateway.aclose()
    ledger_gateway = None

