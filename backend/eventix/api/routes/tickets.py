"""Ticket Routes — purchase, listing, marketplace resale and read views.

Invariants:
    - Write routes always answer with OperationResponse (success flag plus
      payload or reason); the HTTP status mirrors the failure class
    - Wallet for /my-tickets comes from ?wallet= or the wallet-address header
    - No business rules here: everything goes through the orchestrator
"""

from fastapi import APIRouter, Depends, Header, Query, status
from fastapi.responses import JSONResponse

from eventix.core.domain_types import to_price
from eventix.core.errors import InvalidRequestError, TicketNotFoundError
from eventix.schemas.tickets import (
    BuyTicketRequest, CatalogItemResponse, LifecycleResponse,
    ListTicketRequest, MarketplacePurchaseRequest, MarketplaceTicketResponse,
    OperationResponse, TicketResponse,
)
from eventix.services.ticket_lifecycle import (
    OperationOutcome, TicketLifecycleOrchestrator, get_orchestrator,
)

router = APIRouter(tags=["tickets"])


def _respond(outcome: OperationOutcome) -> JSONResponse:
    body = OperationResponse(
        success=outcome.success,
        mint_address=outcome.mint_address,
        transaction=outcome.transaction,
        ticket=(
            TicketResponse.from_entity(outcome.ticket)
            if outcome.ticket else None
        ),
        error=outcome.error,
        error_code=outcome.error_code,
        max_allowed_price=(
            float(outcome.max_allowed_price)
            if outcome.max_allowed_price is not None else None
        ),
    )
    return JSONResponse(
        status_code=outcome.http_status,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


@router.post("/buy-ticket", response_model=OperationResponse)
async def buy_ticket(
    body: BuyTicketRequest,
    orchestrator: TicketLifecycleOrchestrator = Depends(get_orchestrator),
):
    return _respond(
        await orchestrator.purchase(body.ticket_type, body.wallet_address),
    )


@router.post("/list-ticket", response_model=OperationResponse)
async def list_ticket(
    body: ListTicketRequest,
    orchestrator: TicketLifecycleOrchestrator = Depends(get_orchestrator),
):
    return _respond(await orchestrator.list_for_resale(
        body.ticket_id, to_price(body.price), body.wallet_address,
    ))


@router.post("/buy-from-marketplace", response_model=OperationResponse)
async def buy_from_marketplace(
    body: MarketplacePurchaseRequest,
    orchestrator: TicketLifecycleOrchestrator = Depends(get_orchestrator),
):
    return _respond(await orchestrator.purchase_from_marketplace(
        body.ticket_id, body.buyer_wallet,
    ))


@router.get("/my-tickets", response_model=list[TicketResponse])
async def my_tickets(
    wallet: str | None = Query(None),
    wallet_address: str | None = Header(None),
    orchestrator: TicketLifecycleOrchestrator = Depends(get_orchestrator),
):
    owner = wallet or wallet_address
    if not owner:
        raise InvalidRequestError("Wallet address required", "wallet")
    tickets = await orchestrator.tickets_for_owner(owner)
    return [TicketResponse.from_entity(t) for t in tickets]


@router.get("/available-tickets", response_model=list[CatalogItemResponse])
async def available_tickets(
    orchestrator: TicketLifecycleOrchestrator = Depends(get_orchestrator),
):
    return [
        CatalogItemResponse.from_entity(item)
        for item in orchestrator.available_tickets()
    ]


@router.get("/marketplace", response_model=list[MarketplaceTicketResponse])
async def marketplace(
    orchestrator: TicketLifecycleOrchestrator = Depends(get_orchestrator),
):
    entries = await orchestrator.marketplace()
    return [MarketplaceTicketResponse.from_entry(e) for e in entries]


@router.get(
    "/tickets/{mint}/lifecycle",
    response_model=LifecycleResponse,
    status_code=status.HTTP_200_OK,
)
async def ticket_lifecycle(
    mint: str,
    orchestrator: TicketLifecycleOrchestrator = Depends(get_orchestrator),
):
    view = await orchestrator.lifecycle(mint)
    if view is None:
        raise TicketNotFoundError("Ticket not found", mint)
    return LifecycleResponse.from_view(view)
