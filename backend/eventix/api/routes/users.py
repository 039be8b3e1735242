"""User Routes — account registration."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from eventix.schemas.users import RegisterRequest, RegisterResponse
from eventix.services.ticket_lifecycle import (
    TicketLifecycleOrchestrator, get_orchestrator,
)

router = APIRouter(prefix="/api", tags=["users"])


@router.post("/register", response_model=RegisterResponse)
async def register(
    body: RegisterRequest,
    orchestrator: TicketLifecycleOrchestrator = Depends(get_orchestrator),
):
    outcome = await orchestrator.register_user(
        body.name, body.email, body.password_hash,
    )
    if outcome.success:
        response = RegisterResponse(
            success=True,
            user_id=outcome.user.id,
            message="User registered successfully",
        )
    else:
        response = RegisterResponse(
            success=False, error=outcome.error, error_code=outcome.error_code,
        )
    return JSONResponse(
        status_code=outcome.http_status,
        content=response.model_dump(mode="json", by_alias=True, exclude_none=True),
    )
