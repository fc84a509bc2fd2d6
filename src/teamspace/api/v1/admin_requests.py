"""Admin request review endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query

from src.teamspace.api.dependencies import AdminRequestServiceDep, CurrentUser
from src.teamspace.models import AdminRequestStatus
from src.teamspace.schemas.admin_request import AdminRequestDecision, AdminRequestRead
from src.teamspace.schemas.pagination import Page

router = APIRouter(prefix="/admin-requests", tags=["admin-requests"])


@router.get(
    "",
    response_model=Page[AdminRequestRead],
    summary="List admin requests",
    description="Newest first. Admins only see requests for their own business.",
)
async def list_admin_requests(
    current_user: CurrentUser,
    service: AdminRequestServiceDep,
    request_status: AdminRequestStatus | None = Query(default=None, alias="status"),
    cursor: str | None = None,
    limit: int = Query(default=50, ge=1, le=100),
) -> Page[AdminRequestRead]:
    items, next_cursor, has_more = await service.list_requests(
        current_user, status=request_status, cursor=cursor, limit=limit
    )
    return Page(
        items=[AdminRequestRead.model_validate(r) for r in items],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.post(
    "/{request_id}",
    response_model=AdminRequestRead,
    summary="Decide admin request",
    description=(
        "Approve or reject a pending request. Approval needs a super admin and a free "
        "admin seat; without one the request stays pending."
    ),
    responses={
        409: {"description": "Already processed, or no admin seat left"},
    },
)
async def process_admin_request(
    request_id: UUID,
    decision: AdminRequestDecision,
    current_user: CurrentUser,
    service: AdminRequestServiceDep,
) -> AdminRequestRead:
    request = await service.process(
        request_id,
        AdminRequestStatus(decision.status),
        actor=current_user,
        reason=decision.reason,
    )
    return AdminRequestRead.model_validate(request)
