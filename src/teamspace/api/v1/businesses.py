"""Business endpoints - provisioning, seat quotas and the audit trail."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from src.teamspace.api.dependencies import (
    AuditServiceDep,
    BusinessServiceDep,
    CurrentUser,
    QuotaServiceDep,
    UserServiceDep,
)
from src.teamspace.models import Role
from src.teamspace.schemas.audit import AuditLogRead
from src.teamspace.schemas.business import (
    BusinessCreate,
    BusinessRead,
    MemberQuotasResponse,
    RoleQuotaRead,
)
from src.teamspace.schemas.pagination import Page
from src.teamspace.schemas.user import UserRead

router = APIRouter(prefix="/businesses", tags=["businesses"])


@router.post(
    "",
    response_model=BusinessRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create business",
    description="Super admin only. Seat counters start at zero.",
)
async def create_business(
    payload: BusinessCreate,
    current_user: CurrentUser,
    service: BusinessServiceDep,
) -> BusinessRead:
    business = await service.create_business(
        current_user,
        name=payload.name,
        max_admins=payload.max_admins,
        max_members=payload.max_members,
    )
    return BusinessRead.model_validate(business)


@router.get("/{business_id}", response_model=BusinessRead, summary="Get business")
async def get_business(
    business_id: UUID,
    current_user: CurrentUser,
    service: BusinessServiceDep,
) -> BusinessRead:
    return BusinessRead.model_validate(await service.get_business(business_id, current_user))


@router.get(
    "/{business_id}/member-quotas",
    response_model=MemberQuotasResponse,
    summary="Seat usage per role",
)
async def get_member_quotas(
    business_id: UUID,
    current_user: CurrentUser,
    service: BusinessServiceDep,
    quota_service: QuotaServiceDep,
) -> MemberQuotasResponse:
    await service.get_business(business_id, current_user)
    quotas = await quota_service.get_quotas(business_id)

    def _read(role: Role) -> RoleQuotaRead:
        return RoleQuotaRead(current=quotas[role].current, limit=quotas[role].limit)

    return MemberQuotasResponse(
        super_admin=_read(Role.SUPER_ADMIN),
        admin=_read(Role.ADMIN),
        member=_read(Role.MEMBER),
        client=_read(Role.CLIENT),
    )


@router.get(
    "/{business_id}/members",
    response_model=Page[UserRead],
    summary="List active members",
)
async def list_members(
    business_id: UUID,
    current_user: CurrentUser,
    service: UserServiceDep,
    cursor: str | None = None,
    limit: int = Query(default=50, ge=1, le=100),
) -> Page[UserRead]:
    items, next_cursor, has_more = await service.list_members(
        current_user, business_id, cursor=cursor, limit=limit
    )
    return Page(
        items=[UserRead.model_validate(u) for u in items],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.get(
    "/{business_id}/audit-logs",
    response_model=Page[AuditLogRead],
    summary="List audit logs",
    description="Requires the audit log permission. Admins only see their own business.",
)
async def list_audit_logs(
    business_id: UUID,
    current_user: CurrentUser,
    service: BusinessServiceDep,
    audit_service: AuditServiceDep,
    action: str | None = Query(default=None, description="Filter by action type"),
    cursor: str | None = None,
    limit: int = Query(default=50, ge=1, le=100),
) -> Page[AuditLogRead]:
    await service.require_audit_access(current_user, business_id)
    items, next_cursor, has_more = await audit_service.list_logs(
        business_id, cursor=cursor, limit=limit, action=action
    )
    return Page(
        items=[AuditLogRead.model_validate(log) for log in items],
        next_cursor=next_cursor,
        has_more=has_more,
    )
