"""Invitation API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from src.teamspace.api.dependencies import (
    BusinessServiceDep,
    CurrentUser,
    InvitationServiceDep,
)
from src.teamspace.core.errors import ValidationError
from src.teamspace.core.notifications import build_invitation_url
from src.teamspace.core.security import create_access_token
from src.teamspace.models import Invitation, InvitationStatus, Role
from src.teamspace.schemas.auth import LoginResponse
from src.teamspace.schemas.invitation import (
    AcceptInvitationRequest,
    InvitationCreateRequest,
    InvitationIssuedResponse,
    InvitationRead,
    InvitationValidateResponse,
)
from src.teamspace.schemas.pagination import Page
from src.teamspace.schemas.user import UserRead

router = APIRouter(prefix="/invitations", tags=["invitations"])


def _issued(invitation: Invitation, token: str) -> InvitationIssuedResponse:
    return InvitationIssuedResponse(
        **InvitationRead.model_validate(invitation).model_dump(),
        token=token,
        invitation_url=build_invitation_url(token),
    )


@router.post(
    "",
    response_model=InvitationIssuedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create invitation",
    description=(
        "Invite an email into a business with a role. Admins invite members and clients "
        "into their own business; only a super admin invites admins."
    ),
)
async def create_invitation(
    payload: InvitationCreateRequest,
    current_user: CurrentUser,
    service: InvitationServiceDep,
) -> InvitationIssuedResponse:
    business_id = payload.business_id or current_user.business_id
    if business_id is None:
        raise ValidationError("business_id is required")
    invitation, token = await service.create(
        actor=current_user,
        email=payload.email,
        role=Role(payload.role),
        business_id=business_id,
    )
    return _issued(invitation, token)


@router.get(
    "/validate",
    response_model=InvitationValidateResponse,
    summary="Validate invitation token",
    description="Public. Check a token before showing the signup form.",
)
async def validate_invitation(
    service: InvitationServiceDep,
    business_service: BusinessServiceDep,
    token: str = Query(min_length=16, max_length=128),
    business_id: UUID | None = None,
) -> InvitationValidateResponse:
    invitation = await service.validate(token, business_id=business_id)
    business = await business_service.get_business(invitation.business_id)
    return InvitationValidateResponse(
        email=invitation.email,
        role=invitation.role,
        business_id=business.id,
        business_name=business.name,
        expires_at=invitation.expires_at,
    )


@router.post(
    "/accept",
    response_model=LoginResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Accept invitation",
    description="Public. Consume a token and create the invited account.",
)
async def accept_invitation(
    payload: AcceptInvitationRequest,
    service: InvitationServiceDep,
) -> LoginResponse:
    user = await service.accept(
        payload.token,
        password=payload.password,
        full_name=payload.full_name,
        email=payload.email,
    )
    return LoginResponse(
        access_token=create_access_token(user.id),
        user=UserRead.model_validate(user),
    )


@router.get(
    "",
    response_model=Page[InvitationRead],
    summary="List invitations",
)
async def list_invitations(
    current_user: CurrentUser,
    service: InvitationServiceDep,
    business_id: UUID | None = None,
    invitation_status: InvitationStatus | None = Query(default=None, alias="status"),
    cursor: str | None = None,
    limit: int = Query(default=50, ge=1, le=100),
) -> Page[InvitationRead]:
    target = business_id or current_user.business_id
    if target is None:
        raise ValidationError("business_id is required")
    items, next_cursor, has_more = await service.list_for_business(
        current_user, target, status=invitation_status, cursor=cursor, limit=limit
    )
    return Page(
        items=[InvitationRead.model_validate(i) for i in items],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.get("/{invitation_id}", response_model=InvitationRead, summary="Get invitation")
async def get_invitation(
    invitation_id: UUID,
    current_user: CurrentUser,
    service: InvitationServiceDep,
) -> InvitationRead:
    return InvitationRead.model_validate(await service.get(invitation_id, current_user))


@router.post(
    "/{invitation_id}/resend",
    response_model=InvitationIssuedResponse,
    summary="Resend invitation",
    description="Issue a new token and extend expiry. The previous token stops working.",
)
async def resend_invitation(
    invitation_id: UUID,
    current_user: CurrentUser,
    service: InvitationServiceDep,
) -> InvitationIssuedResponse:
    invitation, token = await service.resend(invitation_id, current_user)
    return _issued(invitation, token)


@router.delete(
    "/{invitation_id}",
    response_model=InvitationRead,
    summary="Revoke invitation",
)
async def revoke_invitation(
    invitation_id: UUID,
    current_user: CurrentUser,
    service: InvitationServiceDep,
) -> InvitationRead:
    return InvitationRead.model_validate(await service.revoke(invitation_id, current_user))
