"""Authentication endpoints."""

from fastapi import APIRouter, Response, status
from starlette.requests import Request

from src.teamspace.api.dependencies import AuthServiceDep, CurrentUser
from src.teamspace.core.rate_limit import limiter, login_limit, signup_limit
from src.teamspace.models import Role, SignupPath
from src.teamspace.schemas.auth import (
    LoginRequest,
    LoginResponse,
    SignupRequest,
    SignupResponse,
)
from src.teamspace.schemas.user import UserRead

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Sign up",
    description=(
        "Create an account. The first signup on an empty system becomes the super admin. "
        "With an invitation token the invitation decides role and business. Requesting the "
        "admin role without a token files an admin request and returns 202 with no session."
    ),
    responses={
        202: {"description": "Admin request filed, pending approval"},
        409: {"description": "No seat left for the role"},
        410: {"description": "Invitation expired"},
    },
)
@limiter.limit(signup_limit)
async def signup(
    request: Request,
    response: Response,
    signup_data: SignupRequest,
    service: AuthServiceDep,
) -> SignupResponse:
    result = await service.signup(
        email=signup_data.email,
        password=signup_data.password,
        full_name=signup_data.full_name,
        token=signup_data.token,
        business_id=signup_data.business_id,
        requested_role=Role(signup_data.requested_role) if signup_data.requested_role else None,
        message=signup_data.message,
    )

    if result.path is SignupPath.ADMIN_REQUEST and result.admin_request is not None:
        response.status_code = status.HTTP_202_ACCEPTED
        return SignupResponse(
            path=result.path.value,
            admin_request_id=result.admin_request.id,
            request_status=result.admin_request.status,
        )

    return SignupResponse(
        path=result.path.value,
        user=UserRead.model_validate(result.user),
        access_token=result.access_token,
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"description": "Invalid credentials"}},
)
@limiter.limit(login_limit)
async def login(
    request: Request, login_data: LoginRequest, service: AuthServiceDep
) -> LoginResponse:
    """Authenticate and return an access token."""
    user, access_token = await service.login(login_data.email, login_data.password)
    return LoginResponse(access_token=access_token, user=UserRead.model_validate(user))


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(current_user: CurrentUser, service: AuthServiceDep) -> None:
    """Client discards its token; nothing is revoked server side."""
    await service.logout(current_user)
