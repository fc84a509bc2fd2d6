from uuid import UUID

from fastapi import APIRouter

from src.teamspace.api.dependencies import CurrentUser, UserServiceDep
from src.teamspace.core.permissions import permissions_for
from src.teamspace.models import Role, User
from src.teamspace.schemas.user import CurrentUserRead, RoleChangeRequest, UserRead, UserUpdate

router = APIRouter(prefix="/users", tags=["users"])


def _current(user: User) -> CurrentUserRead:
    return CurrentUserRead(
        **UserRead.model_validate(user).model_dump(),
        permissions=sorted(p.value for p in permissions_for(user.role)),
    )


@router.get(
    "/me",
    response_model=CurrentUserRead,
    summary="Get current user",
    description="Role and permissions as stored right now, not as of login.",
)
async def get_me(current_user: CurrentUser) -> CurrentUserRead:
    return _current(current_user)


@router.patch("/me", response_model=CurrentUserRead, summary="Update current user")
async def update_me(
    payload: UserUpdate,
    current_user: CurrentUser,
    service: UserServiceDep,
) -> CurrentUserRead:
    user = await service.update_profile(
        current_user, full_name=payload.full_name, password=payload.password
    )
    return _current(user)


@router.get("/{user_id}", response_model=UserRead, summary="Get user")
async def get_user(
    user_id: UUID,
    current_user: CurrentUser,
    service: UserServiceDep,
) -> UserRead:
    return UserRead.model_validate(await service.get_user(current_user, user_id))


@router.patch(
    "/{user_id}/role",
    response_model=UserRead,
    summary="Change role",
    description="Moves the user's quota seat to the new role in the same transaction.",
)
async def change_role(
    user_id: UUID,
    payload: RoleChangeRequest,
    current_user: CurrentUser,
    service: UserServiceDep,
) -> UserRead:
    user = await service.change_role(current_user, user_id, Role(payload.role))
    return UserRead.model_validate(user)


@router.delete(
    "/{user_id}",
    response_model=UserRead,
    summary="Deactivate user",
    description="Users are never hard-deleted. Frees the user's quota seat.",
)
async def deactivate_user(
    user_id: UUID,
    current_user: CurrentUser,
    service: UserServiceDep,
) -> UserRead:
    return UserRead.model_validate(await service.deactivate(current_user, user_id))
