"""Users API: role assignment."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import authorize, get_user_role_service
from app.application.services.user_role_service import UserRoleService
from app.core.limiter import limit_writes
from app.schemas.user import UserResponse, UserRoleUpdate

router = APIRouter()


@router.patch("/{user_id}/role", response_model=UserResponse)
@limit_writes
async def update_user_role(
    request: Request,
    user_id: str,
    body: UserRoleUpdate,
    user_role_svc: Annotated[UserRoleService, Depends(get_user_role_service)],
    _: Annotated[object, Depends(authorize("users.update_role"))] = None,
):
    """Set the user's legacy role and/or granular role; role_id null clears it."""
    updated = await user_role_svc.update_user_role(user_id, body.to_changes())
    return UserResponse.model_validate(updated)
