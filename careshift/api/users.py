"""
User API endpoints
"""

from fastapi import APIRouter, Depends
from typing import List
import structlog

from careshift.api.schemas import RoleUpdate, UserRead, UserWithMessage
from careshift.core.auth import Principal
from careshift.core.dependencies import get_current_user, get_principal, get_user_service
from careshift.models.user import User, UserRole
from careshift.services.users import UserService

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/me", response_model=UserRead)
async def get_me(
    principal: Principal = Depends(get_principal),
    users: UserService = Depends(get_user_service),
):
    """Current user, with name and picture refreshed from the identity provider"""
    return users.find_or_create(principal, refresh_profile=True)


@router.patch("/me/role", response_model=UserWithMessage)
async def change_my_role(
    role_data: RoleUpdate,
    current_user: User = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    """Switch between CAREWORKER and MANAGER"""
    user = users.change_role(current_user, role_data.role)
    return UserWithMessage(
        user=UserRead.model_validate(user),
        message=f"Role updated to {UserRole(user.role).value} successfully",
    )


@router.get("", response_model=List[UserRead])
async def list_users(
    current_user: User = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    """List all users, newest first (managers)"""
    return users.list_users(current_user)
