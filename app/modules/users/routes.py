from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.core.dependencies import get_current_caller
from app.core.schemas import SuccessResponse
from app.modules.auth.schemas import Caller
from app.modules.users.schemas import (
    UserListResponse, AssignRoleRequest, SetActiveRequest, DeleteUserRequest
)
from app.modules.users.service import UserService
from supabase import Client
from typing import Optional

router = APIRouter(prefix="/manage-users", tags=["users"])


def get_user_service(supabase: Client = Depends(get_supabase)) -> UserService:
    return UserService(supabase)


@router.get("", response_model=UserListResponse)
async def list_users(
    service: UserService = Depends(get_user_service)
):
    """List users with their assigned roles and active flag"""
    return {"data": service.list_users()}


@router.post("/assign-role", response_model=SuccessResponse)
async def assign_role(
    body: AssignRoleRequest,
    caller: Optional[Caller] = Depends(get_current_caller),
    service: UserService = Depends(get_user_service)
):
    """Assign or change a user's single role (refuses to demote the last administrator)"""
    service.assign_role(caller, body)
    return SuccessResponse()


@router.patch("/disable", response_model=SuccessResponse)
async def set_user_active(
    body: SetActiveRequest,
    caller: Optional[Caller] = Depends(get_current_caller),
    service: UserService = Depends(get_user_service)
):
    """Activate or deactivate a user (not the caller)"""
    service.set_active(caller, body)
    return SuccessResponse()


@router.delete("/delete", response_model=SuccessResponse)
async def delete_user(
    body: DeleteUserRequest,
    caller: Optional[Caller] = Depends(get_current_caller),
    service: UserService = Depends(get_user_service)
):
    """Delete a user (not the caller, not the last administrator)"""
    service.delete_user(caller, body)
    return SuccessResponse()
