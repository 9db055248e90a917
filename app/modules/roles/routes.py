from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.core.dependencies import get_current_caller
from app.core.schemas import SuccessResponse
from app.modules.auth.schemas import Caller
from app.modules.roles.schemas import (
    RoleListResponse, RoleCreatedResponse, RoleCreate, RoleUpdate, RoleDelete
)
from app.modules.roles.service import RoleService
from app.modules.users.schemas import UserWithRolesListResponse, UserRoleRequest
from app.modules.users.routes import get_user_service
from app.modules.users.service import UserService
from supabase import Client
from typing import Optional

router = APIRouter(prefix="/manage-roles", tags=["roles"])


def get_role_service(supabase: Client = Depends(get_supabase)) -> RoleService:
    return RoleService(supabase)


# Role endpoints
@router.get("", response_model=RoleListResponse)
async def list_roles(
    service: RoleService = Depends(get_role_service)
):
    """List roles with their permissions"""
    return {"data": service.list_roles_with_permissions()}


@router.post("", response_model=RoleCreatedResponse, status_code=201)
async def create_role(
    role_data: RoleCreate,
    service: RoleService = Depends(get_role_service)
):
    """Create a role; permission names that do not exist yet are created"""
    role = service.create_role(role_data)
    return {"data": {"role": role}}


@router.put("", response_model=SuccessResponse)
async def update_role(
    role_data: RoleUpdate,
    service: RoleService = Depends(get_role_service)
):
    """Update a role and replace its permission set"""
    service.update_role(role_data)
    return SuccessResponse()


@router.delete("", response_model=SuccessResponse)
async def delete_role(
    role_data: RoleDelete,
    service: RoleService = Depends(get_role_service)
):
    """Soft-delete a role, or hard-delete it with {"hard": true} when unassigned"""
    service.delete_role(role_data)
    return SuccessResponse()


# User-role association endpoints
@router.get("/users", response_model=UserWithRolesListResponse)
async def list_users_with_roles(
    service: UserService = Depends(get_user_service)
):
    """List users with their assigned roles"""
    return {"data": service.list_users_with_roles()}


@router.post("/users", response_model=SuccessResponse, status_code=201)
async def assign_role_to_user(
    body: UserRoleRequest,
    caller: Optional[Caller] = Depends(get_current_caller),
    service: UserService = Depends(get_user_service)
):
    """Assign a role to a user by role id"""
    service.assign_role_by_id(caller, body)
    return SuccessResponse()


@router.delete("/users", response_model=SuccessResponse)
async def remove_role_from_user(
    body: UserRoleRequest,
    caller: Optional[Caller] = Depends(get_current_caller),
    service: UserService = Depends(get_user_service)
):
    """Remove a role from a user"""
    service.remove_role(caller, body)
    return SuccessResponse()
