from pydantic import BaseModel
from typing import Any, Optional, List, Dict
from app.modules.roles.schemas import RoleResponse


class UserWithRolesResponse(BaseModel):
    id: str
    email: Optional[str] = None
    roles: List[RoleResponse] = []
    role: Optional[str] = None  # first assigned role, else the role hint in user_metadata
    user_metadata: Dict[str, Any] = {}


class ManagedUserResponse(UserWithRolesResponse):
    is_active: bool = True


class UserListResponse(BaseModel):
    data: List[ManagedUserResponse]


class UserWithRolesListResponse(BaseModel):
    data: List[UserWithRolesResponse]


class AssignRoleRequest(BaseModel):
    user_id: Optional[str] = None
    role_name: Optional[str] = None


class UserRoleRequest(BaseModel):
    user_id: Optional[str] = None
    role_id: Optional[str] = None


class SetActiveRequest(BaseModel):
    user_id: Optional[str] = None
    is_active: Any = None  # must be a JSON boolean, checked in the service


class DeleteUserRequest(BaseModel):
    user_id: Optional[str] = None
