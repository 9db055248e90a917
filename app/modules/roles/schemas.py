from pydantic import BaseModel, ConfigDict
from typing import Any, Optional, List
from datetime import datetime


class PermissionResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    created_at: Optional[datetime] = None


class RoleResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    description: Optional[str] = None
    disabled: bool = False
    created_at: Optional[datetime] = None


class RoleWithPermissionsResponse(RoleResponse):
    permissions: List[PermissionResponse] = []


class RoleListResponse(BaseModel):
    data: List[RoleWithPermissionsResponse]


class RoleCreatedData(BaseModel):
    role: RoleResponse


class RoleCreatedResponse(BaseModel):
    data: RoleCreatedData


# Permission references are either bare names (created when missing)
# or objects carrying the id of an existing permission: "users:read" | {"id": "..."}
class RoleCreate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    permissions: List[Any] = []


class RoleUpdate(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    permissions: List[Any] = []


class RoleDelete(BaseModel):
    id: Optional[str] = None
    hard: bool = False
