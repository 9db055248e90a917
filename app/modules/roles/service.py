from supabase import Client
from app.modules.roles.schemas import (
    PermissionResponse, RoleResponse, RoleWithPermissionsResponse,
    RoleCreate, RoleUpdate, RoleDelete
)
from typing import Any, List
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


def split_permission_refs(permissions: List[Any]) -> tuple:
    """Split permission references into (names, ids), dropping duplicates and anything unrecognised"""
    names = [p for p in permissions if isinstance(p, str) and p]
    ids = [p["id"] for p in permissions if isinstance(p, dict) and p.get("id")]
    return list(dict.fromkeys(names)), list(dict.fromkeys(str(i) for i in ids))


class PermissionService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def ensure_permissions(self, names: List[str]) -> List[str]:
        """Insert permissions missing by name and return the ids of all named permissions"""
        if not names:
            return []
        # ignore_duplicates: existing permissions are left untouched
        self.supabase.table("permissions")\
            .upsert([{"name": n} for n in names], on_conflict="name", ignore_duplicates=True)\
            .execute()

        result = self.supabase.table("permissions")\
            .select("id")\
            .in_("name", names)\
            .execute()
        return [p["id"] for p in result.data or []]

    def get_permissions_by_ids(self, permission_ids: List[str]) -> List[PermissionResponse]:
        if not permission_ids:
            return []
        result = self.supabase.table("permissions")\
            .select("*")\
            .in_("id", permission_ids)\
            .execute()
        return [PermissionResponse(**p) for p in result.data or []]


class RoleService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.permissions = PermissionService(supabase)

    def list_roles_with_permissions(self) -> List[RoleWithPermissionsResponse]:
        """List roles (newest first), each with its permissions"""
        try:
            roles_result = self.supabase.table("roles")\
                .select("*")\
                .order("created_at", desc=True)\
                .execute()

            roles = []
            for role in roles_result.data or []:
                rp_result = self.supabase.table("role_permissions")\
                    .select("permission_id")\
                    .eq("role_id", role["id"])\
                    .execute()
                permission_ids = [rp["permission_id"] for rp in rp_result.data or []]
                permissions = self.permissions.get_permissions_by_ids(permission_ids)
                roles.append(RoleWithPermissionsResponse(**{**role, "permissions": permissions}))
            return roles
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing roles: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def create_role(self, role_data: RoleCreate) -> RoleResponse:
        """Create a role and attach its permissions, creating named permissions that do not exist yet"""
        if not role_data.name:
            raise HTTPException(status_code=400, detail="Missing role name")
        try:
            result = self.supabase.table("roles").insert({
                "name": role_data.name,
                "description": role_data.description
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create role")

            role = result.data[0]
            self._attach_permissions(role["id"], role_data.permissions)
            logger.info(f"Created role {role_data.name} ({role['id']})")
            return RoleResponse(**role)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating role {role_data.name}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def update_role(self, role_data: RoleUpdate) -> None:
        """Update name/description and replace the role's permission set.

        The steps are not transactional: if replacing permissions fails after the
        role row was updated, the role keeps its new name with a partial permission set.
        """
        if not role_data.id:
            raise HTTPException(status_code=400, detail="Missing role id")
        try:
            update_data = {}
            if role_data.name:
                update_data["name"] = role_data.name
            if role_data.description is not None:
                update_data["description"] = role_data.description

            if update_data:
                self.supabase.table("roles")\
                    .update(update_data)\
                    .eq("id", role_data.id)\
                    .execute()

            # Remove all existing permissions for this role
            self.supabase.table("role_permissions")\
                .delete()\
                .eq("role_id", role_data.id)\
                .execute()

            self._attach_permissions(role_data.id, role_data.permissions)
            logger.info(f"Updated role {role_data.id}")
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating role {role_data.id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def delete_role(self, role_data: RoleDelete) -> None:
        """Soft-delete (disable) a role, or hard-delete it when no user holds it"""
        if not role_data.id:
            raise HTTPException(status_code=400, detail="Missing role id")
        try:
            if role_data.hard:
                users = self.supabase.table("user_roles")\
                    .select("user_id")\
                    .eq("role_id", role_data.id)\
                    .limit(1)\
                    .execute()
                if users.data:
                    raise HTTPException(status_code=400, detail="Role has associated users; cannot hard-delete")

                self.supabase.table("role_permissions")\
                    .delete()\
                    .eq("role_id", role_data.id)\
                    .execute()
                self.supabase.table("roles")\
                    .delete()\
                    .eq("id", role_data.id)\
                    .execute()
                logger.info(f"Hard-deleted role {role_data.id}")
                return

            self.supabase.table("roles")\
                .update({"disabled": True})\
                .eq("id", role_data.id)\
                .execute()
            logger.info(f"Disabled role {role_data.id}")
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting role {role_data.id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def _attach_permissions(self, role_id: str, permissions: List[Any]) -> None:
        names, ids = split_permission_refs(permissions)
        permission_ids = list(dict.fromkeys(self.permissions.ensure_permissions(names) + ids))
        if not permission_ids:
            return
        self.supabase.table("role_permissions")\
            .upsert(
                [{"role_id": role_id, "permission_id": pid} for pid in permission_ids],
                on_conflict="role_id,permission_id",
                ignore_duplicates=True,
            )\
            .execute()
