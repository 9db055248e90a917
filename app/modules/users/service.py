from supabase import Client
from app.config import settings
from app.modules.auth.schemas import Caller, IdentityUser
from app.modules.roles.schemas import RoleResponse
from app.modules.users.schemas import (
    UserWithRolesResponse, ManagedUserResponse,
    AssignRoleRequest, UserRoleRequest, SetActiveRequest, DeleteUserRequest
)
from typing import Dict, List, Optional
from datetime import datetime, timezone
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

# GoTrue has no "disabled" flag; a long ban blocks sign-in and token refresh
BAN_FOREVER = "876000h"
IDENTITY_PAGE_SIZE = 200


class UserService:
    def __init__(self, supabase: Client, admin_role_name: Optional[str] = None):
        self.supabase = supabase
        self.admin_role_name = admin_role_name or settings.admin_role_name

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------
    def list_users(self) -> List[ManagedUserResponse]:
        """Identity users merged with their roles and profile is_active flag"""
        try:
            profiles = self.supabase.table("profiles")\
                .select("id, is_active")\
                .execute()
            profile_by_id = {p["id"]: p for p in profiles.data or []}

            users = []
            for user in self._merge_roles():
                profile = profile_by_id.get(user.id) or {}
                is_active = profile.get("is_active")
                users.append(ManagedUserResponse(
                    **user.model_dump(),
                    is_active=True if is_active is None else is_active,
                ))
            return users
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing users: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def list_users_with_roles(self) -> List[UserWithRolesResponse]:
        try:
            return self._merge_roles()
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing users with roles: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def _merge_roles(self) -> List[UserWithRolesResponse]:
        identities = self._list_identities()

        user_roles = self.supabase.table("user_roles")\
            .select("user_id, role_id")\
            .execute()
        user_roles = user_roles.data or []

        role_by_id: Dict[str, dict] = {}
        role_ids = list(dict.fromkeys(ur["role_id"] for ur in user_roles))
        if role_ids:
            roles = self.supabase.table("roles")\
                .select("*")\
                .in_("id", role_ids)\
                .execute()
            role_by_id = {r["id"]: r for r in roles.data or []}

        users = []
        for identity in identities:
            assigned = [
                RoleResponse(**role_by_id[ur["role_id"]])
                for ur in user_roles
                if ur["user_id"] == identity.id and ur["role_id"] in role_by_id
            ]
            users.append(UserWithRolesResponse(
                id=identity.id,
                email=identity.email,
                roles=assigned,
                role=assigned[0].name if assigned else identity.metadata_role,
                user_metadata=identity.user_metadata,
            ))
        return users

    def _list_identities(self) -> List[IdentityUser]:
        """All auth users; falls back to the user ids known to user_roles when the admin API is unavailable"""
        try:
            identities = []
            page = 1
            while True:
                batch = self.supabase.auth.admin.list_users(page=page, per_page=IDENTITY_PAGE_SIZE)
                identities.extend(IdentityUser.from_provider(u) for u in batch or [])
                if not batch or len(batch) < IDENTITY_PAGE_SIZE:
                    break
                page += 1
            return identities
        except Exception as e:
            logger.warning(f"Auth admin list_users unavailable, deriving users from user_roles: {e}")

        result = self.supabase.table("user_roles")\
            .select("user_id")\
            .execute()
        user_ids = dict.fromkeys(ur["user_id"] for ur in result.data or [])
        return [IdentityUser(id=user_id) for user_id in user_ids]

    # ------------------------------------------------------------------
    # Role assignment
    # ------------------------------------------------------------------
    def assign_role(self, caller: Optional[Caller], request: AssignRoleRequest) -> None:
        """Give a user exactly one role, looked up by name"""
        if not request.user_id or not request.role_name:
            raise HTTPException(status_code=400, detail="Missing user_id or role_name")
        self._require_caller(caller)
        try:
            role = self._get_role(name=request.role_name)
            if not role:
                raise HTTPException(status_code=404, detail="Role not found")
            self._replace_role(request.user_id, role)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error assigning role {request.role_name} to {request.user_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def assign_role_by_id(self, caller: Optional[Caller], request: UserRoleRequest) -> None:
        """Give a user exactly one role, looked up by id"""
        if not request.user_id or not request.role_id:
            raise HTTPException(status_code=400, detail="Missing user_id or role_id")
        self._require_caller(caller)
        try:
            role = self._get_role(role_id=request.role_id)
            if not role:
                raise HTTPException(status_code=404, detail="Role not found")
            self._replace_role(request.user_id, role)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error assigning role {request.role_id} to {request.user_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def remove_role(self, caller: Optional[Caller], request: UserRoleRequest) -> None:
        """Remove one role from a user, keeping at least one administrator"""
        if not request.user_id or not request.role_id:
            raise HTTPException(status_code=400, detail="Missing user_id or role_id")
        self._require_caller(caller)
        try:
            previous = self._get_user_role_rows(request.user_id)
            admin_role_id = self._get_admin_role_id()
            removing_admin = (
                admin_role_id is not None
                and request.role_id == admin_role_id
                and self._holds_role(previous, admin_role_id)
            )
            if removing_admin:
                if len(self._get_admin_user_ids(admin_role_id)) <= 1:
                    raise HTTPException(status_code=400, detail="Cannot remove role: last administrator")

            self.supabase.table("user_roles")\
                .delete()\
                .eq("user_id", request.user_id)\
                .eq("role_id", request.role_id)\
                .execute()

            if removing_admin:
                self._ensure_admin_remains(admin_role_id, request.user_id, previous)
            logger.info(f"Removed role {request.role_id} from user {request.user_id}")
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error removing role {request.role_id} from {request.user_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def _replace_role(self, user_id: str, role: dict) -> None:
        previous = self._get_user_role_rows(user_id)
        admin_role_id = self._get_admin_role_id()
        demoting = (
            admin_role_id is not None
            and self._holds_role(previous, admin_role_id)
            and role["id"] != admin_role_id
        )
        if demoting and len(self._get_admin_user_ids(admin_role_id)) <= 1:
            raise HTTPException(status_code=400, detail="Cannot remove role: last administrator")

        # Single role per user: drop every existing row, then insert the new one
        self.supabase.table("user_roles")\
            .delete()\
            .eq("user_id", user_id)\
            .execute()
        self.supabase.table("user_roles").insert({
            "user_id": user_id,
            "role_id": role["id"],
            "assigned_at": datetime.now(timezone.utc).isoformat()
        }).execute()

        if demoting:
            self._ensure_admin_remains(admin_role_id, user_id, previous)

        logger.info(f"Assigned role {role['name']} to user {user_id}")
        self._sync_metadata_role(user_id, role["name"])

    # ------------------------------------------------------------------
    # Activation
    # ------------------------------------------------------------------
    def set_active(self, caller: Optional[Caller], request: SetActiveRequest) -> None:
        """Flip profiles.is_active; deactivation also blocks sign-in and revokes sessions (best-effort)"""
        if not request.user_id or not isinstance(request.is_active, bool):
            raise HTTPException(status_code=400, detail="Missing user_id or is_active")
        caller = self._require_caller(caller)
        if caller.id == request.user_id:
            raise HTTPException(status_code=400, detail="Cannot disable current logged user")
        try:
            profile = self.supabase.table("profiles")\
                .select("*")\
                .eq("id", request.user_id)\
                .limit(1)\
                .execute()

            if not profile.data:
                self.supabase.table("profiles").insert({
                    "id": request.user_id,
                    "is_active": request.is_active
                }).execute()
            else:
                self.supabase.table("profiles")\
                    .update({"is_active": request.is_active})\
                    .eq("id", request.user_id)\
                    .execute()
        except Exception as e:
            logger.error(f"Error updating profile for {request.user_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        if request.is_active:
            self._set_ban(request.user_id, "none")
        else:
            self._set_ban(request.user_id, BAN_FOREVER)
            self._revoke_refresh_tokens(request.user_id)
        logger.info(f"Set is_active={request.is_active} for user {request.user_id}")

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------
    def delete_user(self, caller: Optional[Caller], request: DeleteUserRequest) -> None:
        """Remove role rows, profile and identity record"""
        if not request.user_id:
            raise HTTPException(status_code=400, detail="Missing user_id")
        caller = self._require_caller(caller)
        if caller.id == request.user_id:
            raise HTTPException(status_code=400, detail="Cannot delete currently logged user")
        try:
            previous = self._get_user_role_rows(request.user_id)
            admin_role_id = self._get_admin_role_id()
            admin_user_ids = self._get_admin_user_ids(admin_role_id) if admin_role_id else []
            is_admin = request.user_id in admin_user_ids
            if is_admin and len(admin_user_ids) <= 1:
                raise HTTPException(status_code=400, detail="Cannot delete the last administrator")

            self.supabase.table("user_roles")\
                .delete()\
                .eq("user_id", request.user_id)\
                .execute()

            # Last chance to undo before the identity record is gone
            if is_admin:
                self._ensure_admin_remains(admin_role_id, request.user_id, previous)

            self.supabase.table("profiles")\
                .delete()\
                .eq("id", request.user_id)\
                .execute()

            self.supabase.auth.admin.delete_user(request.user_id)
            logger.info(f"Deleted user {request.user_id}")
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting user {request.user_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _require_caller(caller: Optional[Caller]) -> Caller:
        if caller is None:
            raise HTTPException(status_code=401, detail="Unauthorized")
        return caller

    @staticmethod
    def _holds_role(rows: List[dict], role_id: str) -> bool:
        return any(r["role_id"] == role_id for r in rows)

    def _get_role(self, name: Optional[str] = None, role_id: Optional[str] = None) -> Optional[dict]:
        query = self.supabase.table("roles").select("*")
        query = query.eq("name", name) if name is not None else query.eq("id", role_id)
        result = query.limit(1).execute()
        return result.data[0] if result.data else None

    def _get_admin_role_id(self) -> Optional[str]:
        result = self.supabase.table("roles")\
            .select("id")\
            .eq("name", self.admin_role_name)\
            .limit(1)\
            .execute()
        return result.data[0]["id"] if result.data else None

    def _get_admin_user_ids(self, admin_role_id: str) -> List[str]:
        result = self.supabase.table("user_roles")\
            .select("user_id")\
            .eq("role_id", admin_role_id)\
            .execute()
        return list(dict.fromkeys(r["user_id"] for r in result.data or []))

    def _get_user_role_rows(self, user_id: str) -> List[dict]:
        result = self.supabase.table("user_roles")\
            .select("user_id, role_id, assigned_at")\
            .eq("user_id", user_id)\
            .execute()
        return result.data or []

    def _ensure_admin_remains(self, admin_role_id: str, user_id: str, previous: List[dict]) -> None:
        """Re-check after the write; if a concurrent request also removed an administrator, restore this user's rows"""
        if self._get_admin_user_ids(admin_role_id):
            return
        logger.error(f"No administrator left after changing user {user_id}; restoring previous roles")
        self.supabase.table("user_roles")\
            .delete()\
            .eq("user_id", user_id)\
            .execute()
        if previous:
            self.supabase.table("user_roles").insert([
                {"user_id": r["user_id"], "role_id": r["role_id"], "assigned_at": r.get("assigned_at")}
                for r in previous
            ]).execute()
        raise HTTPException(status_code=409, detail="Concurrent change left no administrator")

    def _sync_metadata_role(self, user_id: str, role_name: str) -> None:
        """Mirror the role into user_metadata so token-based checks see it (best-effort)"""
        try:
            self.supabase.auth.admin.update_user_by_id(user_id, {"user_metadata": {"role": role_name}})
        except Exception as e:
            logger.warning(f"Could not update user_metadata.role for {user_id}: {e}")

    def _set_ban(self, user_id: str, ban_duration: str) -> None:
        try:
            self.supabase.auth.admin.update_user_by_id(user_id, {"ban_duration": ban_duration})
        except Exception as e:
            logger.warning(f"Could not set ban_duration={ban_duration} for {user_id}: {e}")

    def _revoke_refresh_tokens(self, user_id: str) -> None:
        try:
            self.supabase.rpc("revoke_refresh_tokens", {"target_user_id": user_id}).execute()
        except Exception as e:
            logger.warning(f"Could not revoke refresh tokens for {user_id}: {e}")
