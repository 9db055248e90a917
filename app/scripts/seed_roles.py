"""
Seed Roles Script
Creates the default roles and their permissions, and optionally grants the
administrator role to a first user when nobody holds it yet.

    python app/scripts/seed_roles.py
    python app/scripts/seed_roles.py --admin-user-id <auth user uuid>
"""

import argparse
import sys
from datetime import datetime, timezone
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from app.config import settings
from app.config.roles_config import get_default_roles
from app.database.supabase_client import get_supabase
from app.modules.roles.schemas import RoleCreate, RoleUpdate
from app.modules.roles.service import RoleService
from supabase import Client
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def seed_roles(supabase: Client):
    """Create missing roles and reset the permission set of existing ones"""
    logger.info("Seeding roles...")
    service = RoleService(supabase)
    created_count = 0
    updated_count = 0

    for role in get_default_roles():
        existing = supabase.table("roles")\
            .select("id")\
            .eq("name", role["name"])\
            .limit(1)\
            .execute()

        if existing.data:
            service.update_role(RoleUpdate(
                id=existing.data[0]["id"],
                description=role["description"],
                permissions=role["permissions"]
            ))
            updated_count += 1
            logger.debug(f"Updated role: {role['name']}")
        else:
            service.create_role(RoleCreate(
                name=role["name"],
                description=role["description"],
                permissions=role["permissions"]
            ))
            created_count += 1
            logger.debug(f"Created role: {role['name']}")

    logger.info(f"Roles seeded: {created_count} created, {updated_count} updated")
    return created_count + updated_count


def grant_first_admin(supabase: Client, user_id: str) -> bool:
    """Give user_id the administrator role if no user holds it. Returns True when granted."""
    admin_role = supabase.table("roles")\
        .select("id")\
        .eq("name", settings.admin_role_name)\
        .limit(1)\
        .execute()
    if not admin_role.data:
        raise RuntimeError(f"Role {settings.admin_role_name} does not exist; seed roles first")
    admin_role_id = admin_role.data[0]["id"]

    holders = supabase.table("user_roles")\
        .select("user_id")\
        .eq("role_id", admin_role_id)\
        .limit(1)\
        .execute()
    if holders.data:
        logger.info(f"Role {settings.admin_role_name} already has a holder; skipping")
        return False

    supabase.table("user_roles")\
        .delete()\
        .eq("user_id", user_id)\
        .execute()
    supabase.table("user_roles").insert({
        "user_id": user_id,
        "role_id": admin_role_id,
        "assigned_at": datetime.now(timezone.utc).isoformat()
    }).execute()
    try:
        supabase.auth.admin.update_user_by_id(user_id, {"user_metadata": {"role": settings.admin_role_name}})
    except Exception as e:
        logger.warning(f"Could not update user_metadata.role for {user_id}: {e}")

    logger.info(f"Granted {settings.admin_role_name} to user {user_id}")
    return True


def main(argv=None):
    """Main function to seed roles and bootstrap the first administrator"""
    parser = argparse.ArgumentParser(description="Seed default roles and permissions")
    parser.add_argument("--admin-user-id", help="auth user id to receive the administrator role")
    args = parser.parse_args(argv)

    try:
        supabase = get_supabase()

        logger.info("Starting roles seeding...")
        role_count = seed_roles(supabase)
        if args.admin_user_id:
            grant_first_admin(supabase, args.admin_user_id)

        logger.info(f"Seeding completed successfully! {role_count} roles processed")
    except Exception as e:
        logger.error(f"Error during seeding: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
