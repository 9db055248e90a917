"""
Default Roles Configuration
Defines the baseline roles and their permission names.
Used by the seed script to bootstrap a fresh database, including the
administrator role that must always keep at least one holder.
"""

from app.config.settings import settings

# Resources managed by the admin backend and the actions available on each
RESOURCES = {
    "roles": ["create", "read", "update", "delete"],
    "users": ["read", "assign_role", "disable", "delete"],
    "notifications": ["send_email", "send_whatsapp"],
}

# Role definitions; "*" expands to every permission
DEFAULT_ROLES = {
    settings.admin_role_name: {
        "description": "Full administrative access",
        "permissions": ["*"]
    },
    "cliente": {
        "description": "Store customer",
        "permissions": []
    }
}


def get_permission_names():
    """All permission names in resource:action form"""
    return [
        f"{resource}:{action}"
        for resource, actions in RESOURCES.items()
        for action in actions
    ]


def get_default_roles():
    """
    Returns the default roles with "*" expanded
    Format: [{"name": "...", "description": "...", "permissions": ["roles:read", ...]}, ...]
    """
    all_permissions = get_permission_names()
    roles = []
    for name, config in DEFAULT_ROLES.items():
        permissions = all_permissions if "*" in config["permissions"] else sorted(config["permissions"])
        roles.append({
            "name": name,
            "description": config["description"],
            "permissions": permissions
        })
    return roles
