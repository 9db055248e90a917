# Supabase tables: permissions, roles, role_permissions, user_roles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

permissions:
- id: uuid (primary key, default: gen_random_uuid())
- name: text (not null, unique) - e.g., "users:read", "orders:update"
- created_at: timestamp (default: now())

roles:
- id: uuid (primary key, default: gen_random_uuid())
- name: text (not null, unique) - e.g., "administrador", "vendedor", "cliente"
- description: text (nullable)
- disabled: boolean (not null, default: false) - soft-delete flag
- created_at: timestamp (default: now())

role_permissions:
- role_id: uuid (foreign key to roles.id, not null)
- permission_id: uuid (foreign key to permissions.id, not null)
- unique constraint on (role_id, permission_id)

user_roles:
- user_id: uuid (references auth.users.id, not null)
- role_id: uuid (foreign key to roles.id, not null)
- assigned_at: timestamp (default: now())
- unique constraint on (user_id, role_id)

A role is only hard-deleted when no user_roles row references it;
otherwise it is soft-deleted by setting disabled = true.
"""
