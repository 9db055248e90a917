# Supabase Auth
# This module uses Supabase's built-in authentication system
# No custom tables are required - Supabase Auth handles:
# - User sign-in and session management
# - JWT token generation and validation
# - Identity records (auth.users)

"""
Supabase Auth calls used by this service:
- auth.get_user(jwt) - Resolve the caller from a bearer token
- auth.admin.list_users() - List identity records (service role key)
- auth.admin.update_user_by_id() - Mirror the role into user_metadata, ban/unban sign-in
- auth.admin.delete_user() - Remove an identity record

Depending on the project and the API used, identity metadata arrives as
`user_metadata` or `raw_user_meta_data`; IdentityUser resolves both into one field.
"""
