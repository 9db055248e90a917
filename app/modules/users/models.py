# Supabase tables: profiles, user_roles, auth.users
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Identity records live in Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key, references auth.users.id)
- is_active: boolean (not null, default: true)

user_roles: see app/modules/roles/models.py
Each user holds exactly one role; assigning a role replaces the previous rows.

auth.refresh_tokens is not exposed through PostgREST. Revoking a deactivated
user's sessions goes through this RPC (service role only):

    create or replace function public.revoke_refresh_tokens(target_user_id uuid)
    returns void
    language sql
    security definer
    set search_path = auth, public
    as $$
        delete from auth.refresh_tokens where user_id = target_user_id::text;
    $$;
    revoke execute on function public.revoke_refresh_tokens(uuid) from anon, authenticated;
"""
