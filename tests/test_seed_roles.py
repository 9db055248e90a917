"""Tests for the role seeding script."""

import pytest

from app.config import settings
from app.config.roles_config import get_default_roles, get_permission_names
from app.scripts.seed_roles import grant_first_admin, seed_roles
from tests.fakes import FakeSupabase


def test_administrator_gets_every_permission():
    roles = {r["name"]: r for r in get_default_roles()}

    assert roles[settings.admin_role_name]["permissions"] == get_permission_names()
    assert roles["cliente"]["permissions"] == []


def test_seed_roles_is_idempotent():
    supabase = FakeSupabase()

    seed_roles(supabase)
    seed_roles(supabase)

    names = sorted(r["name"] for r in supabase.rows("roles"))
    assert names == sorted([settings.admin_role_name, "cliente"])
    assert len(supabase.rows("permissions")) == len(get_permission_names())
    assert len(supabase.rows("role_permissions")) == len(get_permission_names())


def test_grant_first_admin_only_when_nobody_holds_it():
    supabase = FakeSupabase()
    seed_roles(supabase)
    admin_role_id = next(r["id"] for r in supabase.rows("roles") if r["name"] == settings.admin_role_name)

    assert grant_first_admin(supabase, "u-1") is True
    assert grant_first_admin(supabase, "u-2") is False
    assert supabase.roles_of("u-1") == [admin_role_id]
    assert supabase.roles_of("u-2") == []
    assert ("u-1", {"user_metadata": {"role": settings.admin_role_name}}) in supabase.auth.admin.updates


def test_grant_first_admin_requires_seeded_role():
    with pytest.raises(RuntimeError):
        grant_first_admin(FakeSupabase(), "u-1")
