"""
Capability policy tests. Policies take any profile with a role.
"""

from types import SimpleNamespace

import pytest

from hive.permissions import (
    can_manage_catalog,
    can_manage_settings,
    can_operate_sessions,
    can_view_settings,
    can_view_summary,
    is_admin,
)


ADMIN_ONLY = [is_admin, can_manage_catalog, can_view_summary, can_manage_settings]
ANY_STAFF = [can_operate_sessions, can_view_settings]


@pytest.mark.parametrize("check", ADMIN_ONLY + ANY_STAFF)
@pytest.mark.parametrize("role", ["admin", "Admin", " ADMIN "])
def test_admin_has_every_capability(check, role):
    assert check(SimpleNamespace(role=role))


@pytest.mark.parametrize("check", ADMIN_ONLY)
def test_cashier_lacks_admin_capabilities(check):
    assert not check(SimpleNamespace(role="cashier"))


@pytest.mark.parametrize("check", ANY_STAFF)
def test_cashier_runs_front_desk(check):
    assert check(SimpleNamespace(role="Cashier"))


@pytest.mark.parametrize("check", ADMIN_ONLY + ANY_STAFF)
@pytest.mark.parametrize("profile", [None, SimpleNamespace(role=None), SimpleNamespace(role="guest"), {}])
def test_missing_or_unknown_role_has_nothing(check, profile):
    assert not check(profile)


def test_dict_profiles_supported():
    assert is_admin({"role": "admin"})
    assert not is_admin({"role": "cashier"})
