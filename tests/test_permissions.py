"""Tests for the member role access policy."""

from types import SimpleNamespace

import pytest

from budgetbook.core.permissions import (
    PERMISSIONS,
    Action,
    InvalidRoleError,
    MemberRole,
    can_perform_action,
    parse_role,
    permitted_actions,
    sort_members,
)

EXPECTED = {
    MemberRole.OWNER: set(Action),
    MemberRole.ADMIN: set(Action),
    MemberRole.MEMBER: {Action.VIEW, Action.CREATE, Action.EDIT},
    MemberRole.VIEWER: {Action.VIEW},
}


@pytest.mark.parametrize("role", list(MemberRole))
@pytest.mark.parametrize("action", list(Action))
def test_policy_table(role: MemberRole, action: Action) -> None:
    """Every role and action pair follows the policy table."""
    allowed = action in EXPECTED[role]
    if can_perform_action(role, action) is not allowed:
        msg = f"Expected {role.value}/{action.value} allowed={allowed}"
        raise AssertionError(msg)


def test_every_role_has_an_entry() -> None:
    """The table covers every role."""
    if set(PERMISSIONS) != set(MemberRole):
        msg = f"Roles missing from the table: {set(MemberRole) - set(PERMISSIONS)}"
        raise AssertionError(msg)
    if permitted_actions(MemberRole.VIEWER) != frozenset({Action.VIEW}):
        msg = "Viewer should only view"
        raise AssertionError(msg)


def test_raw_strings_are_accepted() -> None:
    """Boundary strings are parsed before the lookup."""
    if can_perform_action("viewer", "edit"):
        msg = "Viewer must not edit"
        raise AssertionError(msg)
    if not can_perform_action("member", "view"):
        msg = "Member must view"
        raise AssertionError(msg)


@pytest.mark.parametrize(("role", "action"), [("guest", "view"), ("", "view"), ("owner", "archive")])
def test_unknown_values_are_denied(role: str, action: str) -> None:
    """Unknown roles or actions are denied without raising."""
    if can_perform_action(role, action):
        msg = f"Expected {role!r}/{action!r} to be denied"
        raise AssertionError(msg)


def test_parse_role_rejects_unknown() -> None:
    """Unknown role strings raise InvalidRoleError, a ValueError."""
    if parse_role("admin") is not MemberRole.ADMIN:
        msg = "Expected 'admin' to parse"
        raise AssertionError(msg)
    with pytest.raises(InvalidRoleError):
        parse_role("guest")
    with pytest.raises(ValueError, match="guest"):
        parse_role("guest")


def test_sort_members_orders_by_role_and_keeps_source_order() -> None:
    """Members are ordered owner, admin, member, viewer with ties in source order."""
    members = [
        SimpleNamespace(uid="v1", role="viewer"),
        SimpleNamespace(uid="m1", role=MemberRole.MEMBER),
        SimpleNamespace(uid="o1", role="owner"),
        SimpleNamespace(uid="m2", role="member"),
        SimpleNamespace(uid="a1", role="admin"),
        SimpleNamespace(uid="v2", role="viewer"),
    ]
    ordered = [m.uid for m in sort_members(members)]
    if ordered != ["o1", "a1", "m1", "m2", "v1", "v2"]:
        msg = f"Unexpected member order {ordered}"
        raise AssertionError(msg)
