"""Role-based access policy for workspace members.

The table here gates actions offered by the API. Roles and actions are closed
enumerations; raw strings arriving at the boundary are parsed with
:func:`parse_role`, which rejects anything outside the enumeration.
"""

from collections.abc import Iterable
from enum import Enum
from typing import TypeVar

T = TypeVar("T")


class MemberRole(str, Enum):
    """Workspace member roles, ordered from most to least privileged."""

    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"
    VIEWER = "viewer"


class Action(str, Enum):
    """Actions a workspace member may attempt."""

    VIEW = "view"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"
    MANAGE_MEMBERS = "manage_members"


class InvalidRoleError(ValueError):
    """Raised when a boundary value is not a known member role."""


PERMISSIONS: dict[MemberRole, frozenset[Action]] = {
    MemberRole.OWNER: frozenset(Action),
    MemberRole.ADMIN: frozenset(Action),
    MemberRole.MEMBER: frozenset({Action.VIEW, Action.CREATE, Action.EDIT}),
    MemberRole.VIEWER: frozenset({Action.VIEW}),
}

ROLE_ORDER: dict[MemberRole, int] = {role: rank for rank, role in enumerate(MemberRole)}


def parse_role(value: str | MemberRole) -> MemberRole:
    """Parse a boundary value into a MemberRole, rejecting unknown roles."""
    try:
        return MemberRole(value)
    except ValueError as exc:
        msg = f"Unknown member role: {value!r}"
        raise InvalidRoleError(msg) from exc


def permitted_actions(role: MemberRole) -> frozenset[Action]:
    """Return the set of actions granted to a role."""
    return PERMISSIONS[role]


def can_perform_action(role: str | MemberRole, action: str | Action) -> bool:
    """Check whether a role may perform an action.

    Unknown roles and unknown actions are never permitted.
    """
    try:
        parsed_role = parse_role(role)
        parsed_action = Action(action)
    except ValueError:
        return False
    return parsed_action in PERMISSIONS[parsed_role]


def sort_members(members: Iterable[T]) -> list[T]:
    """Order members owner, admin, member, viewer, keeping source order within a role."""
    return sorted(members, key=lambda m: ROLE_ORDER[parse_role(m.role)])
