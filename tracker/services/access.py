"""Access policy: which roles hold which capabilities. Pure functions, no I/O."""

from enum import Enum

from tracker.core.errors import AuthorizationError

SUPER_ADMIN = "super_admin"
REGIONAL_ADMIN = "regional_admin"
ANALYST = "analyst"
EDITOR = "editor"
PUBLIC_VIEWER = "public_viewer"

ROLES = (SUPER_ADMIN, REGIONAL_ADMIN, ANALYST, EDITOR, PUBLIC_VIEWER)
# Roles a self-registration may request; anything else becomes PUBLIC_VIEWER.
ELEVATED_ROLES = frozenset({SUPER_ADMIN, REGIONAL_ADMIN, ANALYST, EDITOR})
# Roles that can never obtain a session token.
NON_LOGIN_ROLES = frozenset({PUBLIC_VIEWER})


class Capability(str, Enum):
    EDIT = "edit"
    DELETE = "delete"
    UPLOAD = "upload"
    MANAGE_USERS = "manage_users"


_GRANTS: dict[Capability, frozenset[str]] = {
    Capability.EDIT: frozenset({SUPER_ADMIN, REGIONAL_ADMIN, EDITOR}),
    Capability.DELETE: frozenset({SUPER_ADMIN, REGIONAL_ADMIN}),
    Capability.UPLOAD: frozenset({SUPER_ADMIN, REGIONAL_ADMIN, ANALYST}),
    Capability.MANAGE_USERS: frozenset({SUPER_ADMIN}),
}

_DENIED_MESSAGES: dict[Capability, str] = {
    Capability.EDIT: "Access denied: Editors only",
    Capability.DELETE: "Access denied: Cannot delete records",
    Capability.UPLOAD: "Access denied: Uploaders only",
    Capability.MANAGE_USERS: "Access denied: Super Admin only",
}


def has_capability(role: str | None, capability: Capability) -> bool:
    return role is not None and role in _GRANTS[capability]


def can_edit(role: str | None) -> bool:
    return has_capability(role, Capability.EDIT)


def can_delete(role: str | None) -> bool:
    return has_capability(role, Capability.DELETE)


def can_upload(role: str | None) -> bool:
    return has_capability(role, Capability.UPLOAD)


def is_super_admin(role: str | None) -> bool:
    return has_capability(role, Capability.MANAGE_USERS)


def can_login(role: str | None) -> bool:
    return role in ROLES and role not in NON_LOGIN_ROLES


def require(role: str | None, *capabilities: Capability) -> None:
    """Raise AuthorizationError unless role holds every listed capability."""
    for capability in capabilities:
        if not has_capability(role, capability):
            raise AuthorizationError(_DENIED_MESSAGES[capability])
