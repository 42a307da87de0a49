from __future__ import annotations

from ..core.enums import Role
from ..core.exceptions import AuthorizationError


def authorize(caller_uid: str, caller_role: Role, target_uid: str) -> bool:
    """Self-or-admin rule applied by every per-user endpoint."""
    return caller_uid == target_uid or caller_role == Role.ADMIN


def require_access(caller_uid: str, caller_role: Role, target_uid: str) -> None:
    if not authorize(caller_uid, caller_role, target_uid):
        raise AuthorizationError("Forbidden")


def require_admin(caller_role: Role) -> None:
    if caller_role != Role.ADMIN:
        raise AuthorizationError("Admin access required")
