from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import wraps

from flask import g, request, session

from ..core.enums import Role, UserStatus
from ..core.exceptions import AuthenticationError
from ..users.authorization import require_admin
from ..users.model import User
from ..users.repository import UserRepository
from .provider import IdentityClaims, IdentityProvider

logger = logging.getLogger(__name__)

SESSION_KEY = "session_token"


@dataclass(frozen=True)
class Caller:
    uid: str
    role: Role
    user: User


def _bearer_token() -> str | None:
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        return header[len("Bearer "):].strip() or None
    return None


def resolve_caller(identity: IdentityProvider, users: UserRepository) -> Caller:
    """Session token first, then the Bearer ID token.

    The directory role wins over the role claim carried in the token.
    """
    claims: IdentityClaims | None = None
    cookie = session.get(SESSION_KEY)
    if cookie:
        try:
            claims = identity.verify_session_cookie(cookie)
        except AuthenticationError:
            session.pop(SESSION_KEY, None)

    if claims is None:
        token = _bearer_token()
        if not token:
            raise AuthenticationError("Unauthorized")
        claims = identity.verify_token(token)

    user = users.get_by_id(claims.uid)
    if not user or user.status == UserStatus.INACTIVE:
        raise AuthenticationError("Unauthorized")
    if claims.role is not None and claims.role != user.role:
        logger.info("Role claim of %s is stale (%s != %s)", user.uid, claims.role.value, user.role.value)
    return Caller(uid=user.uid, role=user.role, user=user)


def build_guards(identity: IdentityProvider, users: UserRepository):
    """Return ``(login_required, admin_required)`` decorators bound to the container."""

    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.caller = resolve_caller(identity, users)
            return view(*args, **kwargs)

        return wrapper

    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.caller = resolve_caller(identity, users)
            require_admin(g.caller.role)
            return view(*args, **kwargs)

        return wrapper

    return login_required, admin_required
