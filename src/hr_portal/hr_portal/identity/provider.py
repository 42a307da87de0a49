from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol

import jwt

from ..core.constants import DEFAULT_SESSION_TTL_HOURS, DEFAULT_TOKEN_TTL_MINUTES
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from ..users.model import User

_ALGORITHM = "HS256"
_ID_TOKEN = "id"
_SESSION_TOKEN = "session"


@dataclass(frozen=True)
class IdentityClaims:
    uid: str
    email: str
    role: Optional[Role] = None


class IdentityProvider(Protocol):
    def issue_token(self, user: User) -> str:
        raise NotImplementedError

    def create_session_cookie(self, user: User) -> str:
        raise NotImplementedError

    def verify_token(self, token: str) -> IdentityClaims:
        raise NotImplementedError

    def verify_session_cookie(self, cookie: str) -> IdentityClaims:
        raise NotImplementedError


class JwtIdentityProvider(IdentityProvider):
    """Signed HS256 tokens: short-lived ID tokens and longer session tokens.

    Both carry ``sub``, ``email`` and ``role``; ``typ`` keeps one from being
    accepted as the other.
    """

    def __init__(
        self,
        secret_key: str,
        *,
        token_ttl_minutes: int = DEFAULT_TOKEN_TTL_MINUTES,
        session_ttl_hours: int = DEFAULT_SESSION_TTL_HOURS,
    ):
        self._secret_key = secret_key
        self._token_ttl = timedelta(minutes=int(token_ttl_minutes))
        self._session_ttl = timedelta(hours=int(session_ttl_hours))

    def _encode(self, user: User, *, typ: str, ttl: timedelta) -> str:
        issued_at = datetime.now(timezone.utc)
        payload = {
            "sub": user.uid,
            "email": user.email,
            "role": user.role.value,
            "typ": typ,
            "iat": issued_at,
            "exp": issued_at + ttl,
        }
        return jwt.encode(payload, self._secret_key, algorithm=_ALGORITHM)

    def _decode(self, token: str, *, typ: str) -> IdentityClaims:
        if not token:
            raise AuthenticationError("Unauthorized")
        try:
            data = jwt.decode(token, self._secret_key, algorithms=[_ALGORITHM])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token expired")
        except jwt.InvalidTokenError:
            raise AuthenticationError("Invalid token")

        if data.get("typ") != typ or not data.get("sub"):
            raise AuthenticationError("Invalid token")

        try:
            role = Role(data["role"]) if data.get("role") else None
        except ValueError:
            role = None
        return IdentityClaims(uid=str(data["sub"]), email=str(data.get("email", "")), role=role)

    def issue_token(self, user: User) -> str:
        return self._encode(user, typ=_ID_TOKEN, ttl=self._token_ttl)

    def create_session_cookie(self, user: User) -> str:
        return self._encode(user, typ=_SESSION_TOKEN, ttl=self._session_ttl)

    def verify_token(self, token: str) -> IdentityClaims:
        return self._decode(token, typ=_ID_TOKEN)

    def verify_session_cookie(self, cookie: str) -> IdentityClaims:
        return self._decode(cookie, typ=_SESSION_TOKEN)
