"""
JWT claims issued after a successful login.

``UserClaims`` holds the registered claims as an explicit field instead of
inheriting them, so the standard part (subject, expiry) and the application
part (uid, user agent) stay separate.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from .config import get_settings

ALGORITHM = "HS512"
TOKEN_HEADER = "x-jwt-token"


class TokenInvalidError(Exception):
    pass


@dataclass(frozen=True)
class RegisteredClaims:
    subject: str
    expires_at: datetime

    def to_payload(self) -> dict:
        return {"sub": self.subject, "exp": int(self.expires_at.timestamp())}

    @classmethod
    def from_payload(cls, payload: dict) -> "RegisteredClaims":
        return cls(
            subject=str(payload.get("sub", "")),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
        )


@dataclass(frozen=True)
class UserClaims:
    registered: RegisteredClaims
    uid: int
    user_agent: str

    def to_payload(self) -> dict:
        payload = self.registered.to_payload()
        payload.update({"uid": self.uid, "user_agent": self.user_agent})
        return payload

    @classmethod
    def from_payload(cls, payload: dict) -> "UserClaims":
        return cls(
            registered=RegisteredClaims.from_payload(payload),
            uid=int(payload["uid"]),
            user_agent=str(payload.get("user_agent", "")),
        )


def issue_token(uid: int, user_agent: str, *, now: datetime | None = None) -> str:
    settings = get_settings()
    issued = now or datetime.now(timezone.utc)
    claims = UserClaims(
        registered=RegisteredClaims(
            subject=str(uid),
            expires_at=issued + timedelta(seconds=settings.jwt_ttl_seconds),
        ),
        uid=uid,
        user_agent=user_agent or "",
    )
    return jwt.encode(claims.to_payload(), settings.jwt_secret, algorithm=ALGORITHM)


def parse_token(token: str) -> UserClaims:
    """Decode and validate a token; expired or forged tokens raise TokenInvalidError."""
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
        return UserClaims.from_payload(payload)
    except (jwt.PyJWTError, KeyError, TypeError, ValueError) as exc:
        raise TokenInvalidError(str(exc)) from exc
