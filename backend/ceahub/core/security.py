from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi.security import HTTPBearer
from jose import JWTError, jwt

from ceahub.core.config import settings
from ceahub.core.errors import Unauthorized

# auto_error=False: a missing header must be a 401, not FastAPI's default 403.
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthenticatedUser:
    id: uuid.UUID
    email: Optional[str] = None


def normalize_token(token: str | None) -> str:
    """
    Make token decoding resilient to common Swagger / copy-paste issues:
    - Leading/trailing whitespace/newlines
    - Surrounding quotes
    - Accidentally including the 'Bearer ' prefix in the token field
    """
    if token is None:
        return ""

    t = token.strip()

    # remove surrounding quotes if present
    if (t.startswith('"') and t.endswith('"')) or (t.startswith("'") and t.endswith("'")):
        t = t[1:-1].strip()

    # remove accidental bearer prefix
    if t.lower().startswith("bearer "):
        t = t[7:].strip()

    return t


def parse_subject(sub: Any) -> uuid.UUID:
    try:
        return uuid.UUID(str(sub))
    except (TypeError, ValueError):
        raise Unauthorized("User not found for this token.")


def create_access_token(
    subject: str,
    email: Optional[str] = None,
    expires_minutes: int = 60,
    secret: Optional[str] = None,
) -> str:
    """
    Mint a Supabase-shaped access token (sub, email, aud, exp).
    Only useful where the JWT secret is known: local tooling and tests.
    """
    now = datetime.now(timezone.utc)
    to_encode: dict[str, Any] = {
        "sub": str(subject),
        "aud": settings.JWT_AUDIENCE,
        "role": "authenticated",
        "exp": int((now + timedelta(minutes=expires_minutes)).timestamp()),
        "iat": int(now.timestamp()),
    }
    if email:
        to_encode["email"] = email

    return jwt.encode(
        to_encode,
        secret or settings.SUPABASE_JWT_SECRET or "",
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str, secret: str) -> AuthenticatedUser:
    token = normalize_token(token)
    if not token:
        raise Unauthorized("No token provided.")

    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            options={"require_sub": True, "require_exp": True},
        )
    except JWTError:
        # Includes expired signature, bad format, bad signature, wrong audience, etc.
        raise Unauthorized("Invalid or expired token.")

    sub = payload.get("sub")
    if not sub:
        raise Unauthorized("User not found for this token.")

    return AuthenticatedUser(id=parse_subject(sub), email=payload.get("email"))
