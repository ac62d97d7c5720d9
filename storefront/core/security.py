# storefront/core/security.py
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from storefront.core.config import get_settings

settings = get_settings()

# Create the context once and reuse it
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class TokenInvalid(Exception):
    """Raised when a token fails signature, expiry or claim checks."""


def hash_password(password: str) -> str:
    """Hash a plain-text password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain-text password against a stored bcrypt hash."""
    return pwd_context.verify(plain_password, hashed_password)


def issue_token(principal_id: uuid.UUID, is_admin: bool) -> str:
    """
    Sign an access token for a user.

    Claims:
      - id:      user id (string)
      - isAdmin: admin flag at issue time
      - iat/exp: issue and expiry timestamps
      - jti:     random id, so two tokens issued in the same second differ
    """
    now = datetime.now(timezone.utc)
    payload = {
        "id": str(principal_id),
        "isAdmin": is_admin,
        "iat": now,
        "exp": now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def verify_token(token: str) -> dict[str, Any]:
    """
    Decode and verify an access token.

    Returns:
        {"id": UUID, "isAdmin": bool}

    Raises:
        TokenInvalid: bad signature, expired, or missing/malformed id.
    """
    try:
        claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])
    except JWTError as exc:
        raise TokenInvalid(str(exc)) from exc

    raw_id = claims.get("id")
    if not raw_id:
        raise TokenInvalid("Token missing id")

    try:
        principal_id = uuid.UUID(raw_id)
    except (TypeError, ValueError) as exc:
        raise TokenInvalid("Invalid id in token") from exc

    return {"id": principal_id, "isAdmin": bool(claims.get("isAdmin", False))}
