# storefront/core/auth.py
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from storefront.core.config import get_settings
from storefront.core.security import TokenInvalid, verify_token
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.user_repo import RevokedTokenRepository, UserRepository

logger = logging.getLogger(__name__)

settings = get_settings()

# HTTP Bearer scheme:
# - auto_error=False => a missing Authorization header does not raise
#   FastAPI's own 403, so we can answer with our 401 message instead.
bearer_scheme = HTTPBearer(auto_error=False)

revoked_repo = RevokedTokenRepository()
user_repo = UserRepository()


@dataclass(frozen=True)
class Principal:
    """Authenticated identity bound to the current request."""

    id: uuid.UUID
    is_admin: bool
    token: str


def revocation_cutoff() -> datetime:
    """Revocation entries created before this instant no longer count."""
    return datetime.now(timezone.utc) - timedelta(
        minutes=settings.REVOKED_TOKEN_TTL_MINUTES
    )


def get_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> Principal:
    """
    Authentication gate.

    Flow:
      1. No bearer token => 401.
      2. Token on the revocation list => 401.
      3. Bad signature / expired => 401.
      4. Otherwise bind {id, isAdmin} from the token to the request.

    Raises:
        HTTPException(401)
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token, authorization denied!",
        )

    token = credentials.credentials

    if revoked_repo.is_revoked(session, token, revocation_cutoff()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token is invalid. Please log in again!",
        )

    try:
        claims = verify_token(token)
    except TokenInvalid as exc:
        logger.info("Rejected token: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token!",
        )

    return Principal(id=claims["id"], is_admin=claims["isAdmin"], token=token)


def get_current_user(
    principal: Principal = Depends(get_principal),
    session: Session = Depends(get_session),
) -> User:
    """
    Load the User row behind the principal.

    Raises:
        HTTPException(404): if the account was deleted after the token
        was issued.
    """
    user = user_repo.get_by_id(session, principal.id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found!",
        )
    return user


def require_admin(
    principal: Principal = Depends(get_principal),
    session: Session = Depends(get_session),
) -> User:
    """
    Authorization gate.

    The admin flag is read from the database, not from the token, so a
    demoted admin loses access immediately.

    Raises:
        HTTPException(403): if the user is missing or not an admin.
    """
    user = user_repo.get_by_id(session, principal.id)
    if user is None or not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied! Admins only.",
        )
    return user
