# storefront/models/user.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    """
    Registered storefront account.

    Role:
      - is_admin=False: customer (cart, wishlist, orders)
      - is_admin=True:  back-office access to /admin and order status
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=100,
        description="Display name",
    )

    email: str = Field(
        unique=True,
        index=True,
        description="Login email, unique across all users",
    )

    password_hash: str = Field(
        description="bcrypt hash, never returned to clients",
    )

    is_admin: bool = Field(
        default=False,
        index=True,
        description="Grants admin-only routes",
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=utcnow,
        description="Last modification timestamp (UTC)",
    )


class RevokedToken(SQLModel, table=True):
    """
    Access token invalidated at logout.

    Rows only matter for REVOKED_TOKEN_TTL_MINUTES after created_at;
    by then the token itself has expired.
    """

    __tablename__ = "revoked_tokens"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
    )

    token: str = Field(index=True)

    created_at: datetime = Field(
        default_factory=utcnow,
        index=True,
    )
