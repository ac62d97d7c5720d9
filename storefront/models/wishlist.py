# storefront/models/wishlist.py
import uuid
from datetime import datetime

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field

from storefront.models.user import utcnow


class Wishlist(SQLModel, table=True):
    """
    Saved products, at most one wishlist per user.
    """

    __tablename__ = "wishlists"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        ondelete="CASCADE",
        unique=True,
        index=True,
    )

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class WishlistItem(SQLModel, table=True):
    """
    Product reference inside a wishlist. No duplicates per wishlist.
    """

    __tablename__ = "wishlist_items"
    __table_args__ = (UniqueConstraint("wishlist_id", "product_id"),)

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
    )

    wishlist_id: uuid.UUID = Field(
        foreign_key="wishlists.id",
        ondelete="CASCADE",
        index=True,
    )

    product_id: uuid.UUID = Field(index=True)

    created_at: datetime = Field(default_factory=utcnow)
