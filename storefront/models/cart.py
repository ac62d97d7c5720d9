# storefront/models/cart.py
import uuid
from datetime import datetime

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field

from storefront.models.user import utcnow


class Cart(SQLModel, table=True):
    """
    Shopping cart, at most one per user.

    Created lazily on the first add; emptied (not deleted) on clear
    and on checkout.
    """

    __tablename__ = "carts"

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


class CartItem(SQLModel, table=True):
    """
    One (product, quantity) line inside a cart.

    product_id is a soft reference: the product may be deleted later,
    in which case the line is skipped when the cart is read.
    """

    __tablename__ = "cart_items"
    __table_args__ = (UniqueConstraint("cart_id", "product_id"),)

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    cart_id: uuid.UUID = Field(
        foreign_key="carts.id",
        ondelete="CASCADE",
        index=True,
    )

    product_id: uuid.UUID = Field(index=True)

    quantity: int = Field(
        gt=0,
        description="Must be >= 1",
    )

    # insertion order of lines
    position: int = Field(default=0)

    created_at: datetime = Field(default_factory=utcnow)
