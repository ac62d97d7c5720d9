# storefront/models/order.py
import uuid
from datetime import datetime

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field

from storefront.models.user import utcnow

# processing -> confirmed -> shipped -> delivered, cancelled from the first two
ORDER_STATUSES: tuple[str, ...] = (
    "processing",
    "confirmed",
    "shipped",
    "delivered",
    "cancelled",
)


class Order(SQLModel, table=True):
    """
    Placed order.

    Line items and total_price are frozen at creation; afterwards only
    the payment and status fields change. Orders are never deleted.
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    # Soft reference: orders outlive deleted accounts
    user_id: uuid.UUID = Field(index=True)

    # Shipping address
    address: str
    city: str
    postal_code: str
    country: str

    payment_method: str = Field(
        default="Credit Card",
        description="Credit Card | UPI | ...",
    )

    # {id, status, update_time, email_address} from the payment provider
    payment_result: dict | None = Field(
        default=None,
        sa_column=Column(JSON),
    )

    total_price: float = Field(
        default=0.0,
        description="Sum of line price x quantity",
    )

    shipping_fee: float = Field(
        default=0.0,
        description="Tracked separately, not folded into total_price",
    )

    is_paid: bool = Field(default=False)
    paid_at: datetime | None = None

    is_delivered: bool = Field(default=False)
    delivered_at: datetime | None = None

    status: str = Field(
        default="processing",
        index=True,
        description="Order status lifecycle",
    )

    # UPI transaction id or screenshot URL, reviewed manually
    payment_proof: str | None = None

    created_at: datetime = Field(
        default_factory=utcnow,
        index=True,
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=utcnow,
        description="Last modification timestamp (UTC)",
    )


class OrderItem(SQLModel, table=True):
    """
    Line item inside an order.

    price is the product price at the moment of checkout; name and image
    are copied too so the line still renders after the product is gone.
    """

    __tablename__ = "order_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(
        foreign_key="orders.id",
        index=True,
    )

    product_id: uuid.UUID = Field(index=True)

    quantity: int = Field(
        gt=0,
        description="Quantity ordered (>=1)",
    )

    price: float = Field(
        description="Unit price at time of order",
    )

    product_name: str | None = None
    image_url: str | None = None

    # insertion order of lines
    position: int = Field(default=0)
