# storefront/schemas/order.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from storefront.schemas.common import CamelModel
from storefront.schemas.user import UserBrief

OrderStatus = Literal["processing", "confirmed", "shipped", "delivered", "cancelled"]


class ShippingAddress(CamelModel):
    address: str
    city: str
    postal_code: str
    country: str

    @field_validator("address", "city", "postal_code", "country")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class _CheckoutBase(CamelModel):
    shipping_address: ShippingAddress
    payment_method: str

    @field_validator("payment_method")
    @classmethod
    def payment_method_not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("payment method cannot be empty")
        return v


class OrderCreate(_CheckoutBase):
    """
    Payload for a single-product purchase ("buy now").

    Backend derives:
      - user from token
      - price snapshot and totalPrice from the product
      - status = 'processing', isPaid = false
    """

    product_id: uuid.UUID
    quantity: int = Field(default=1, ge=1)


class OrderFromCart(_CheckoutBase):
    """
    Payload for converting the current cart into an order.
    """


class PaymentResult(BaseModel):
    """
    Payment provider callback data, stored verbatim.

    Keys stay snake_case as sent by the provider.
    """

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    status: str | None = None
    update_time: str | None = None
    email_address: str | None = None


class ManualPayment(CamelModel):
    """
    UPI payment proof. At least one of the two fields is required.
    """

    transaction_id: str | None = None
    screenshot_url: str | None = None

    @model_validator(mode="after")
    def require_proof(self) -> "ManualPayment":
        if not (self.transaction_id or self.screenshot_url):
            raise ValueError("transactionId or screenshotUrl is required")
        return self


class OrderStatusUpdate(CamelModel):
    """
    Admin payload to change order status.
    """

    status: OrderStatus


class OrderItemRead(CamelModel):
    """
    Representation of a single order line item.
    """

    product_id: uuid.UUID
    product_name: str | None = None
    image_url: str | None = None
    quantity: int
    price: float


class OrderRead(CamelModel):
    """
    Full order view including items.
    """

    id: uuid.UUID
    user_id: uuid.UUID
    user: UserBrief | None = None
    products: list[OrderItemRead]
    shipping_address: ShippingAddress
    payment_method: str
    payment_result: PaymentResult | None = None
    total_price: float
    shipping_fee: float
    is_paid: bool
    paid_at: datetime | None = None
    is_delivered: bool
    delivered_at: datetime | None = None
    status: OrderStatus
    payment_proof: str | None = None
    created_at: datetime
    updated_at: datetime


class OrderResponse(CamelModel):
    message: str
    order: OrderRead
