# storefront/schemas/cart.py
import uuid

from pydantic import Field

from storefront.schemas.common import CamelModel
from storefront.schemas.product import ProductSummary


class CartItemAdd(CamelModel):
    """
    Payload for adding to cart.
    """

    product_id: uuid.UUID
    quantity: int = Field(default=1, ge=1)


class CartItemUpdate(CamelModel):
    """
    Payload for changing a line's quantity.

    quantity <= 0 removes the line.
    """

    product_id: uuid.UUID
    quantity: int


class CartItemRead(CamelModel):
    """
    One cart line. `product` is null when the product no longer exists.
    """

    product_id: uuid.UUID
    product: ProductSummary | None = None
    quantity: int


class CartRead(CamelModel):
    """
    Full cart response model with total.

    id/user_id are null for a user who never added anything.
    """

    id: uuid.UUID | None = None
    user_id: uuid.UUID | None = None
    items: list[CartItemRead]
    total: float


class CartClearResponse(CamelModel):
    message: str
    cart: CartRead
