# storefront/schemas/wishlist.py
import uuid

from storefront.schemas.common import CamelModel
from storefront.schemas.product import WishlistProduct


class WishlistAdd(CamelModel):
    product_id: uuid.UUID


class WishlistRead(CamelModel):
    """
    Resolved wishlist. Products deleted since being saved are left out.
    """

    id: uuid.UUID | None = None
    user_id: uuid.UUID | None = None
    items: list[WishlistProduct]


class WishlistResponse(CamelModel):
    message: str
    wishlist: WishlistRead


class WishlistCheck(CamelModel):
    is_in_wishlist: bool
