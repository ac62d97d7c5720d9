# storefront/schemas/product.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from storefront.schemas.common import CamelModel

Category = Literal[
    "rings",
    "necklaces",
    "earrings",
    "bracelets",
    "watches",
    "bangles",
    "other",
]


class ProductRead(CamelModel):
    """
    Product representation for clients.
    """

    id: uuid.UUID
    name: str
    description: str
    price: float
    category: Category
    image_url: str
    discount: str
    rating: float
    reviews: int
    in_stock: bool
    featured: bool
    created_by: uuid.UUID
    created_at: datetime
    updated_at: datetime


class ProductSummary(CamelModel):
    """
    Product fields embedded in cart lines.
    """

    id: uuid.UUID
    name: str
    price: float
    image_url: str
    category: Category
    discount: str


class WishlistProduct(ProductSummary):
    in_stock: bool


class ProductPage(CamelModel):
    products: list[ProductRead]
    total: int
    page: int
    total_pages: int


class ProductResponse(CamelModel):
    message: str
    product: ProductRead


class ProductUpdate(CamelModel):
    """
    Partial update payload for products.
    All fields are optional.
    """

    name: str | None = Field(default=None, max_length=200)
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    category: Category | None = None
    image_url: str | None = None
    discount: str | None = None
    rating: float | None = Field(default=None, ge=0, le=5)
    reviews: int | None = Field(default=None, ge=0)
    in_stock: bool | None = None
    featured: bool | None = None

    @field_validator("name", "description", "image_url")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v
