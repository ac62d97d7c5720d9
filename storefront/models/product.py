# storefront/models/product.py
import uuid
from datetime import datetime

from sqlmodel import SQLModel, Field

from storefront.models.user import utcnow

CATEGORIES: tuple[str, ...] = (
    "rings",
    "necklaces",
    "earrings",
    "bracelets",
    "watches",
    "bangles",
    "other",
)


class Product(SQLModel, table=True):
    """
    Catalog entry.

    Created and edited by admins only; public read.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=200,
        index=True,
        description="Display name",
    )

    description: str = Field(
        description="Long description",
    )

    price: float = Field(
        ge=0,
        description="Unit price",
    )

    # one of CATEGORIES
    category: str = Field(
        index=True,
        description="Product category",
    )

    image_url: str = Field(
        description="Public URL of the hosted product image",
    )

    discount: str = Field(
        default="0%",
        description="Display-only discount label, e.g. '10%'",
    )

    rating: float = Field(
        default=5,
        ge=0,
        le=5,
    )

    reviews: int = Field(
        default=0,
        ge=0,
    )

    in_stock: bool = Field(
        default=True,
        index=True,
    )

    featured: bool = Field(
        default=False,
        index=True,
    )

    # Soft reference: deleting the admin keeps their products
    created_by: uuid.UUID = Field(
        index=True,
        description="Admin who uploaded the product",
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        index=True,
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=utcnow,
        description="Last modification timestamp (UTC)",
    )
