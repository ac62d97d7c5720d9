# storefront/services/product_service.py
import logging
import math
import uuid

from fastapi import HTTPException, status
from pydantic.alias_generators import to_camel
from sqlmodel import Session

from storefront.core.storage_utils import (
    upload_to_storage,
    delete_public_url,
    generate_filename,
)
from storefront.models.product import CATEGORIES, Product
from storefront.models.user import User, utcnow
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.product import ProductPage, ProductRead, ProductUpdate

logger = logging.getLogger(__name__)

# --- Image config ---

MAX_IMAGE_BYTES = 5 * 1024 * 1024  # 5MB per image

ALLOWED_IMAGE_CONTENT_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}

FEATURED_LIMIT = 4
CATEGORY_SECTION_LIMIT = 6

# Sort keys accepted by the listing, in both wire (camelCase) and
# attribute (snake_case) spelling.
SORTABLE_FIELDS: dict[str, str] = {}
for _name in Product.model_fields:
    SORTABLE_FIELDS[_name] = _name
    SORTABLE_FIELDS[to_camel(_name)] = _name


class ProductService:
    """
    Business logic for the catalog.

    Responsibilities:
      - public search / featured / category sections
      - admin create (with image upload), update, delete
      - image validation and hosting orchestration
    """

    def __init__(self, repo: ProductRepository):
        self.repo = repo

    # ----- Helpers -----

    @staticmethod
    def _validate_and_get_ext(content_type: str, file_bytes: bytes) -> str:
        if content_type not in ALLOWED_IMAGE_CONTENT_TYPES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Unsupported image type. Allowed: JPEG, PNG, WEBP.",
            )

        if not file_bytes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Image file is empty.",
            )

        if len(file_bytes) > MAX_IMAGE_BYTES:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail="Image too large (max 5MB).",
            )

        return ALLOWED_IMAGE_CONTENT_TYPES[content_type]

    @staticmethod
    def _validate_category(category: str) -> str:
        category = category.strip().lower()
        if category not in CATEGORIES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid category. Allowed: {', '.join(CATEGORIES)}",
            )
        return category

    # ----- Public catalog -----

    def search_products(
        self,
        session: Session,
        *,
        page: int = 1,
        limit: int = 10,
        search: str = "",
        category: str = "",
        sort: str = "createdAt",
        order: str = "desc",
    ) -> ProductPage:
        """
        Paginated listing with name search, category filter and sort.

        Any product field may be used as sort key; unknown keys => 400.
        """
        field = SORTABLE_FIELDS.get(sort)
        if field is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid sort field: {sort}",
            )

        products, total = self.repo.search(
            session,
            search=search.strip() or None,
            category=category.strip() or None,
            sort_column=getattr(Product, field),
            descending=order.lower() == "desc",
            skip=(page - 1) * limit,
            limit=limit,
        )

        return ProductPage(
            products=[ProductRead.model_validate(p) for p in products],
            total=total,
            page=page,
            total_pages=math.ceil(total / limit),
        )

    def list_featured(self, session: Session) -> list[Product]:
        return self.repo.list_featured(session, limit=FEATURED_LIMIT)

    def list_by_category(self, session: Session, category: str) -> list[Product]:
        return self.repo.list_by_category(
            session, category, limit=CATEGORY_SECTION_LIMIT
        )

    def get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found!",
            )
        return product

    # ----- Admin -----

    def list_all(self, session: Session) -> list[Product]:
        return self.repo.list_all(session)

    def create_product(
        self,
        session: Session,
        admin: User,
        *,
        name: str,
        description: str,
        price: float,
        category: str,
        content_type: str,
        file_bytes: bytes,
        discount: str | None = None,
        in_stock: bool = True,
        featured: bool = False,
    ) -> Product:
        """
        Create a product from the admin upload form.

        - Validates category and image before anything is uploaded.
        - Uploads the image to a random path under products/.
        """
        name = name.strip()
        description = description.strip()
        if not name or not description:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="All fields including image are required",
            )
        if price < 0:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Price cannot be negative",
            )

        category = self._validate_category(category)
        ext = self._validate_and_get_ext(content_type, file_bytes)

        path = f"products/{generate_filename(ext)}"
        image_url = upload_to_storage(path, file_bytes, content_type)

        product = Product(
            name=name,
            description=description,
            price=price,
            category=category,
            image_url=image_url,
            discount=(discount or "").strip() or "0%",
            in_stock=in_stock,
            featured=featured,
            created_by=admin.id,
        )
        product = self.repo.create(session, product)
        logger.info("Product %s created by %s", product.id, admin.id)
        return product

    def update_product(
        self,
        session: Session,
        product_id: uuid.UUID,
        payload: ProductUpdate,
    ) -> Product:
        """
        Partial update of a product. Only provided fields change.

        Replacing imageUrl removes the previously hosted image.
        """
        product = self.get_product(session, product_id)
        old_image_url = product.image_url

        for field, value in payload.model_dump(exclude_unset=True).items():
            if value is None:
                continue
            setattr(product, field, value)

        product.updated_at = utcnow()
        product = self.repo.update(session, product)

        if product.image_url != old_image_url:
            delete_public_url(old_image_url)
        return product

    def delete_product(
        self,
        session: Session,
        product_id: uuid.UUID,
    ) -> None:
        """
        Delete a product and, best-effort, its hosted image.

        Carts, wishlists and orders keep their references; readers skip
        or fall back to snapshots.
        """
        product = self.get_product(session, product_id)
        image_url = product.image_url

        self.repo.delete(session, product)
        delete_public_url(image_url)
        logger.info("Product %s deleted", product_id)
