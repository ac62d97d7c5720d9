# storefront/routers/products.py
import uuid

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from storefront.database import get_session
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.product import ProductPage, ProductRead
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
service = ProductService(repo)


# -------- Public endpoints --------


@router.get("", response_model=ProductPage)
def list_products(
    session: Session = Depends(get_session),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    search: str = "",
    category: str = "",
    sort: str = "createdAt",
    order: str = Query(default="desc", pattern="^(asc|desc)$"),
):
    """
    List products.

    - Public endpoint.
    - `search` matches the name case-insensitively.
    - `sort` accepts any product field; `order` is asc | desc.
    """
    return service.search_products(
        session,
        page=page,
        limit=limit,
        search=search,
        category=category,
        sort=sort,
        order=order,
    )


@router.get("/featured", response_model=list[ProductRead])
def list_featured(session: Session = Depends(get_session)):
    """
    Newest four featured products, for the storefront landing page.
    """
    return service.list_featured(session)


@router.get("/category/{category_name}", response_model=list[ProductRead])
def list_by_category(
    category_name: str,
    session: Session = Depends(get_session),
):
    """
    Newest six products of one category.
    """
    return service.list_by_category(session, category_name)


@router.get("/{product_id}", response_model=ProductRead)
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get a single product by id.

    - Public endpoint.
    """
    return service.get_product(session, product_id)
