# storefront/routers/admin.py
import uuid

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    HTTPException,
    UploadFile,
    status,
)
from sqlmodel import Session

from storefront.core.auth import require_admin
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.common import MessageResponse
from storefront.schemas.product import ProductRead, ProductResponse, ProductUpdate
from storefront.schemas.user import AdminUserUpdate, UserRead, UserResponse
from storefront.services.product_service import ProductService
from storefront.services.user_service import UserService

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)

user_service = UserService(UserRepository())
product_service = ProductService(ProductRepository())


# -------- Users --------


@router.get("/users", response_model=list[UserRead])
def list_users(session: Session = Depends(get_session)):
    """
    List all users (admin only). Password hashes are never returned.
    """
    return user_service.list_users(session)


@router.get("/users/{user_id}", response_model=UserRead)
def get_user(
    user_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return user_service.get_user(session, user_id)


@router.put("/users/{user_id}", response_model=UserResponse)
def update_user(
    user_id: uuid.UUID,
    payload: AdminUserUpdate,
    session: Session = Depends(get_session),
):
    """
    Update name, email or admin flag of a user.
    """
    user = user_service.update_user(session, user_id, payload)
    return UserResponse(
        message="User updated successfully!",
        user=UserRead.model_validate(user),
    )


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    user_service.delete_user(session, user_id)
    return MessageResponse(message="User deleted successfully!")


# -------- Products --------


@router.post(
    "/products",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product with its image",
)
def create_product(
    name: str = Form(...),
    description: str = Form(...),
    price: float = Form(..., ge=0),
    category: str = Form(...),
    discount: str | None = Form(default=None),
    in_stock: bool = Form(default=True, alias="inStock"),
    featured: bool = Form(default=False),
    image: UploadFile = File(...),
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    """
    Create a product from a multipart form (admin only).

    - `image` is required; JPEG, PNG or WEBP up to 5MB.
    - The image is uploaded to object storage and its public URL stored.
    """
    if not image.content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing content-type for uploaded file",
        )

    product = product_service.create_product(
        session,
        admin,
        name=name,
        description=description,
        price=price,
        category=category,
        content_type=image.content_type,
        file_bytes=image.file.read(),
        discount=discount,
        in_stock=in_stock,
        featured=featured,
    )
    return ProductResponse(
        message="Product created successfully",
        product=ProductRead.model_validate(product),
    )


@router.get("/products", response_model=list[ProductRead])
def list_products(session: Session = Depends(get_session)):
    """
    Every product, newest first, without pagination.
    """
    return product_service.list_all(session)


@router.put("/products/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: uuid.UUID,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
):
    """
    Partial update of a product (JSON body).
    """
    product = product_service.update_product(session, product_id, payload)
    return ProductResponse(
        message="Product updated successfully!",
        product=ProductRead.model_validate(product),
    )


@router.delete("/products/{product_id}", response_model=MessageResponse)
def delete_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Delete a product and its hosted image.
    """
    product_service.delete_product(session, product_id)
    return MessageResponse(message="Product deleted successfully!")
