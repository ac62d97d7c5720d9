# storefront/routers/cart.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.core.auth import get_current_user
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import (
    CartClearResponse,
    CartItemAdd,
    CartItemUpdate,
    CartRead,
)
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository()
product_repo = ProductRepository()
service = CartService(cart_repo, product_repo)


@router.get("", response_model=CartRead)
def get_my_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Get current user's cart with resolved products and total.
    """
    return service.get_cart(session, current_user.id)


@router.post("/add", response_model=CartRead)
def add_to_cart(
    payload: CartItemAdd,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Add product to the current user's cart.

    Returns the updated cart.
    """
    return service.add_item(session, current_user.id, payload)


@router.put("/update", response_model=CartRead)
def update_cart_item(
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Set the quantity of a product in the cart (<= 0 removes it).
    """
    return service.update_item(session, current_user.id, payload)


@router.delete("/remove/{product_id}", response_model=CartRead)
def remove_cart_item(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Remove a product from the cart.
    """
    return service.remove_item(session, current_user.id, product_id)


@router.delete("/clear", response_model=CartClearResponse)
def clear_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Clear the entire cart.
    """
    cart = service.clear(session, current_user.id)
    return CartClearResponse(message="Cart cleared successfully", cart=cart)
