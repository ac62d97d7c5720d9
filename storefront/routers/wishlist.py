# storefront/routers/wishlist.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.core.auth import get_current_user
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.wishlist_repo import WishlistRepository
from storefront.schemas.wishlist import (
    WishlistAdd,
    WishlistCheck,
    WishlistRead,
    WishlistResponse,
)
from storefront.services.wishlist_service import WishlistService

router = APIRouter(prefix="/wishlist", tags=["Wishlist"])

service = WishlistService(WishlistRepository(), ProductRepository())


@router.get("", response_model=WishlistRead)
def get_my_wishlist(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return service.get_wishlist(session, current_user.id)


@router.post("/add", response_model=WishlistResponse)
def add_to_wishlist(
    payload: WishlistAdd,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return service.add_item(session, current_user.id, payload.product_id)


@router.delete("/remove/{product_id}", response_model=WishlistResponse)
def remove_from_wishlist(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return service.remove_item(session, current_user.id, product_id)


@router.get("/check/{product_id}", response_model=WishlistCheck)
def check_wishlist(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Whether the product is in the caller's wishlist.
    """
    return WishlistCheck(
        is_in_wishlist=service.contains(session, current_user.id, product_id)
    )


@router.delete("/clear", response_model=WishlistResponse)
def clear_wishlist(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return service.clear(session, current_user.id)
