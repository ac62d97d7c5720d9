# storefront/services/wishlist_service.py
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.models.wishlist import Wishlist
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.wishlist_repo import WishlistRepository
from storefront.schemas.product import WishlistProduct
from storefront.schemas.wishlist import WishlistRead, WishlistResponse


class WishlistService:
    """
    Per-user set of saved products.
    """

    def __init__(self, wishlist_repo: WishlistRepository, product_repo: ProductRepository):
        self.wishlist_repo = wishlist_repo
        self.product_repo = product_repo

    def _require_wishlist(self, session: Session, user_id: uuid.UUID) -> Wishlist:
        wishlist = self.wishlist_repo.get_for_user(session, user_id)
        if not wishlist:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Wishlist not found",
            )
        return wishlist

    def build_wishlist(self, session: Session, wishlist: Wishlist) -> WishlistRead:
        items = self.wishlist_repo.list_items(session, wishlist.id)
        products = self.product_repo.get_many(session, (it.product_id for it in items))

        resolved = [
            WishlistProduct.model_validate(products[it.product_id])
            for it in items
            if it.product_id in products
        ]
        return WishlistRead(id=wishlist.id, user_id=wishlist.user_id, items=resolved)

    def get_wishlist(self, session: Session, user_id: uuid.UUID) -> WishlistRead:
        wishlist = self.wishlist_repo.get_for_user(session, user_id)
        if wishlist is None:
            return WishlistRead(items=[])
        return self.build_wishlist(session, wishlist)

    def add_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
    ) -> WishlistResponse:
        """
        Save a product. Saving it twice is not an error and does not
        duplicate it.
        """
        if self.product_repo.get_by_id(session, product_id) is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )

        wishlist = self.wishlist_repo.get_for_user(session, user_id)
        if wishlist is None:
            wishlist = self.wishlist_repo.create(session, user_id)

        if self.wishlist_repo.get_item(session, wishlist.id, product_id) is not None:
            return WishlistResponse(
                message="Product already in wishlist",
                wishlist=self.build_wishlist(session, wishlist),
            )

        self.wishlist_repo.add_item(session, wishlist, product_id)
        return WishlistResponse(
            message="Product added to wishlist",
            wishlist=self.build_wishlist(session, wishlist),
        )

    def remove_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
    ) -> WishlistResponse:
        wishlist = self._require_wishlist(session, user_id)

        item = self.wishlist_repo.get_item(session, wishlist.id, product_id)
        if item is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Item not found in wishlist",
            )

        self.wishlist_repo.delete_item(session, wishlist, item)
        return WishlistResponse(
            message="Product removed from wishlist",
            wishlist=self.build_wishlist(session, wishlist),
        )

    def contains(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
    ) -> bool:
        wishlist = self.wishlist_repo.get_for_user(session, user_id)
        if wishlist is None:
            return False
        return self.wishlist_repo.get_item(session, wishlist.id, product_id) is not None

    def clear(self, session: Session, user_id: uuid.UUID) -> WishlistResponse:
        wishlist = self._require_wishlist(session, user_id)
        self.wishlist_repo.clear_items(session, wishlist)
        return WishlistResponse(
            message="Wishlist cleared successfully",
            wishlist=self.build_wishlist(session, wishlist),
        )
