# storefront/repositories/wishlist_repo.py
import uuid

from sqlmodel import Session, select

from storefront.models.user import utcnow
from storefront.models.wishlist import Wishlist, WishlistItem


class WishlistRepository:

    def get_for_user(self, session: Session, user_id: uuid.UUID) -> Wishlist | None:
        stmt = select(Wishlist).where(Wishlist.user_id == user_id)
        return session.exec(stmt).first()

    def create(self, session: Session, user_id: uuid.UUID) -> Wishlist:
        wishlist = Wishlist(user_id=user_id)
        session.add(wishlist)
        session.commit()
        session.refresh(wishlist)
        return wishlist

    def list_items(self, session: Session, wishlist_id: uuid.UUID) -> list[WishlistItem]:
        stmt = (
            select(WishlistItem)
            .where(WishlistItem.wishlist_id == wishlist_id)
            .order_by(WishlistItem.created_at)
        )
        return session.exec(stmt).all()

    def get_item(
        self, session: Session, wishlist_id: uuid.UUID, product_id: uuid.UUID
    ) -> WishlistItem | None:
        stmt = select(WishlistItem).where(
            WishlistItem.wishlist_id == wishlist_id,
            WishlistItem.product_id == product_id,
        )
        return session.exec(stmt).first()

    def add_item(
        self, session: Session, wishlist: Wishlist, product_id: uuid.UUID
    ) -> WishlistItem:
        item = WishlistItem(wishlist_id=wishlist.id, product_id=product_id)
        session.add(item)
        wishlist.updated_at = utcnow()
        session.add(wishlist)
        session.commit()
        session.refresh(item)
        return item

    def delete_item(
        self, session: Session, wishlist: Wishlist, item: WishlistItem
    ) -> None:
        session.delete(item)
        wishlist.updated_at = utcnow()
        session.add(wishlist)
        session.commit()

    def clear_items(self, session: Session, wishlist: Wishlist) -> None:
        for row in self.list_items(session, wishlist.id):
            session.delete(row)
        wishlist.updated_at = utcnow()
        session.add(wishlist)
        session.commit()
