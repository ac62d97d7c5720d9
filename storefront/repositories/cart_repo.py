# storefront/repositories/cart_repo.py
import uuid

from sqlalchemy import func
from sqlmodel import Session, select

from storefront.models.cart import Cart, CartItem
from storefront.models.user import utcnow


class CartRepository:

    # Cart document
    def get_for_user(self, session: Session, user_id: uuid.UUID) -> Cart | None:
        stmt = select(Cart).where(Cart.user_id == user_id)
        return session.exec(stmt).first()

    def create(self, session: Session, user_id: uuid.UUID) -> Cart:
        cart = Cart(user_id=user_id)
        session.add(cart)
        session.commit()
        session.refresh(cart)
        return cart

    def touch(self, session: Session, cart: Cart) -> None:
        cart.updated_at = utcnow()
        session.add(cart)

    # Lines
    def list_items(self, session: Session, cart_id: uuid.UUID) -> list[CartItem]:
        stmt = (
            select(CartItem)
            .where(CartItem.cart_id == cart_id)
            .order_by(CartItem.position, CartItem.created_at)
        )
        return session.exec(stmt).all()

    def get_item(
        self, session: Session, cart_id: uuid.UUID, product_id: uuid.UUID
    ) -> CartItem | None:
        stmt = select(CartItem).where(
            CartItem.cart_id == cart_id, CartItem.product_id == product_id
        )
        return session.exec(stmt).first()

    def next_position(self, session: Session, cart_id: uuid.UUID) -> int:
        stmt = select(func.max(CartItem.position)).where(CartItem.cart_id == cart_id)
        current = session.exec(stmt).one()
        return 0 if current is None else current + 1

    # CRUD
    def save_item(self, session: Session, cart: Cart, item: CartItem) -> CartItem:
        session.add(item)
        self.touch(session, cart)
        session.commit()
        session.refresh(item)
        return item

    def delete_item(self, session: Session, cart: Cart, item: CartItem) -> None:
        session.delete(item)
        self.touch(session, cart)
        session.commit()

    def clear_items(self, session: Session, cart: Cart, commit: bool = True) -> None:
        """
        Remove every line but keep the cart row.

        commit=False lets checkout fold the clear into its own transaction.
        """
        for row in self.list_items(session, cart.id):
            session.delete(row)
        self.touch(session, cart)
        if commit:
            session.commit()
