# storefront/services/cart_service.py
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.models.cart import Cart, CartItem
from storefront.models.product import Product
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import (
    CartItemAdd,
    CartItemUpdate,
    CartItemRead,
    CartRead,
)
from storefront.schemas.product import ProductSummary


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - validate product existence and stock flag on add
      - merge repeated adds into one line
      - resolve product details at read time and compute the total
        from current prices, skipping lines whose product is gone

    Adds are a read-modify-write on the line row; two concurrent adds for
    the same product can lose one increment.
    """

    def __init__(self, cart_repo: CartRepository, product_repo: ProductRepository):
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    # ---- internal helpers ----

    def _get_in_stock_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.product_repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        if not product.in_stock:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Product is out of stock",
            )
        return product

    def _require_cart(self, session: Session, user_id: uuid.UUID) -> Cart:
        cart = self.cart_repo.get_for_user(session, user_id)
        if not cart:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Cart not found",
            )
        return cart

    def _require_line(
        self, session: Session, cart: Cart, product_id: uuid.UUID
    ) -> CartItem:
        item = self.cart_repo.get_item(session, cart.id, product_id)
        if not item:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Item not found in cart",
            )
        return item

    def build_cart(self, session: Session, cart: Cart) -> CartRead:
        """
        Compose CartRead from the cart rows.

        Lines whose product no longer resolves are returned with
        product=null and contribute nothing to the total; they are not
        erased.
        """
        items = self.cart_repo.list_items(session, cart.id)
        products = self.product_repo.get_many(session, (it.product_id for it in items))

        item_reads: list[CartItemRead] = []
        total = 0.0

        for it in items:
            product = products.get(it.product_id)
            summary = None
            if product is not None:
                summary = ProductSummary.model_validate(product)
                total += product.price * it.quantity

            item_reads.append(
                CartItemRead(
                    product_id=it.product_id,
                    product=summary,
                    quantity=it.quantity,
                )
            )

        return CartRead(
            id=cart.id,
            user_id=cart.user_id,
            items=item_reads,
            total=total,
        )

    # ---- public operations ----

    def get_cart(self, session: Session, user_id: uuid.UUID) -> CartRead:
        """
        Return the caller's cart; a user without a cart gets an empty one
        (nothing is persisted).
        """
        cart = self.cart_repo.get_for_user(session, user_id)
        if cart is None:
            return CartRead(items=[], total=0.0)
        return self.build_cart(session, cart)

    def add_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: CartItemAdd,
    ) -> CartRead:
        """
        Add a product to the user's cart.

        Rules:
          - product must exist and be in stock
          - the cart is created on first add
          - adding a product already in the cart sums the quantities
        """
        self._get_in_stock_product(session, payload.product_id)

        cart = self.cart_repo.get_for_user(session, user_id)
        if cart is None:
            cart = self.cart_repo.create(session, user_id)

        existing = self.cart_repo.get_item(session, cart.id, payload.product_id)

        if existing:
            existing.quantity += payload.quantity
            self.cart_repo.save_item(session, cart, existing)
        else:
            item = CartItem(
                cart_id=cart.id,
                product_id=payload.product_id,
                quantity=payload.quantity,
                position=self.cart_repo.next_position(session, cart.id),
            )
            self.cart_repo.save_item(session, cart, item)

        return self.build_cart(session, cart)

    def update_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: CartItemUpdate,
    ) -> CartRead:
        """
        Replace the quantity of a line; quantity <= 0 removes it.
        """
        cart = self._require_cart(session, user_id)
        item = self._require_line(session, cart, payload.product_id)

        if payload.quantity > 0:
            item.quantity = payload.quantity
            self.cart_repo.save_item(session, cart, item)
        else:
            self.cart_repo.delete_item(session, cart, item)

        return self.build_cart(session, cart)

    def remove_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
    ) -> CartRead:
        cart = self._require_cart(session, user_id)
        item = self._require_line(session, cart, product_id)

        self.cart_repo.delete_item(session, cart, item)
        return self.build_cart(session, cart)

    def clear(self, session: Session, user_id: uuid.UUID) -> CartRead:
        """
        Empty the cart, keeping the cart itself.
        """
        cart = self._require_cart(session, user_id)
        self.cart_repo.clear_items(session, cart)
        return self.build_cart(session, cart)
