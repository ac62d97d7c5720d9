# storefront/services/order_service.py
import logging
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.core.auth import Principal
from storefront.models.order import Order, OrderItem
from storefront.models.product import Product
from storefront.models.user import User, utcnow
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.order import (
    ManualPayment,
    OrderCreate,
    OrderFromCart,
    OrderItemRead,
    OrderRead,
    OrderStatusUpdate,
    PaymentResult,
    ShippingAddress,
)
from storefront.schemas.user import UserBrief

logger = logging.getLogger(__name__)

# Cart checkouts at or below this subtotal pay a flat shipping fee
FREE_SHIPPING_THRESHOLD = 5000
SHIPPING_FEE = 100

# A customer may cancel only before the parcel leaves
CANCELLABLE_STATUSES = {"processing", "confirmed"}


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Create an order from a single product or from the cart
      - Reject out-of-stock products
      - Freeze line prices at checkout
      - Clear the cart in the same transaction as the order insert
      - Payment marking, manual UPI proof, cancellation
      - Admin status override
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        user_repo: UserRepository,
    ):
        self.order_repo = order_repo
        self.cart_repo = cart_repo
        self.product_repo = product_repo
        self.user_repo = user_repo

    # -------- Checkout --------

    def create_single_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: OrderCreate,
    ) -> OrderRead:
        """
        "Buy now": order one product without touching the cart.
        """
        product = self.product_repo.get_by_id(session, payload.product_id)
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

        order = self._new_order(
            user_id,
            payload.shipping_address,
            payload.payment_method,
            total_price=product.price * payload.quantity,
            shipping_fee=0.0,
        )
        order = self.order_repo.create_order(session, order)
        items = self.order_repo.create_items(
            session, [self._snapshot_line(order.id, product, payload.quantity, 0)]
        )

        session.commit()
        session.refresh(order)
        logger.info("Order %s placed by %s (single item)", order.id, user_id)

        return self._build_order_dto(order, items)

    def create_from_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: OrderFromCart,
    ) -> OrderRead:
        """
        Convert the current user's cart into an Order.

        Steps:
          1. Load cart lines; error if absent or empty.
          2. Resolve every product; any missing or out-of-stock product
             fails the whole checkout, naming all offenders.
          3. Snapshot current prices into order lines.
          4. totalPrice = sum(price x quantity); shipping fee tracked
             separately.
          5. Insert order + lines and empty the cart, one commit.
        """
        cart = self.cart_repo.get_for_user(session, user_id)
        lines = self.cart_repo.list_items(session, cart.id) if cart else []
        if not lines:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Your cart is empty",
            )

        products = self.product_repo.get_many(session, (ln.product_id for ln in lines))

        missing = [str(ln.product_id) for ln in lines if ln.product_id not in products]
        if missing:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Some items are no longer available: {', '.join(missing)}",
            )

        out_of_stock = [
            products[ln.product_id].name
            for ln in lines
            if not products[ln.product_id].in_stock
        ]
        if out_of_stock:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Some items are out of stock: {', '.join(out_of_stock)}",
            )

        total_price = sum(products[ln.product_id].price * ln.quantity for ln in lines)
        shipping_fee = 0.0 if total_price > FREE_SHIPPING_THRESHOLD else float(SHIPPING_FEE)

        order = self._new_order(
            user_id,
            payload.shipping_address,
            payload.payment_method,
            total_price=total_price,
            shipping_fee=shipping_fee,
        )
        order = self.order_repo.create_order(session, order)

        items = self.order_repo.create_items(
            session,
            [
                self._snapshot_line(order.id, products[ln.product_id], ln.quantity, pos)
                for pos, ln in enumerate(lines)
            ],
        )

        self.cart_repo.clear_items(session, cart, commit=False)

        session.commit()
        session.refresh(order)
        logger.info(
            "Order %s placed by %s from cart (%d lines, total %.2f)",
            order.id,
            user_id,
            len(items),
            total_price,
        )

        return self._build_order_dto(order, items)

    # -------- Reads --------

    def list_mine(self, session: Session, user_id: uuid.UUID) -> list[OrderRead]:
        """
        List the caller's orders, newest first.
        """
        return self._build_many(session, self.order_repo.list_for_user(session, user_id))

    def list_all(self, session: Session) -> list[OrderRead]:
        """
        List all orders with their owners (admin only).
        """
        return self._build_many(
            session, self.order_repo.list_all(session), with_owner=True
        )

    def get_order(
        self,
        session: Session,
        principal: Principal,
        order_id: uuid.UUID,
    ) -> OrderRead:
        """
        Owner or admin only.

        The admin flag is read from the user row, not from the token.
        """
        order = self._get_order(session, order_id)

        if order.user_id != principal.id:
            viewer = self.user_repo.get_by_id(session, principal.id)
            if viewer is None or not viewer.is_admin:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="Not authorized to view this order",
                )

        items = self.order_repo.list_items_for_order(session, order.id)
        owner = self.user_repo.get_by_id(session, order.user_id)
        return self._build_order_dto(order, items, owner)

    # -------- Payment & cancellation (owner only) --------

    def mark_paid(
        self,
        session: Session,
        user_id: uuid.UUID,
        order_id: uuid.UUID,
        payment: PaymentResult,
    ) -> OrderRead:
        """
        Record a provider payment.

        Moves the order to 'confirmed' whatever its current status.
        """
        order = self._get_owned_order(session, user_id, order_id, "update")

        order.is_paid = True
        order.paid_at = utcnow()
        order.payment_result = payment.model_dump()
        order.status = "confirmed"

        return self._save(session, order)

    def submit_manual_proof(
        self,
        session: Session,
        user_id: uuid.UUID,
        order_id: uuid.UUID,
        payload: ManualPayment,
    ) -> OrderRead:
        """
        Attach a UPI transaction id or screenshot URL.

        The order stays 'processing' until an admin verifies the proof
        and moves it on.
        """
        order = self._get_owned_order(session, user_id, order_id, "update")

        if order.is_paid:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Order is already marked as paid",
            )

        order.payment_method = "UPI"
        order.payment_proof = payload.transaction_id or payload.screenshot_url
        order.status = "processing"

        return self._save(session, order)

    def cancel(
        self,
        session: Session,
        user_id: uuid.UUID,
        order_id: uuid.UUID,
    ) -> OrderRead:
        order = self._get_owned_order(session, user_id, order_id, "cancel")

        if order.status not in CANCELLABLE_STATUSES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot cancel order that has been shipped or delivered",
            )

        order.status = "cancelled"
        return self._save(session, order)

    # -------- Admin operations --------

    def set_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: OrderStatusUpdate,
    ) -> OrderRead:
        """
        Admin override: any status may be set from any status.

        Setting 'delivered' also stamps isDelivered/deliveredAt.
        """
        order = self._get_order(session, order_id)
        previous = order.status

        order.status = payload.status
        if payload.status == "delivered":
            order.is_delivered = True
            order.delivered_at = utcnow()

        dto = self._save(session, order)
        logger.info("Order %s status %s -> %s", order.id, previous, payload.status)
        return dto

    # -------- Helpers --------

    @staticmethod
    def _new_order(
        user_id: uuid.UUID,
        address: ShippingAddress,
        payment_method: str,
        *,
        total_price: float,
        shipping_fee: float,
    ) -> Order:
        return Order(
            user_id=user_id,
            address=address.address,
            city=address.city,
            postal_code=address.postal_code,
            country=address.country,
            payment_method=payment_method,
            total_price=total_price,
            shipping_fee=shipping_fee,
            status="processing",
            is_paid=False,
        )

    @staticmethod
    def _snapshot_line(
        order_id: uuid.UUID,
        product: Product,
        quantity: int,
        position: int,
    ) -> OrderItem:
        return OrderItem(
            order_id=order_id,
            product_id=product.id,
            quantity=quantity,
            price=product.price,
            product_name=product.name,
            image_url=product.image_url,
            position=position,
        )

    def _get_order(self, session: Session, order_id: uuid.UUID) -> Order:
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )
        return order

    def _get_owned_order(
        self,
        session: Session,
        user_id: uuid.UUID,
        order_id: uuid.UUID,
        action: str,
    ) -> Order:
        order = self._get_order(session, order_id)
        if order.user_id != user_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Not authorized to {action} this order",
            )
        return order

    def _save(self, session: Session, order: Order) -> OrderRead:
        self.order_repo.update_order(session, order)
        session.commit()
        session.refresh(order)
        items = self.order_repo.list_items_for_order(session, order.id)
        return self._build_order_dto(order, items)

    def _build_many(
        self,
        session: Session,
        orders: list[Order],
        with_owner: bool = False,
    ) -> list[OrderRead]:
        items = self.order_repo.list_items_for_orders(session, [o.id for o in orders])
        owners: dict[uuid.UUID, User | None] = {}
        if with_owner:
            for o in orders:
                if o.user_id not in owners:
                    owners[o.user_id] = self.user_repo.get_by_id(session, o.user_id)

        return [
            self._build_order_dto(o, items[o.id], owners.get(o.user_id))
            for o in orders
        ]

    @staticmethod
    def _build_order_dto(
        order: Order,
        items: list[OrderItem],
        owner: User | None = None,
    ) -> OrderRead:
        """
        Compose OrderRead from ORM rows.
        """
        return OrderRead(
            id=order.id,
            user_id=order.user_id,
            user=UserBrief.model_validate(owner) if owner is not None else None,
            products=[OrderItemRead.model_validate(it) for it in items],
            shipping_address=ShippingAddress(
                address=order.address,
                city=order.city,
                postal_code=order.postal_code,
                country=order.country,
            ),
            payment_method=order.payment_method,
            payment_result=(
                PaymentResult.model_validate(order.payment_result)
                if order.payment_result
                else None
            ),
            total_price=order.total_price,
            shipping_fee=order.shipping_fee,
            is_paid=order.is_paid,
            paid_at=order.paid_at,
            is_delivered=order.is_delivered,
            delivered_at=order.delivered_at,
            status=order.status,
            payment_proof=order.payment_proof,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )
