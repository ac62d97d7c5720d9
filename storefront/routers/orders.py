# storefront/routers/orders.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import Principal, get_current_user, get_principal, require_admin
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.order import (
    ManualPayment,
    OrderCreate,
    OrderFromCart,
    OrderRead,
    OrderResponse,
    OrderStatusUpdate,
    PaymentResult,
)
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

service = OrderService(
    OrderRepository(),
    CartRepository(),
    ProductRepository(),
    UserRepository(),
)


# -------- User-facing endpoints --------


@router.post(
    "",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
)
def buy_now(
    payload: OrderCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Order a single product directly.
    """
    order = service.create_single_item(session, current_user.id, payload)
    return OrderResponse(message="Order placed successfully", order=order)


@router.post(
    "/from-cart",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
)
def checkout_cart(
    payload: OrderFromCart,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Create an order from the current user's cart and empty the cart.
    """
    order = service.create_from_cart(session, current_user.id, payload)
    return OrderResponse(message="Order created successfully from cart", order=order)


@router.get("/my-orders", response_model=list[OrderRead])
def list_my_orders(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    List the authenticated user's orders, newest first.
    """
    return service.list_mine(session, current_user.id)


# -------- Admin endpoints --------


@router.get(
    "",
    response_model=list[OrderRead],
    dependencies=[Depends(require_admin)],
)
def list_all_orders(session: Session = Depends(get_session)):
    """
    List all orders (admin only).
    """
    return service.list_all(session)


@router.put(
    "/{order_id}/status",
    response_model=OrderResponse,
    dependencies=[Depends(require_admin)],
)
def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
):
    """
    Set any status (admin only). 'delivered' also stamps deliveredAt.
    """
    order = service.set_status(session, order_id, payload)
    return OrderResponse(message="Order status updated successfully", order=order)


# -------- Single order (owner, or admin for reads) --------


@router.get("/{order_id}", response_model=OrderRead)
def get_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    principal: Principal = Depends(get_principal),
):
    """
    Get one order. Visible to its owner and to admins.
    """
    return service.get_order(session, principal, order_id)


@router.put("/{order_id}/pay", response_model=OrderResponse)
def pay_order(
    order_id: uuid.UUID,
    payload: PaymentResult | None = None,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Record a provider payment for the caller's order.

    The body is optional; without one an empty payment result is stored.
    """
    order = service.mark_paid(
        session, current_user.id, order_id, payload or PaymentResult()
    )
    return OrderResponse(message="Order marked as paid", order=order)


@router.put("/{order_id}/manual-pay", response_model=OrderResponse)
def manual_pay_order(
    order_id: uuid.UUID,
    payload: ManualPayment,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Submit UPI payment proof for manual verification.
    """
    order = service.submit_manual_proof(session, current_user.id, order_id, payload)
    return OrderResponse(
        message="Payment proof submitted successfully. We'll verify it soon.",
        order=order,
    )


@router.put("/{order_id}/cancel", response_model=OrderResponse)
def cancel_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Cancel the caller's order while it is processing or confirmed.
    """
    order = service.cancel(session, current_user.id, order_id)
    return OrderResponse(message="Order cancelled successfully", order=order)
