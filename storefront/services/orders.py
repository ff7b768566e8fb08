from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Any, Iterable, Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from storefront.core.errors import (
    ConfirmationRequiredError,
    InvalidTransitionError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from storefront.models.order import ORDER_STATUSES, Order
from storefront.models.order_item import OrderItem
from storefront.models.product import Product
from storefront.services.inventory import apply_stock_for_order
from storefront.services.order_events import (
    emit_order_created,
    emit_order_status_changed,
    emit_order_verification_changed,
)

logger = logging.getLogger(__name__)

PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    PENDING: {APPROVED, REJECTED},
    APPROVED: {REJECTED},
    REJECTED: set(),
}

BULK_DELETE_CONFIRMATION = "DELETE"
BULK_DELETE_ALL_CONFIRMATION = "DELETE ALL ORDERS"


@dataclass
class BulkDeleteResult:
    orders_deleted: int
    items_deleted: int


def _commit(db: Session, failure_message: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(failure_message)
        raise PersistenceError(failure_message) from exc


def create_order(db: Session, payload: dict[str, Any]) -> Order:
    """Create a pending order, snapshotting each product's current price."""
    items = payload.get("items") or []
    if not items:
        raise ValidationError("An order needs at least one item")

    product_ids = {int(item["product_id"]) for item in items}
    products = {
        product.id: product
        for product in db.query(Product).filter(Product.id.in_(product_ids)).all()
    }

    order = Order(
        customer_name=payload["customer_name"],
        customer_email=payload.get("customer_email") or None,
        customer_phone=payload["customer_phone"],
        customer_address=payload.get("customer_address") or None,
        customer_message=payload.get("customer_message") or None,
        delivery_time=payload.get("delivery_time") or None,
        status=PENDING,
        total_amount=0,
    )

    total = 0
    order_items: list[OrderItem] = []
    for item in items:
        product = products.get(int(item["product_id"]))
        if product is None or not product.active:
            raise ValidationError(f"Product {item['product_id']} is not available")
        quantity = int(item.get("quantity") or 0)
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")
        order_item = OrderItem(
            product_id=product.id,
            product_name=product.name,
            quantity=quantity,
            unit_price=int(product.price or 0),
            selected_color=item.get("selected_color") or None,
            selected_size=item.get("selected_size") or None,
        )
        total += order_item.subtotal
        order_items.append(order_item)

    order.total_amount = total
    order.order_items = order_items
    db.add(order)
    _commit(db, "Failed to create order")
    db.refresh(order)
    logger.info("order created id=%s total_amount=%s items=%s", order.id, order.total_amount, len(order_items))
    emit_order_created(order)
    return order


def list_orders(db: Session, status: Optional[str] = None) -> list[Order]:
    query = db.query(Order).options(selectinload(Order.order_items))
    if status:
        normalized = status.strip().lower()
        if normalized not in ORDER_STATUSES:
            raise ValidationError(f"Invalid status: {status}")
        query = query.filter(Order.status == normalized)
    return query.order_by(Order.created_at.desc(), Order.id.desc()).all()


def get_order(db: Session, order_id: int) -> Order:
    order = (
        db.query(Order)
        .options(selectinload(Order.order_items))
        .filter(Order.id == order_id)
        .first()
    )
    if order is None:
        raise NotFoundError("Order not found")
    return order


def _ensure_transition(order: Order, new_status: str) -> None:
    current = order.status or PENDING
    if new_status not in ALLOWED_TRANSITIONS.get(current, set()):
        raise InvalidTransitionError(f"Cannot move order {order.id} from {current} to {new_status}")


def _claim(db: Session, order_id: int, conditions: list[Any], values: dict[str, Any], conflict_message: str) -> None:
    """Apply ``values`` only while the order still matches ``conditions``.

    The instance an admin loaded may be stale; the database row decides. A
    claim that matches nothing rolls back and raises InvalidTransitionError.
    """
    try:
        result = db.execute(
            update(Order)
            .where(Order.id == order_id, *conditions)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("order update failed order_id=%s", order_id)
        raise PersistenceError("Failed to update order") from exc
    if result.rowcount != 1:
        db.rollback()
        logger.info("order transition lost order_id=%s", order_id)
        raise InvalidTransitionError(conflict_message)


def approve_order(db: Session, order_id: int) -> Order:
    order = get_order(db, order_id)
    _ensure_transition(order, APPROVED)
    previous_status = order.status

    _claim(
        db,
        order_id,
        [Order.status == PENDING],
        {"status": APPROVED},
        f"Order {order_id} is no longer pending",
    )
    try:
        apply_stock_for_order(db, order)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("stock update failed order_id=%s", order_id)
        raise PersistenceError("Failed to update product stock") from exc
    _commit(db, "Failed to approve order")
    db.refresh(order)
    logger.info("order approved id=%s", order.id)
    emit_order_status_changed(order, previous_status)
    return order


def reject_order(db: Session, order_id: int) -> Order:
    order = get_order(db, order_id)
    _ensure_transition(order, REJECTED)
    previous_status = order.status

    sources = [status for status, targets in ALLOWED_TRANSITIONS.items() if REJECTED in targets]
    # verification only means something for approved orders
    _claim(
        db,
        order_id,
        [Order.status.in_(sources)],
        {"status": REJECTED, "verified_at": None},
        f"Order {order_id} can no longer be rejected",
    )
    _commit(db, "Failed to reject order")
    db.refresh(order)
    logger.info("order rejected id=%s previous_status=%s", order.id, previous_status)
    emit_order_status_changed(order, previous_status)
    return order


def update_order_status(db: Session, order_id: int, new_status: str) -> Order:
    normalized = (new_status or "").strip().lower()
    if normalized == APPROVED:
        return approve_order(db, order_id)
    if normalized == REJECTED:
        return reject_order(db, order_id)
    raise InvalidTransitionError(f"Unsupported target status: {new_status}")


def verify_order(db: Session, order_id: int, notes: Optional[str] = None) -> Order:
    order = get_order(db, order_id)
    if order.status != APPROVED:
        raise InvalidTransitionError("Only approved orders can be verified")
    if order.verified_at is not None:
        raise InvalidTransitionError("Order is already verified")

    _claim(
        db,
        order_id,
        [Order.status == APPROVED, Order.verified_at.is_(None)],
        {"verified_at": datetime.now(timezone.utc), "notes": (notes or "").strip() or None},
        "Order is already verified",
    )
    _commit(db, "Failed to verify order")
    db.refresh(order)
    logger.info("order verified id=%s", order.id)
    emit_order_verification_changed(order)
    return order


def unverify_order(db: Session, order_id: int) -> Order:
    order = get_order(db, order_id)
    if order.status != APPROVED or order.verified_at is None:
        raise InvalidTransitionError("Order is not verified")

    _claim(
        db,
        order_id,
        [Order.status == APPROVED, Order.verified_at.is_not(None)],
        {"verified_at": None, "notes": None},
        "Order is not verified",
    )
    _commit(db, "Failed to unverify order")
    db.refresh(order)
    logger.info("order verification retracted id=%s", order.id)
    emit_order_verification_changed(order)
    return order


def created_at_range(start: Optional[date], end: Optional[date]) -> tuple[Optional[datetime], Optional[datetime]]:
    start_at = datetime.combine(start, time.min) if start else None
    end_at = datetime.combine(end, time.max) if end else None
    if start_at and end_at and start_at > end_at:
        raise ValidationError("Start date is after end date")
    return start_at, end_at


def required_confirmation(start: Optional[date], end: Optional[date]) -> str:
    if start is None and end is None:
        return BULK_DELETE_ALL_CONFIRMATION
    return BULK_DELETE_CONFIRMATION


def _chunks(values: list[int], size: int = 500) -> Iterable[list[int]]:
    for index in range(0, len(values), size):
        yield values[index:index + size]


def bulk_delete_orders(
    db: Session,
    *,
    start: Optional[date] = None,
    end: Optional[date] = None,
    confirmation: Optional[str] = None,
) -> BulkDeleteResult:
    """Delete orders created within [start, end] and their items.

    Either bound may be omitted. With both omitted every order is deleted,
    which needs its own confirmation phrase. There is no undo.
    """
    expected = required_confirmation(start, end)
    if (confirmation or "").strip() != expected:
        raise ConfirmationRequiredError(f'Type "{expected}" to confirm this deletion')

    start_at, end_at = created_at_range(start, end)
    query = db.query(Order.id)
    if start_at is not None:
        query = query.filter(Order.created_at >= start_at)
    if end_at is not None:
        query = query.filter(Order.created_at <= end_at)
    order_ids = [row[0] for row in query.all()]

    if not order_ids:
        logger.info("bulk delete found no orders start=%s end=%s", start, end)
        return BulkDeleteResult(orders_deleted=0, items_deleted=0)

    items_deleted = 0
    orders_deleted = 0
    try:
        for chunk in _chunks(order_ids):
            items_deleted += (
                db.query(OrderItem)
                .filter(OrderItem.order_id.in_(chunk))
                .delete(synchronize_session=False)
            )
        for chunk in _chunks(order_ids):
            orders_deleted += (
                db.query(Order)
                .filter(Order.id.in_(chunk))
                .delete(synchronize_session=False)
            )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("bulk delete failed start=%s end=%s", start, end)
        raise PersistenceError("Failed to delete orders") from exc

    logger.warning(
        "bulk delete removed orders=%s items=%s start=%s end=%s",
        orders_deleted,
        items_deleted,
        start,
        end,
    )
    return BulkDeleteResult(orders_deleted=orders_deleted, items_deleted=items_deleted)
