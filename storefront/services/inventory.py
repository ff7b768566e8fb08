from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import datetime, timezone

from sqlalchemy import update
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import set_committed_value

from storefront.models.order import Order
from storefront.models.order_item import OrderItem
from storefront.models.product import Product

logger = logging.getLogger(__name__)


def _quantities_by_product(db: Session, order_id: int) -> "OrderedDict[int, int]":
    items = (
        db.query(OrderItem)
        .filter(OrderItem.order_id == order_id)
        .order_by(OrderItem.id.asc())
        .all()
    )
    totals: "OrderedDict[int, int]" = OrderedDict()
    for item in items:
        quantity = int(item.quantity or 0)
        if item.product_id is None or quantity <= 0:
            continue
        totals[item.product_id] = totals.get(item.product_id, 0) + quantity
    return totals


def decrement_stock_for_order(db: Session, order_id: int) -> None:
    """Decrement product stock for every item of the order.

    Each counter moves with a single ``UPDATE ... SET stock_quantity =
    stock_quantity - :qty`` so concurrent sales of the same product cannot
    overwrite each other. Nothing is committed here: the caller commits the
    decrements together with the status change, or rolls all of them back.
    Callers must hold the order's ``stock_applied_at`` claim first.
    """
    for product_id, quantity in _quantities_by_product(db, order_id).items():
        result = db.execute(
            update(Product)
            .where(Product.id == product_id)
            .values(stock_quantity=Product.stock_quantity - quantity)
            .execution_options(synchronize_session=False)
        )
        if not result.rowcount:
            logger.warning("stock skipped, product missing order_id=%s product_id=%s", order_id, product_id)


def apply_stock_for_order(db: Session, order: Order) -> bool:
    """Claim ``stock_applied_at`` for ``order`` and decrement its stock.

    The claim is a conditional UPDATE on ``stock_applied_at IS NULL``, so a
    stale ``order`` instance cannot apply stock a second time. Returns False
    when stock was already applied for this order.
    """
    applied_at = datetime.now(timezone.utc)
    claimed = db.execute(
        update(Order)
        .where(Order.id == order.id, Order.stock_applied_at.is_(None))
        .values(stock_applied_at=applied_at)
        .execution_options(synchronize_session=False)
    )
    if claimed.rowcount != 1:
        logger.info("stock already applied order_id=%s", order.id)
        return False

    decrement_stock_for_order(db, order.id)
    set_committed_value(order, "stock_applied_at", applied_at)
    return True


def count_low_stock(db: Session, threshold: int = 5) -> int:
    return (
        db.query(Product)
        .filter(Product.active.is_(True), Product.stock_quantity < threshold)
        .count()
    )
