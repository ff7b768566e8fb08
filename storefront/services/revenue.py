from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import datetime
from typing import Any

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.core.errors import ValidationError
from storefront.models.order import Order
from storefront.models.order_item import OrderItem
from storefront.models.product import Product
from storefront.services.inventory import count_low_stock

logger = logging.getLogger(__name__)

PERIODS = ("week", "month", "quarter", "year")


def period_label(moment: datetime, period: str) -> str:
    if period == "week":
        iso_year, iso_week, _ = moment.isocalendar()
        return f"{iso_year}-W{iso_week:02d}"
    if period == "month":
        return f"{moment.year}-{moment.month:02d}"
    if period == "quarter":
        return f"{moment.year}-Q{(moment.month - 1) // 3 + 1}"
    if period == "year":
        return str(moment.year)
    raise ValidationError(f"Invalid period: {period}")


def get_total_verified_revenue(db: Session) -> int:
    try:
        total = (
            db.query(func.coalesce(func.sum(Order.total_amount), 0))
            .filter(Order.status == "approved", Order.verified_at.isnot(None))
            .scalar()
        )
    except SQLAlchemyError:
        logger.exception("Error fetching verified revenue")
        return 0
    return int(total or 0)


def get_pending_revenue(db: Session) -> int:
    try:
        total = (
            db.query(func.coalesce(func.sum(Order.total_amount), 0))
            .filter(Order.status == "approved", Order.verified_at.is_(None))
            .scalar()
        )
    except SQLAlchemyError:
        logger.exception("Error fetching pending revenue")
        return 0
    return int(total or 0)


def get_revenue_by_period(db: Session, period: str = "month", limit: int = 12) -> list[dict[str, Any]]:
    """Approved-order revenue bucketed by week, month, quarter or year.

    Labels look like ``2024-W05``, ``2024-01``, ``2024-Q1`` and ``2024``.
    Rows are oldest first and only the most recent ``limit`` buckets are kept.
    """
    if period not in PERIODS:
        raise ValidationError(f"Invalid period: {period}")

    try:
        rows = (
            db.query(Order.created_at, Order.total_amount, Order.verified_at)
            .filter(Order.status == "approved")
            .order_by(Order.created_at.asc())
            .all()
        )
    except SQLAlchemyError:
        logger.exception("Error fetching revenue by period period=%s", period)
        return []

    buckets: "OrderedDict[str, dict[str, Any]]" = OrderedDict()
    for created_at, total_amount, verified_at in rows:
        if created_at is None:
            continue
        label = period_label(created_at, period)
        bucket = buckets.setdefault(label, {"period": label, "revenue": 0, "order_count": 0, "verified_count": 0})
        bucket["revenue"] += int(total_amount or 0)
        bucket["order_count"] += 1
        if verified_at is not None:
            bucket["verified_count"] += 1

    ordered = [buckets[label] for label in sorted(buckets)]
    if limit and limit > 0:
        ordered = ordered[-limit:]
    return ordered


def get_top_products(db: Session, limit: int = 5) -> list[dict[str, Any]]:
    try:
        rows = (
            db.query(
                OrderItem.product_id,
                func.max(OrderItem.product_name).label("name"),
                func.coalesce(func.sum(OrderItem.quantity), 0).label("total"),
            )
            .group_by(OrderItem.product_id)
            .order_by(func.sum(OrderItem.quantity).desc())
            .limit(limit)
            .all()
        )
    except SQLAlchemyError:
        logger.exception("Error fetching top products")
        return []
    return [
        {"product_id": row.product_id, "name": row.name, "total": int(row.total or 0)}
        for row in rows
    ]


def get_store_stats(db: Session) -> dict[str, int]:
    try:
        total_orders = db.query(func.count(Order.id)).scalar() or 0
        total_products = db.query(func.count(Product.id)).scalar() or 0
        approved_orders = db.query(func.count(Order.id)).filter(Order.status == "approved").scalar() or 0
        low_stock = count_low_stock(db)
    except SQLAlchemyError:
        logger.exception("Error fetching store stats")
        total_orders = total_products = approved_orders = low_stock = 0

    return {
        "total_orders": int(total_orders),
        "total_products": int(total_products),
        "approved_orders": int(approved_orders),
        "low_stock_products": int(low_stock),
        "total_verified_revenue": get_total_verified_revenue(db),
        "total_pending_revenue": get_pending_revenue(db),
    }
