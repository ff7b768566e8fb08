from __future__ import annotations

from storefront.models.order import Order
from storefront.services.event_bus import (
    ORDER_CREATED,
    ORDER_STATUS_CHANGED,
    ORDER_UNVERIFIED,
    ORDER_VERIFIED,
    event_bus,
)


def build_order_payload(order: Order, previous_status: str | None = None) -> dict:
    return {
        "order_id": order.id,
        "status": order.status,
        "previous_status": previous_status,
        "verified": order.verified_at is not None,
        "customer_name": order.customer_name,
        "customer_phone": order.customer_phone,
        "total_amount": int(order.total_amount or 0),
    }


def emit_order_created(order: Order) -> None:
    event_bus.emit(ORDER_CREATED, build_order_payload(order))


def emit_order_status_changed(order: Order, previous_status: str | None) -> None:
    if previous_status == order.status:
        return
    event_bus.emit(ORDER_STATUS_CHANGED, build_order_payload(order, previous_status=previous_status))


def emit_order_verification_changed(order: Order) -> None:
    name = ORDER_VERIFIED if order.verified_at is not None else ORDER_UNVERIFIED
    event_bus.emit(name, build_order_payload(order, previous_status=order.status))
