from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.core.database import get_db
from storefront.deps import require_admin
from storefront.schemas.order import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    OrderOut,
    StatusUpdate,
    VerifyRequest,
)
from storefront.services import orders as order_service
from storefront.services.auth import Identity

router = APIRouter(prefix="/api/admin/orders", tags=["admin-orders"])


@router.get("", response_model=List[OrderOut])
def list_orders(
    status: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    _admin: Identity = Depends(require_admin),
):
    return order_service.list_orders(db, status)


@router.post("/bulk-delete", response_model=BulkDeleteResponse)
def bulk_delete(
    payload: BulkDeleteRequest,
    db: Session = Depends(get_db),
    _admin: Identity = Depends(require_admin),
):
    result = order_service.bulk_delete_orders(
        db,
        start=payload.start_date,
        end=payload.end_date,
        confirmation=payload.confirmation,
    )
    return {"orders_deleted": result.orders_deleted, "items_deleted": result.items_deleted}


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: int, db: Session = Depends(get_db), _admin: Identity = Depends(require_admin)):
    return order_service.get_order(db, order_id)


@router.patch("/{order_id}/status", response_model=OrderOut)
def update_status(
    order_id: int,
    payload: StatusUpdate,
    db: Session = Depends(get_db),
    _admin: Identity = Depends(require_admin),
):
    return order_service.update_order_status(db, order_id, payload.status)


@router.post("/{order_id}/approve", response_model=OrderOut)
def approve(order_id: int, db: Session = Depends(get_db), _admin: Identity = Depends(require_admin)):
    return order_service.approve_order(db, order_id)


@router.post("/{order_id}/reject", response_model=OrderOut)
def reject(order_id: int, db: Session = Depends(get_db), _admin: Identity = Depends(require_admin)):
    return order_service.reject_order(db, order_id)


@router.post("/{order_id}/verify", response_model=OrderOut)
def verify(
    order_id: int,
    payload: Optional[VerifyRequest] = None,
    db: Session = Depends(get_db),
    _admin: Identity = Depends(require_admin),
):
    return order_service.verify_order(db, order_id, payload.notes if payload else None)


@router.post("/{order_id}/unverify", response_model=OrderOut)
def unverify(order_id: int, db: Session = Depends(get_db), _admin: Identity = Depends(require_admin)):
    return order_service.unverify_order(db, order_id)
