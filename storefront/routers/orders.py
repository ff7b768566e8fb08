from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront.core.database import get_db
from storefront.schemas.order import OrderCreate, OrderOut
from storefront.services.orders import create_order

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.post("", response_model=OrderOut, status_code=status.HTTP_201_CREATED)
def checkout(payload: OrderCreate, db: Session = Depends(get_db)):
    return create_order(db, payload.model_dump())
