from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.core.database import get_db
from storefront.deps import require_admin
from storefront.schemas.order import RevenuePeriodRow, RevenueSummary, TopProduct
from storefront.services import revenue
from storefront.services.auth import Identity

router = APIRouter(prefix="/api/admin/revenue", tags=["revenue"])


@router.get("/summary", response_model=RevenueSummary)
def revenue_summary(db: Session = Depends(get_db), _admin: Identity = Depends(require_admin)):
    return revenue.get_store_stats(db)


@router.get("/by-period", response_model=List[RevenuePeriodRow])
def revenue_by_period(
    period: str = Query(default="month"),
    limit: int = Query(default=12, ge=1, le=120),
    db: Session = Depends(get_db),
    _admin: Identity = Depends(require_admin),
):
    return revenue.get_revenue_by_period(db, period=period, limit=limit)


@router.get("/top-products", response_model=List[TopProduct])
def top_products(
    limit: int = Query(default=5, ge=1, le=50),
    db: Session = Depends(get_db),
    _admin: Identity = Depends(require_admin),
):
    return revenue.get_top_products(db, limit=limit)
