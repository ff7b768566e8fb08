from __future__ import annotations

from fastapi import APIRouter, Depends

from storefront.core.metrics import request_metrics
from storefront.deps import require_admin
from storefront.services.auth import Identity

router = APIRouter(prefix="/internal/metrics", tags=["internal-metrics"])


@router.get("/requests")
def request_metrics_snapshot(_admin: Identity = Depends(require_admin)):
    return {"endpoints": request_metrics.snapshot()}
