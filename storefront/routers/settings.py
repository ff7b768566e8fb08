from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.core.database import get_db
from storefront.deps import require_admin
from storefront.schemas.site import ChangeVersionsOut, LogoSettings
from storefront.services.auth import Identity
from storefront.services.event_handlers import change_versions
from storefront.services.site_settings import get_logo_settings, save_logo_settings

router = APIRouter(tags=["settings"])


@router.get("/api/settings/logo", response_model=LogoSettings)
def public_logo_settings(db: Session = Depends(get_db)):
    return get_logo_settings(db)


@router.get("/api/settings/versions", response_model=ChangeVersionsOut)
def settings_versions():
    return {"versions": change_versions.snapshot()}


@router.get("/api/admin/settings/logo", response_model=LogoSettings)
def admin_logo_settings(db: Session = Depends(get_db), _admin: Identity = Depends(require_admin)):
    return get_logo_settings(db)


@router.put("/api/admin/settings/logo", response_model=LogoSettings)
def update_logo_settings(
    payload: LogoSettings,
    db: Session = Depends(get_db),
    _admin: Identity = Depends(require_admin),
):
    return save_logo_settings(
        db,
        site_logo=payload.site_logo,
        site_logo_url=payload.site_logo_url,
        favicon_url=payload.favicon_url,
    )
