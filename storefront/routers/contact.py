from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.core.database import get_db
from storefront.deps import require_admin
from storefront.schemas.site import ContactBase, ContactOut
from storefront.services.auth import Identity
from storefront.services.contacts import get_contact, save_contact

router = APIRouter(tags=["contact"])


@router.get("/api/contact", response_model=Optional[ContactOut])
def public_contact(db: Session = Depends(get_db)):
    return get_contact(db)


@router.put("/api/admin/contact", response_model=ContactOut)
def update_contact(
    payload: ContactBase,
    db: Session = Depends(get_db),
    _admin: Identity = Depends(require_admin),
):
    return save_contact(db, payload.model_dump())
