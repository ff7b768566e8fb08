from __future__ import annotations

import logging
import re
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.core.errors import PersistenceError, ValidationError
from storefront.models.contact import CONTACT_OPTIONAL_FIELDS, Contact

logger = logging.getLogger(__name__)

_IFRAME_SRC_PATTERN = re.compile(r"""src=["']([^"']+)["']""", re.IGNORECASE)


def extract_map_embed_url(value: Optional[str]) -> Optional[str]:
    """Accept either a bare URL or a pasted ``<iframe>`` and return the URL."""
    if not value:
        return None
    candidate = value.strip()
    if not candidate:
        return None
    if candidate.startswith("<"):
        match = _IFRAME_SRC_PATTERN.search(candidate)
        return match.group(1) if match else None
    return candidate


def get_contact(db: Session) -> Optional[Contact]:
    try:
        return db.query(Contact).order_by(Contact.id.asc()).first()
    except SQLAlchemyError:
        logger.exception("Error fetching contact info")
        return None


def save_contact(db: Session, data: dict[str, Any]) -> Contact:
    email = str(data.get("email") or "").strip()
    if not email:
        raise ValidationError("Email is required")

    contact = db.query(Contact).order_by(Contact.id.asc()).first()
    if contact is None:
        contact = Contact(email=email)
        db.add(contact)

    contact.email = email
    for field in CONTACT_OPTIONAL_FIELDS:
        value = data.get(field)
        if field == "map_embed_url":
            value = extract_map_embed_url(value)
        elif isinstance(value, str):
            value = value.strip() or None
        setattr(contact, field, value or None)

    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Error saving contact info")
        raise PersistenceError("Failed to save contact info") from exc
    db.refresh(contact)
    return contact
