from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.core.errors import PersistenceError
from storefront.models.setting import Setting
from storefront.services.event_bus import SITE_LOGO_CHANGED, event_bus

logger = logging.getLogger(__name__)

LOGO_SETTING_KEYS = ("site_logo", "site_logo_url", "favicon_url")


def get_settings(db: Session, keys: tuple[str, ...]) -> dict[str, str | None]:
    values: dict[str, str | None] = {key: None for key in keys}
    try:
        rows = db.query(Setting).filter(Setting.key.in_(keys)).all()
    except SQLAlchemyError:
        logger.exception("Error fetching settings keys=%s", ",".join(keys))
        return values
    for row in rows:
        values[row.key] = row.value
    return values


def upsert_settings(db: Session, values: dict[str, str | None]) -> None:
    existing = {row.key: row for row in db.query(Setting).filter(Setting.key.in_(list(values))).all()}
    for key, value in values.items():
        row = existing.get(key)
        if row is None:
            db.add(Setting(key=key, value=value))
        else:
            row.value = value
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Error saving settings keys=%s", ",".join(values))
        raise PersistenceError("Failed to save settings") from exc


def get_logo_settings(db: Session) -> dict[str, str | None]:
    return get_settings(db, LOGO_SETTING_KEYS)


def save_logo_settings(
    db: Session,
    *,
    site_logo: str | None,
    site_logo_url: str | None,
    favicon_url: str | None,
) -> dict[str, str | None]:
    upsert_settings(
        db,
        {
            "site_logo": (site_logo or "").strip(),
            "site_logo_url": (site_logo_url or "").strip() or None,
            "favicon_url": (favicon_url or "").strip() or None,
        },
    )
    event_bus.emit(SITE_LOGO_CHANGED)
    return get_logo_settings(db)
