from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.core.config import DEFAULT_THEME_SETTING_KEY, DEFAULT_THEME_SLUG
from storefront.core.errors import NotFoundError, PersistenceError
from storefront.models.setting import Setting
from storefront.models.theme import Theme, UserTheme

logger = logging.getLogger(__name__)


def fetch_active_themes(db: Session) -> list[Theme]:
    try:
        return (
            db.query(Theme)
            .filter(Theme.is_active.is_(True))
            .order_by(Theme.sort_order.asc(), Theme.id.asc())
            .all()
        )
    except SQLAlchemyError:
        logger.exception("Error fetching active themes")
        return []


def fetch_theme_by_slug(db: Session, slug: str | None) -> Optional[Theme]:
    if not slug:
        return None
    try:
        return db.query(Theme).filter(Theme.slug == slug).first()
    except SQLAlchemyError:
        logger.exception("Error fetching theme slug=%s", slug)
        return None


def fetch_theme_by_id(db: Session, theme_id: int | None) -> Optional[Theme]:
    if theme_id is None:
        return None
    try:
        return db.query(Theme).filter(Theme.id == theme_id).first()
    except SQLAlchemyError:
        logger.exception("Error fetching theme id=%s", theme_id)
        return None


def get_default_theme_slug_setting(db: Session) -> Optional[str]:
    try:
        setting = db.query(Setting).filter(Setting.key == DEFAULT_THEME_SETTING_KEY).first()
    except SQLAlchemyError:
        logger.exception("Error reading setting key=%s", DEFAULT_THEME_SETTING_KEY)
        return None
    if setting is None:
        return None
    value = (setting.value or "").strip()
    return value or None


def get_default_theme(db: Session) -> Optional[Theme]:
    """Theme for a visitor without a preference: the configured default, else the fallback slug."""
    configured_slug = get_default_theme_slug_setting(db)
    if configured_slug:
        theme = fetch_theme_by_slug(db, configured_slug)
        if theme is not None:
            return theme
        logger.warning("default theme setting points to missing slug=%s", configured_slug)
    return fetch_theme_by_slug(db, DEFAULT_THEME_SLUG)


def get_user_preference(db: Session, user_id: str) -> Optional[UserTheme]:
    try:
        return db.query(UserTheme).filter(UserTheme.user_id == user_id).first()
    except SQLAlchemyError:
        logger.exception("Error reading theme preference user_id=%s", user_id)
        return None


def get_user_theme(db: Session, user_id: str) -> Optional[Theme]:
    preference = get_user_preference(db, user_id)
    if preference is not None:
        theme = fetch_theme_by_id(db, preference.theme_id)
        if theme is not None:
            return theme
    return get_default_theme(db)


def resolve_theme(db: Session, user_id: str | None = None) -> Optional[Theme]:
    """Resolve the theme for an identity.

    Order of precedence: the identity's stored preference, the
    ``default_website_theme`` setting, then the fallback slug. Store
    failures and missing rows fall through to the next rule. ``None`` means
    nothing could be resolved and the caller should leave the page
    unstyled.
    """
    if user_id:
        return get_user_theme(db, user_id)
    return get_default_theme(db)


def _preference_upsert(db: Session, user_id: str, theme_id: int):
    if db.get_bind().dialect.name == "sqlite":
        statement = sqlite_insert(UserTheme)
    else:
        statement = postgresql_insert(UserTheme)
    statement = statement.values(user_id=user_id, theme_id=theme_id)
    return statement.on_conflict_do_update(
        index_elements=[UserTheme.user_id],
        set_={"theme_id": statement.excluded.theme_id, "updated_at": func.now()},
    )


def set_user_theme(db: Session, user_id: str, theme_id: int) -> UserTheme:
    """Upsert the single preference row for ``user_id``.

    A concurrent first selection by the same user replaces the row instead of
    tripping the unique constraint on ``user_id``.
    """
    try:
        theme = db.query(Theme).filter(Theme.id == theme_id).first()
        if theme is None:
            raise NotFoundError("Theme not found")
        db.execute(_preference_upsert(db, user_id, theme.id))
        db.commit()
        return db.query(UserTheme).filter(UserTheme.user_id == user_id).one()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Error setting user theme user_id=%s theme_id=%s", user_id, theme_id)
        raise PersistenceError("Could not save the theme preference") from exc


def clear_user_theme(db: Session, user_id: str) -> bool:
    try:
        deleted = db.query(UserTheme).filter(UserTheme.user_id == user_id).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Error clearing user theme user_id=%s", user_id)
        raise PersistenceError("Could not reset the theme preference") from exc
    return bool(deleted)
