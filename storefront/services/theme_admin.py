from __future__ import annotations

import logging
import re
from copy import deepcopy
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.core.config import DEFAULT_THEME_SETTING_KEY
from storefront.core.errors import NotFoundError, PersistenceError, ValidationError
from storefront.models.setting import Setting
from storefront.models.theme import THEME_CATEGORIES, Theme
from storefront.services import theme_service
from utils.slug import normalize_slug_input

logger = logging.getLogger(__name__)

HEX_COLOR_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
SLUG_PATTERN = re.compile(r"^[a-z0-9_-]+$")
CSS_VARIABLE_NAME_PATTERN = re.compile(r"^--[A-Za-z0-9_-]+$")
_FORBIDDEN_CSS_VALUE_CHARS = set(";{}<>")

_BASE_FONT = "system-ui, -apple-system, sans-serif"
_BASE_RADIUS = "0.5rem"

CSS_VARIABLE_FIELDS = (
    {"key": "--color-primary", "label": "Primary Color", "type": "color"},
    {"key": "--color-secondary", "label": "Secondary Color", "type": "color"},
    {"key": "--color-background", "label": "Background Color", "type": "color"},
    {"key": "--color-text-body", "label": "Text Color", "type": "color"},
    {"key": "--font-family-base", "label": "Font Family", "type": "text"},
    {"key": "--border-radius-base", "label": "Border Radius", "type": "text"},
)


def _preset(
    name: str,
    description: str,
    category: str,
    primary: str,
    secondary: str,
    background: str,
    text_body: str,
    *,
    is_seasonal: bool = True,
) -> dict[str, Any]:
    return {
        "name": name,
        "description": description,
        "category": category,
        "primary_color": primary,
        "css_variables": {
            "--color-primary": primary,
            "--color-secondary": secondary,
            "--color-background": background,
            "--color-text-body": text_body,
            "--font-family-base": _BASE_FONT,
            "--border-radius-base": _BASE_RADIUS,
        },
        "is_seasonal": is_seasonal,
    }


SEASONAL_THEME_PRESETS: dict[str, dict[str, Any]] = {
    "tet_lunar_new_year": _preset(
        "Tết Nguyên Đán",
        "Giao diện lễ Tết Nguyên Đán với màu đỏ và vàng",
        "seasonal",
        "#DC2626",
        "#FBBF24",
        "#FEF3C7",
        "#78350F",
    ),
    "noel_christmas": _preset(
        "Giáng Sinh",
        "Giao diện Giáng Sinh với màu đỏ và xanh lục",
        "seasonal",
        "#DC2626",
        "#15803D",
        "#F0F9FF",
        "#166534",
    ),
    "spring_season": _preset(
        "Mùa Xuân", "Giao diện Mùa Xuân tươi tắn", "seasonal", "#10B981", "#EC4899", "#F0FDF4", "#065F46"
    ),
    "summer_season": _preset(
        "Mùa Hè", "Giao diện Mùa Hè sáng sủa", "seasonal", "#F59E0B", "#06B6D4", "#FEFCE8", "#78350F"
    ),
    "autumn_season": _preset(
        "Mùa Thu", "Giao diện Mùa Thu ấm áp", "seasonal", "#EA580C", "#92400E", "#FEF3C7", "#78350F"
    ),
    "winter_season": _preset(
        "Mùa Đông", "Giao diện Mùa Đông lạnh lẽo", "seasonal", "#0369A1", "#6366F1", "#F0F9FF", "#0C2340"
    ),
    "green_white": _preset(
        "Xanh lá - Trắng",
        "Giao diện tinh tế với xanh lá cây và trắng",
        "custom",
        "#059669",
        "#10B981",
        "#F9FAFB",
        "#0F766E",
        is_seasonal=False,
    ),
}

DEFAULT_THEME_FORM: dict[str, Any] = {
    "name": "",
    "slug": "",
    "description": "",
    "category": "custom",
    "primary_color": "#3B82F6",
    "is_active": True,
    "is_seasonal": False,
    "sort_order": 0,
    "css_variables": {
        "--color-primary": "#3B82F6",
        "--color-secondary": "#10B981",
        "--color-background": "#FFFFFF",
        "--color-text-body": "#000000",
        "--font-family-base": _BASE_FONT,
        "--border-radius-base": _BASE_RADIUS,
    },
}

_FORM_FIELDS = tuple(DEFAULT_THEME_FORM)


def new_theme_form() -> dict[str, Any]:
    return deepcopy(DEFAULT_THEME_FORM)


def theme_to_form(theme: Theme) -> dict[str, Any]:
    return {
        "name": theme.name,
        "slug": theme.slug,
        "description": theme.description or "",
        "category": theme.category,
        "primary_color": theme.primary_color,
        "is_active": bool(theme.is_active),
        "is_seasonal": bool(theme.is_seasonal),
        "sort_order": theme.sort_order or 0,
        "css_variables": dict(theme.css_variables or {}),
    }


def apply_preset(form: dict[str, Any], preset_key: str) -> dict[str, Any]:
    """Prefill ``form`` from a preset. Pure: nothing is saved."""
    preset = SEASONAL_THEME_PRESETS.get(preset_key)
    if preset is None:
        raise NotFoundError(f"Unknown theme preset: {preset_key}")

    updated = deepcopy(form)
    updated.update(
        {
            "name": preset["name"],
            "slug": preset_key,
            "description": preset["description"],
            "category": preset["category"],
            "primary_color": preset["primary_color"],
            "is_seasonal": preset["is_seasonal"],
            "css_variables": deepcopy(preset["css_variables"]),
        }
    )
    return updated


def set_css_variable(form: dict[str, Any], key: str, value: str) -> dict[str, Any]:
    updated = deepcopy(form)
    variables = dict(updated.get("css_variables") or {})
    variables[key] = value
    updated["css_variables"] = variables
    if key == "--color-primary":
        updated["primary_color"] = value
    return updated


def edit_theme_form(
    form: dict[str, Any],
    *,
    css_variables: Optional[dict[str, str]] = None,
    slug: Optional[str] = None,
) -> dict[str, Any]:
    """Apply in-progress edits to ``form``. Pure: nothing is saved.

    ``slug`` is the raw text of the slug field and gets the typing rule from
    ``normalize_slug_input``; characters it keeps but ``SLUG_PATTERN`` refuses
    are reported by ``validate_theme_form`` on save.
    """
    updated = deepcopy(form)
    for key, value in (css_variables or {}).items():
        updated = set_css_variable(updated, key, value)
    if slug is not None:
        updated["slug"] = normalize_slug_input(slug)
    return updated


def validate_theme_form(form: dict[str, Any]) -> dict[str, Any]:
    name = str(form.get("name") or "").strip()
    slug = str(form.get("slug") or "").strip()
    if not name or not slug:
        raise ValidationError("Name and slug are required")
    if not SLUG_PATTERN.match(slug):
        raise ValidationError("Slug may only contain lowercase letters, digits, '_' and '-'")

    category = str(form.get("category") or "custom").strip().lower()
    if category not in THEME_CATEGORIES:
        raise ValidationError(f"Invalid category: {category}")

    primary_color = str(form.get("primary_color") or "").strip()
    if not HEX_COLOR_PATTERN.match(primary_color):
        raise ValidationError("primary_color must be a hex color")

    raw_variables = form.get("css_variables") or {}
    if not isinstance(raw_variables, dict):
        raise ValidationError("css_variables must be a mapping")
    css_variables: dict[str, str] = {}
    for key, value in raw_variables.items():
        key = str(key).strip()
        value = str(value).strip()
        if not CSS_VARIABLE_NAME_PATTERN.match(key):
            raise ValidationError(f"Invalid CSS variable name: {key}")
        if _FORBIDDEN_CSS_VALUE_CHARS & set(value):
            raise ValidationError(f"Invalid value for {key}")
        css_variables[key] = value

    try:
        sort_order = int(form.get("sort_order") or 0)
    except (TypeError, ValueError) as exc:
        raise ValidationError("sort_order must be an integer") from exc

    return {
        "name": name,
        "slug": slug,
        "description": (str(form.get("description") or "").strip() or None),
        "category": category,
        "primary_color": primary_color,
        "is_active": bool(form.get("is_active", True)),
        "is_seasonal": bool(form.get("is_seasonal", False)),
        "sort_order": sort_order,
        "css_variables": css_variables,
    }


def list_themes(db: Session) -> list[Theme]:
    return db.query(Theme).order_by(Theme.sort_order.asc(), Theme.id.asc()).all()


def get_theme(db: Session, theme_id: int) -> Theme:
    theme = db.query(Theme).filter(Theme.id == theme_id).first()
    if theme is None:
        raise NotFoundError("Theme not found")
    return theme


def _commit(db: Session, failure_message: str) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("%s: integrity error %s", failure_message, exc.orig)
        raise PersistenceError(f"{failure_message}: slug already in use") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(failure_message)
        raise PersistenceError(failure_message) from exc


def create_theme(db: Session, form: dict[str, Any]) -> Theme:
    values = validate_theme_form(form)
    theme = Theme(**values)
    db.add(theme)
    _commit(db, "Failed to create theme")
    db.refresh(theme)
    logger.info("theme created id=%s slug=%s", theme.id, theme.slug)
    return theme


def update_theme(db: Session, theme_id: int, form: dict[str, Any]) -> Theme:
    values = validate_theme_form(form)
    theme = get_theme(db, theme_id)
    for field in _FORM_FIELDS:
        setattr(theme, field, values[field])
    _commit(db, "Failed to update theme")
    db.refresh(theme)
    logger.info("theme updated id=%s slug=%s", theme.id, theme.slug)
    return theme


def toggle_theme_active(db: Session, theme_id: int) -> Theme:
    theme = get_theme(db, theme_id)
    theme.is_active = not bool(theme.is_active)
    _commit(db, "Failed to update theme status")
    db.refresh(theme)
    return theme


def delete_theme(db: Session, theme_id: int) -> None:
    theme = get_theme(db, theme_id)
    db.delete(theme)
    _commit(db, "Failed to delete theme")
    logger.info("theme deleted id=%s", theme_id)


def get_default_theme_slug(db: Session) -> str | None:
    return theme_service.get_default_theme_slug_setting(db)


def set_default_theme_slug(db: Session, slug: str) -> Setting:
    slug = (slug or "").strip()
    if not slug:
        raise ValidationError("Slug is required")
    if theme_service.fetch_theme_by_slug(db, slug) is None:
        raise NotFoundError(f"Theme not found: {slug}")

    setting = db.query(Setting).filter(Setting.key == DEFAULT_THEME_SETTING_KEY).first()
    if setting is None:
        setting = Setting(key=DEFAULT_THEME_SETTING_KEY, value=slug)
        db.add(setting)
    else:
        setting.value = slug
    _commit(db, "Failed to save default theme")
    db.refresh(setting)
    return setting
