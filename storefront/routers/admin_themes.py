from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront.core.database import get_db
from storefront.deps import require_admin
from storefront.schemas.theme import (
    ApplyPresetRequest,
    DefaultThemeIn,
    DefaultThemeOut,
    SlugRequest,
    SlugResponse,
    ThemeForm,
    ThemeFormEdit,
    ThemeOut,
    ThemePresetOut,
)
from storefront.services import theme_admin
from storefront.services.auth import Identity
from utils.slug import generate_slug

router = APIRouter(prefix="/api/admin/themes", tags=["admin-themes"])


@router.get("", response_model=List[ThemeOut])
def list_themes(db: Session = Depends(get_db), _admin: Identity = Depends(require_admin)):
    return theme_admin.list_themes(db)


@router.get("/presets", response_model=List[ThemePresetOut])
def list_presets(_admin: Identity = Depends(require_admin)):
    return [{"key": key, **preset} for key, preset in theme_admin.SEASONAL_THEME_PRESETS.items()]


@router.get("/form", response_model=ThemeForm)
def blank_form(_admin: Identity = Depends(require_admin)):
    return theme_admin.new_theme_form()


@router.post("/apply-preset", response_model=ThemeForm)
def apply_preset(payload: ApplyPresetRequest, _admin: Identity = Depends(require_admin)):
    form = payload.form.model_dump() if payload.form else theme_admin.new_theme_form()
    return theme_admin.apply_preset(form, payload.preset)


@router.post("/form/edit", response_model=ThemeForm)
def edit_form(payload: ThemeFormEdit, _admin: Identity = Depends(require_admin)):
    form = payload.form.model_dump() if payload.form else theme_admin.new_theme_form()
    return theme_admin.edit_theme_form(form, css_variables=payload.css_variables, slug=payload.slug)


@router.post("/generate-slug", response_model=SlugResponse)
def generate_theme_slug(payload: SlugRequest, _admin: Identity = Depends(require_admin)):
    return {"slug": generate_slug(payload.name, transliterate=payload.transliterate)}


@router.get("/default", response_model=DefaultThemeOut)
def get_default_theme(db: Session = Depends(get_db), _admin: Identity = Depends(require_admin)):
    return {"slug": theme_admin.get_default_theme_slug(db)}


@router.put("/default", response_model=DefaultThemeOut)
def set_default_theme(
    payload: DefaultThemeIn,
    db: Session = Depends(get_db),
    _admin: Identity = Depends(require_admin),
):
    setting = theme_admin.set_default_theme_slug(db, payload.slug)
    return {"slug": setting.value}


@router.post("", response_model=ThemeOut, status_code=status.HTTP_201_CREATED)
def create_theme(payload: ThemeForm, db: Session = Depends(get_db), _admin: Identity = Depends(require_admin)):
    return theme_admin.create_theme(db, payload.model_dump())


@router.get("/{theme_id}", response_model=ThemeOut)
def get_theme(theme_id: int, db: Session = Depends(get_db), _admin: Identity = Depends(require_admin)):
    return theme_admin.get_theme(db, theme_id)


@router.get("/{theme_id}/form", response_model=ThemeForm)
def get_theme_form(theme_id: int, db: Session = Depends(get_db), _admin: Identity = Depends(require_admin)):
    return theme_admin.theme_to_form(theme_admin.get_theme(db, theme_id))


@router.put("/{theme_id}", response_model=ThemeOut)
def update_theme(
    theme_id: int,
    payload: ThemeForm,
    db: Session = Depends(get_db),
    _admin: Identity = Depends(require_admin),
):
    return theme_admin.update_theme(db, theme_id, payload.model_dump())


@router.post("/{theme_id}/toggle", response_model=ThemeOut)
def toggle_theme(theme_id: int, db: Session = Depends(get_db), _admin: Identity = Depends(require_admin)):
    return theme_admin.toggle_theme_active(db, theme_id)


@router.delete("/{theme_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_theme(theme_id: int, db: Session = Depends(get_db), _admin: Identity = Depends(require_admin)):
    theme_admin.delete_theme(db, theme_id)
