from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Cookie, Depends, Response
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from storefront.core.config import THEME_COOKIE_MAX_AGE_SECONDS, THEME_COOKIE_NAME
from storefront.core.database import get_db
from storefront.deps import get_current_identity, get_optional_identity
from storefront.schemas.theme import CurrentThemeOut, ThemeOut, ThemeSelection
from storefront.services.auth import Identity
from storefront.services.presentation import PresentationState
from storefront.services.theme_provider import ThemeProvider
from storefront.services.theme_service import fetch_active_themes

router = APIRouter(prefix="/api/themes", tags=["themes"])


def _build_provider(db: Session, identity: Optional[Identity], stored_slug: Optional[str]) -> ThemeProvider:
    local_storage = {THEME_COOKIE_NAME: stored_slug} if stored_slug else None
    presentation = PresentationState(local_storage=local_storage)
    return ThemeProvider(db, identity.user_id if identity else None, presentation)


def _current_response(provider: ThemeProvider, response: Response) -> dict:
    theme = provider.current_theme
    if theme is not None:
        response.set_cookie(
            THEME_COOKIE_NAME,
            theme.slug,
            max_age=THEME_COOKIE_MAX_AGE_SECONDS,
            samesite="lax",
        )
    return {
        "theme": ThemeOut.model_validate(theme) if theme is not None else None,
        "presentation": provider.presentation.snapshot(),
    }


@router.get("", response_model=List[ThemeOut])
def list_active_themes(db: Session = Depends(get_db)):
    return fetch_active_themes(db)


@router.get("/current", response_model=CurrentThemeOut)
def current_theme(
    response: Response,
    db: Session = Depends(get_db),
    identity: Optional[Identity] = Depends(get_optional_identity),
    current_theme_slug: Optional[str] = Cookie(default=None),
):
    provider = _build_provider(db, identity, current_theme_slug)
    provider.initialize()
    return _current_response(provider, response)


@router.get("/current.css", response_class=PlainTextResponse)
def current_theme_css(
    db: Session = Depends(get_db),
    identity: Optional[Identity] = Depends(get_optional_identity),
):
    provider = _build_provider(db, identity, None)
    provider.initialize()
    return PlainTextResponse(provider.presentation.to_css(), media_type="text/css")


@router.put("/me", response_model=CurrentThemeOut)
def select_theme(
    payload: ThemeSelection,
    response: Response,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    provider = _build_provider(db, identity, None)
    provider.set_theme(payload.theme_id)
    return _current_response(provider, response)


@router.delete("/me", response_model=CurrentThemeOut)
def reset_theme(
    response: Response,
    db: Session = Depends(get_db),
    identity: Optional[Identity] = Depends(get_optional_identity),
):
    provider = _build_provider(db, identity, None)
    provider.reset_to_default()
    return _current_response(provider, response)
