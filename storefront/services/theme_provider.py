from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from storefront.core.errors import NotFoundError, ValidationError
from storefront.models.theme import Theme
from storefront.services import theme_service
from storefront.services.presentation import PresentationState

logger = logging.getLogger(__name__)


class ThemeProvider:
    """Theme controller scoped to one identity (``None`` for anonymous visitors)."""

    def __init__(
        self,
        db: Session,
        user_id: str | None,
        presentation: PresentationState | None = None,
    ) -> None:
        self.db = db
        self.user_id = user_id
        self.presentation = presentation or PresentationState()
        self.current_theme: Optional[Theme] = None
        self._available: list[Theme] | None = None

    @property
    def available_themes(self) -> list[Theme]:
        if self._available is None:
            self._available = theme_service.fetch_active_themes(self.db)
        return self._available

    def _apply(self, theme: Optional[Theme]) -> Optional[Theme]:
        if theme is not None:
            self.presentation.apply_theme(theme)
            self.current_theme = theme
        return theme

    def initialize(self) -> Optional[Theme]:
        theme = theme_service.resolve_theme(self.db, self.user_id)
        if theme is None:
            logger.warning("no theme resolved user_id=%s", self.user_id)
        return self._apply(theme)

    def set_theme(self, theme_id: int) -> Theme:
        if not self.user_id:
            raise ValidationError("Anonymous visitors cannot save a theme")

        selected = next((theme for theme in self.available_themes if theme.id == theme_id), None)
        if selected is None:
            raise NotFoundError("Theme not found")

        # Persist first; PersistenceError leaves the presentation untouched.
        theme_service.set_user_theme(self.db, self.user_id, theme_id)
        self._apply(selected)
        return selected

    def reset_to_default(self) -> Optional[Theme]:
        if self.user_id:
            theme_service.clear_user_theme(self.db, self.user_id)
        return self._apply(theme_service.get_default_theme(self.db))
