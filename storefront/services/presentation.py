from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Protocol

from storefront.core.config import THEME_COOKIE_NAME
from storefront.services.event_bus import THEME_CHANGED, EventBus, event_bus

logger = logging.getLogger(__name__)

THEME_ATTRIBUTE = "data-theme"

Listener = Callable[["PresentationState"], None]


class ThemeLike(Protocol):
    slug: str
    css_variables: Mapping[str, str] | None


class PresentationState:
    """Single owner of the theme-related presentation state.

    Holds the custom properties set on the document root, the root
    attributes, and the client-local key/value store. ``apply_theme`` is
    the only way to change them. Listeners registered with ``subscribe``
    are called after every change, and ``theme.changed`` is emitted on the
    process event bus without a payload.
    """

    def __init__(self, *, local_storage: dict[str, str] | None = None, bus: EventBus | None = None) -> None:
        self.root_style: dict[str, str] = {}
        self.root_attributes: dict[str, str] = {}
        self.local_storage: dict[str, str] = dict(local_storage or {})
        self._applied_keys: set[str] = set()
        self._listeners: list[Listener] = []
        self._bus = bus or event_bus

    @property
    def current_slug(self) -> str | None:
        return self.root_attributes.get(THEME_ATTRIBUTE)

    @property
    def stored_slug(self) -> str | None:
        """Slug saved by the last ``apply_theme``, usable for a first paint."""
        return self.local_storage.get(THEME_COOKIE_NAME)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def apply_theme(self, theme: ThemeLike) -> None:
        variables = {str(key): str(value) for key, value in (theme.css_variables or {}).items()}

        for stale_key in self._applied_keys - set(variables):
            self.root_style.pop(stale_key, None)
        self.root_style.update(variables)
        self._applied_keys = set(variables)

        self.local_storage[THEME_COOKIE_NAME] = theme.slug
        self.root_attributes[THEME_ATTRIBUTE] = theme.slug

        logger.debug("theme applied slug=%s variables=%s", theme.slug, len(variables))
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("presentation listener failed slug=%s", theme.slug)
        self._bus.emit(THEME_CHANGED)

    def snapshot(self) -> dict[str, Any]:
        return {
            "slug": self.current_slug,
            "css_variables": dict(self.root_style),
            "attributes": dict(self.root_attributes),
            "local_storage": dict(self.local_storage),
        }

    def to_css(self) -> str:
        if not self.root_style:
            return ":root {}\n"
        lines = [f"  {key}: {value};" for key, value in sorted(self.root_style.items())]
        selector = ":root"
        if self.current_slug:
            selector = f':root, [{THEME_ATTRIBUTE}="{self.current_slug}"]'
        return selector + " {\n" + "\n".join(lines) + "\n}\n"
