from __future__ import annotations

import logging
from threading import Lock

from storefront.services.event_bus import (
    ORDER_CREATED,
    ORDER_STATUS_CHANGED,
    ORDER_UNVERIFIED,
    ORDER_VERIFIED,
    SITE_LOGO_CHANGED,
    THEME_CHANGED,
    event_bus,
)

logger = logging.getLogger(__name__)


class ChangeVersions:
    """Counters bumped on broadcast events, polled by clients to know when to refetch."""

    def __init__(self) -> None:
        self._versions: dict[str, int] = {}
        self._lock = Lock()

    def bump(self, name: str) -> int:
        with self._lock:
            self._versions[name] = self._versions.get(name, 0) + 1
            return self._versions[name]

    def snapshot(self) -> dict[str, int]:
        with self._lock:
            return dict(self._versions)


change_versions = ChangeVersions()


def handle_theme_changed(_payload: dict) -> None:
    change_versions.bump("theme")


def handle_site_logo_changed(_payload: dict) -> None:
    version = change_versions.bump("site_logo")
    logger.info("site logo changed version=%s", version, extra={"event": SITE_LOGO_CHANGED})


def handle_order_event(payload: dict) -> None:
    change_versions.bump("orders")
    logger.info(
        "order event order_id=%s status=%s previous_status=%s verified=%s",
        payload.get("order_id"),
        payload.get("status"),
        payload.get("previous_status"),
        payload.get("verified"),
        extra={"event": "order"},
    )


event_bus.subscribe(THEME_CHANGED, handle_theme_changed)
event_bus.subscribe(SITE_LOGO_CHANGED, handle_site_logo_changed)
for _order_event in (ORDER_CREATED, ORDER_STATUS_CHANGED, ORDER_VERIFIED, ORDER_UNVERIFIED):
    event_bus.subscribe(_order_event, handle_order_event)
