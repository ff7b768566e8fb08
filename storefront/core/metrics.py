from __future__ import annotations

from dataclasses import dataclass
from threading import Lock


@dataclass
class RouteMetric:
    total_requests: int = 0
    total_duration_ms: float = 0.0
    max_duration_ms: float = 0.0
    client_errors: int = 0
    server_errors: int = 0


class InMemoryRequestMetrics:
    """Per-route request counters, keyed by the route template.

    ``/api/admin/orders/{order_id}`` is one entry no matter how many orders
    are opened, so the snapshot stays small.
    """

    def __init__(self) -> None:
        self._metrics: dict[tuple[str, str], RouteMetric] = {}
        self._lock = Lock()

    def observe(self, route: str, method: str, status_code: int, duration_ms: float) -> None:
        with self._lock:
            metric = self._metrics.setdefault((route, method), RouteMetric())
            metric.total_requests += 1
            metric.total_duration_ms += duration_ms
            metric.max_duration_ms = max(metric.max_duration_ms, duration_ms)
            if status_code >= 500:
                metric.server_errors += 1
            elif status_code >= 400:
                metric.client_errors += 1

    def snapshot(self) -> dict[str, dict[str, float | int]]:
        with self._lock:
            result: dict[str, dict[str, float | int]] = {}
            for (route, method), metric in sorted(self._metrics.items()):
                avg = metric.total_duration_ms / metric.total_requests if metric.total_requests else 0.0
                result[f"{method} {route}"] = {
                    "total_requests": metric.total_requests,
                    "avg_duration_ms": round(avg, 2),
                    "max_duration_ms": round(metric.max_duration_ms, 2),
                    "client_errors": metric.client_errors,
                    "server_errors": metric.server_errors,
                }
            return result

    def reset(self) -> None:
        with self._lock:
            self._metrics.clear()


request_metrics = InMemoryRequestMetrics()
