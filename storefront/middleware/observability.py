from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from storefront.core.metrics import request_metrics
from storefront.core.request_context import clear_request_context, set_request_context

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        set_request_context(request_id=request_id)

        response = None
        try:
            response = await call_next(request)
            return response
        finally:
            status_code = response.status_code if response is not None else 500
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            route = _route_template(request)
            identity = getattr(request.state, "identity", None)
            user_id = getattr(identity, "user_id", None)
            role = getattr(identity, "role", None)

            set_request_context(user_id=user_id, role=role)
            request_metrics.observe(route=route, method=request.method, status_code=status_code, duration_ms=duration_ms)
            logger.log(
                logging.WARNING if status_code >= 500 else logging.INFO,
                "request completed",
                extra={
                    "user_id": user_id,
                    "role": role,
                    "endpoint": route,
                    "method": request.method,
                    "status_code": status_code,
                    "duration_ms": duration_ms,
                },
            )

            if response is not None:
                response.headers[REQUEST_ID_HEADER] = request_id
            clear_request_context()


def _route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path
