import json
import logging
from types import SimpleNamespace

from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from storefront.core.logging_setup import JsonFormatter
from storefront.core.metrics import InMemoryRequestMetrics, request_metrics
from storefront.core.request_context import clear_request_context, set_request_context
from storefront.middleware.observability import ObservabilityMiddleware


def _record(message, *args, **extra):
    record = logging.LogRecord("storefront.test", logging.INFO, __file__, 1, message, args, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_masks_secrets_and_includes_context():
    set_request_context(request_id="req-1", user_id="user-7", role="admin")
    try:
        line = JsonFormatter("%(message)s").format(
            _record(
                "Authorization: Bearer abc.def token=xyz url=https://s/x?X-Amz-Signature=deadbeef&a=1",
                endpoint="/api/orders",
                status_code=201,
            )
        )
    finally:
        clear_request_context()

    payload = json.loads(line)
    assert payload["request_id"] == "req-1"
    assert payload["user_id"] == "user-7"
    assert payload["role"] == "admin"
    assert payload["endpoint"] == "/api/orders"
    assert payload["status_code"] == 201
    assert "abc.def" not in payload["message"]
    assert "xyz" not in payload["message"]
    assert "deadbeef" not in payload["message"]
    assert "X-Amz-Signature=***" in payload["message"]


def test_metrics_snapshot_aggregates_per_endpoint():
    metrics = InMemoryRequestMetrics()
    metrics.observe("/api/orders", "POST", 201, 10.0)
    metrics.observe("/api/orders", "POST", 422, 20.0)

    metrics.observe("/api/orders", "POST", 503, 45.5)

    assert metrics.snapshot() == {
        "POST /api/orders": {
            "total_requests": 3,
            "avg_duration_ms": 25.17,
            "max_duration_ms": 45.5,
            "client_errors": 1,
            "server_errors": 1,
        }
    }
    metrics.reset()
    assert metrics.snapshot() == {}


def test_middleware_echoes_request_id_and_records_metrics():
    app = FastAPI()
    app.add_middleware(ObservabilityMiddleware)

    @app.get("/ping")
    def ping():
        return {"ok": True}

    request_metrics.reset()
    client = TestClient(app)

    response = client.get("/ping", headers={"X-Request-ID": "fixed-id"})

    assert response.headers["X-Request-ID"] == "fixed-id"
    assert request_metrics.snapshot()["GET /ping"]["total_requests"] == 1


def test_middleware_groups_metrics_by_route_and_logs_caller(caplog):
    app = FastAPI()
    app.add_middleware(ObservabilityMiddleware)

    @app.get("/orders/{order_id}")
    def read_order(order_id: int, request: Request):
        request.state.identity = SimpleNamespace(user_id="admin-1", role="admin")
        return {"id": order_id}

    @app.get("/boom")
    def boom():
        raise RuntimeError("store offline")

    request_metrics.reset()
    client = TestClient(app, raise_server_exceptions=False)

    with caplog.at_level(logging.INFO, logger="storefront.middleware.observability"):
        client.get("/orders/1")
        client.get("/orders/2")
        failed = client.get("/boom")

    snapshot = request_metrics.snapshot()
    assert snapshot["GET /orders/{order_id}"]["total_requests"] == 2
    assert "GET /orders/1" not in snapshot
    assert failed.status_code == 500
    assert snapshot["GET /boom"]["server_errors"] == 1

    completed = [record for record in caplog.records if record.getMessage() == "request completed"]
    assert [(record.levelno, record.status_code) for record in completed] == [
        (logging.INFO, 200),
        (logging.INFO, 200),
        (logging.WARNING, 500),
    ]
    assert (completed[0].user_id, completed[0].role) == ("admin-1", "admin")
    assert completed[2].role is None
