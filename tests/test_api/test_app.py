"""Tests for the application factory, health and metrics endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient

from solsignal.api.app import create_app
from solsignal.engine.client import AlertEngine


def test_health(app_config) -> None:
    with TestClient(create_app(config=app_config)) as client:
        resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_engine_lifecycle(app_config) -> None:
    engine = AlertEngine(app_config)
    app = create_app(engine=engine)
    assert app.state.engine is engine
    with TestClient(app):
        assert engine.is_initialized
    assert not engine.is_initialized


def test_metrics_endpoint(app_config) -> None:
    with TestClient(create_app(config=app_config)) as client:
        client.get("/health")
        resp = client.get("/metrics")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")
    assert "solsignal_http_requests_total" in resp.text
    assert 'route="/health"' in resp.text


def test_metrics_disabled(app_config) -> None:
    app_config.metrics.enabled = False
    with TestClient(create_app(config=app_config)) as client:
        assert client.get("/metrics").status_code == 404
