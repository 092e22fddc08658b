from __future__ import annotations

import asyncio
from decimal import Decimal

import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from wallet import backend_pre_start
from wallet.api import deps
from wallet.core.config import Settings, parse_cors
from wallet.core.db import build_engine
from wallet.enums import WebhookOutcome
from wallet.services.purchase_webhook import (
    PurchaseWebhookService,
    get_purchase_webhook_service,
)


def test_health_check(client):
    r = client.get("/utils/health-check/")
    assert r.status_code == 200
    assert r.json() is True


def test_parse_cors():
    assert parse_cors("https://a.com, https://b.com") == ["https://a.com", "https://b.com"]
    assert parse_cors(["https://a.com"]) == ["https://a.com"]
    assert parse_cors('["https://a.com"]') == '["https://a.com"]'
    with pytest.raises(ValueError):
        parse_cors(123)


def test_settings_defaults_and_overrides():
    s = Settings(
        POSTGRES_SERVER="db",
        POSTGRES_USER="wallet",
        POSTGRES_PASSWORD="pw",
        POSTGRES_DB="wallet",
        BACKEND_CORS_ORIGINS="https://thcomalaysia.com/",
        POINTS_PER_CURRENCY_UNIT="2.5",
    )
    assert s.POINTS_PER_CURRENCY_UNIT == Decimal("2.5")
    assert s.all_cors_origins == ["https://thcomalaysia.com"]
    assert str(s.SQLALCHEMY_DATABASE_URI).startswith("postgresql+psycopg://wallet:pw@db:5432/wallet")


def test_settings_rejects_negative_rate():
    with pytest.raises(ValidationError):
        Settings(POINTS_PER_CURRENCY_UNIT="-1")


def test_settings_requires_webhook_secret_outside_local():
    with pytest.raises(ValidationError):
        Settings(ENVIRONMENT="production", WEBHOOK_SECRET=None, POSTGRES_PASSWORD="pw")
    s = Settings(ENVIRONMENT="production", WEBHOOK_SECRET="real", POSTGRES_PASSWORD="pw")
    assert s.WEBHOOK_SECRET == "real"


def test_settings_default_secret_warns_locally_and_fails_in_production():
    with pytest.warns(UserWarning):
        Settings(ENVIRONMENT="local", WEBHOOK_SECRET="changethis")
    with pytest.raises(ValidationError):
        Settings(ENVIRONMENT="staging", WEBHOOK_SECRET="changethis", POSTGRES_PASSWORD="pw")


def test_build_engine_sqlite_has_no_postgres_options():
    engine = build_engine("sqlite://", timeout_seconds=3)
    with engine.connect() as conn:
        assert conn.exec_driver_sql("select 1").scalar() == 1


def test_build_engine_postgres_carries_timeouts():
    engine = build_engine("postgresql+psycopg://u:p@localhost:5432/db", timeout_seconds=4)
    assert engine.pool.timeout() == 4


def test_get_db_generator_uses_engine_override(engine, monkeypatch):
    monkeypatch.setattr(deps, "engine", engine)
    gen = deps.get_db()
    session = next(gen)
    assert session.connection().exec_driver_sql("select 1").scalar() == 1
    gen.close()


def test_pre_start_check_passes(engine):
    backend_pre_start.init(engine)


def test_service_without_secret_rejects_everything(db):
    service = PurchaseWebhookService(webhook_secret=None, points_rate=Decimal("3"))
    result = service.handle(session=db, raw_body=b"{}", signature="anything")
    assert result.outcome == WebhookOutcome.unauthorized


def test_service_factory_reads_settings(monkeypatch):
    from wallet.services import purchase_webhook

    monkeypatch.setattr(purchase_webhook.settings, "WEBHOOK_SECRET", "from-env")
    monkeypatch.setattr(purchase_webhook.settings, "POINTS_PER_CURRENCY_UNIT", Decimal("4"))
    service = get_purchase_webhook_service()
    assert service.webhook_secret == "from-env"
    assert service.points_rate == Decimal("4")


def test_http_exception_handler_dict_and_str_detail():
    from wallet import main as app_main

    exc = HTTPException(status_code=418, detail={"code": 418001, "message": "teapot"})
    resp = asyncio.run(app_main.http_error_handler(None, exc))  # type: ignore[arg-type]
    assert resp.status_code == 418
    assert b"teapot" in resp.body

    exc = HTTPException(status_code=404, detail="missing")
    resp = asyncio.run(app_main.http_error_handler(None, exc))  # type: ignore[arg-type]
    assert b"404000" in resp.body
