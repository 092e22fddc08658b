from __future__ import annotations

import json
from collections.abc import Callable, Generator
from decimal import Decimal
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine, delete, select

from wallet.api.deps import get_db
from wallet.core.security import sign_webhook_body
from wallet.main import app
from wallet.models import Account, Wallet, WalletTransaction
from wallet.services.purchase_webhook import (
    PurchaseWebhookService,
    get_purchase_webhook_service,
)

WEBHOOK_SECRET = "test-webhook-secret"
POINTS_RATE = Decimal("3")


@pytest.fixture(scope="session")
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture(scope="function")
def db(engine) -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session
        session.rollback()
        # Clean tables after each test (children first).
        session.exec(delete(WalletTransaction))
        session.exec(delete(Wallet))
        session.exec(delete(Account))
        session.commit()


@pytest.fixture(scope="function")
def service() -> PurchaseWebhookService:
    return PurchaseWebhookService(webhook_secret=WEBHOOK_SECRET, points_rate=POINTS_RATE)


@pytest.fixture(scope="function")
def client(engine, db, service) -> Generator[TestClient, None, None]:
    def _override_get_db() -> Generator[Session, None, None]:
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_purchase_webhook_service] = lambda: service
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def order_payload(
    order_id: Any = 1001,
    total_price: Any = "10.00",
    customer_id: Any = "C1",
    email: str | None = "c1@example.com",
    first_name: str | None = "Mei",
    last_name: str | None = "Ling",
) -> dict[str, Any]:
    return {
        "id": order_id,
        "total_price": total_price,
        "customer": {
            "id": customer_id,
            "email": email,
            "first_name": first_name,
            "last_name": last_name,
        },
    }


@pytest.fixture
def post_order(client) -> Callable[..., Any]:
    """Post a signed order body exactly as Shopify would send it."""

    def _post(payload: Any, *, secret: str = WEBHOOK_SECRET, signature: str | None = None):
        body = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
        sig = signature if signature is not None else sign_webhook_body(body, secret)
        return client.post(
            "/events/purchase-completed",
            content=body,
            headers={"Content-Type": "application/json", "X-Signature": sig},
        )

    return _post


@pytest.fixture
def make_order() -> Callable[..., dict[str, Any]]:
    return order_payload


@pytest.fixture
def wallet_of(db) -> Callable[[str], Wallet | None]:
    """Read the current wallet row for a customer, bypassing the identity map."""

    def _read(customer_id: str) -> Wallet | None:
        db.expire_all()
        account = db.exec(
            select(Account).where(Account.shopify_customer_id == customer_id)
        ).first()
        if account is None:
            return None
        return db.exec(select(Wallet).where(Wallet.account_id == account.id)).first()

    return _read
