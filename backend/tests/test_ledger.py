from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import select

from wallet import crud
from wallet.crud import accounts as accounts_mod
from wallet.crud import ledger as ledger_mod
from wallet.enums import TransactionSource, TransactionType
from wallet.models import Account, Wallet, WalletTransaction


def _award(db, *, customer_id="C1", order_id="O1", points=30, email="c1@example.com", name="Mei Ling"):
    return crud.apply_order_award(
        session=db,
        customer_id=customer_id,
        email=email,
        name=name,
        order_id=order_id,
        points=points,
    )


def test_first_award_creates_account_wallet_and_transaction(db):
    result = _award(db)

    assert result.duplicate is False
    assert result.account is not None
    assert result.account.shopify_customer_id == "C1"
    assert result.account.email == "c1@example.com"
    assert result.account.name == "Mei Ling"
    assert result.wallet is not None
    assert result.wallet.points == 30
    assert result.wallet.lifetime_points == 30

    tx = result.transaction
    assert tx is not None
    assert tx.type == TransactionType.earn
    assert tx.source == TransactionSource.order
    assert tx.shopify_order_id == "O1"
    assert tx.points_change == 30
    assert tx.note == "Points from order"
    assert tx.wallet_id == result.wallet.id


def test_awards_for_same_customer_are_summed(db):
    _award(db, order_id="O1", points=30)
    result = _award(db, order_id="O2", points=15)

    assert result.wallet.points == 45
    assert result.wallet.lifetime_points == 45
    assert len(db.exec(select(Wallet)).all()) == 1
    assert len(db.exec(select(Account)).all()) == 1
    assert len(db.exec(select(WalletTransaction)).all()) == 2


def test_redelivered_order_is_applied_once(db):
    _award(db, order_id="O1", points=30)
    result = _award(db, order_id="O1", points=30)

    assert result.duplicate is True
    assert result.transaction is None
    assert result.wallet.points == 30
    assert result.wallet.lifetime_points == 30
    assert len(db.exec(select(WalletTransaction)).all()) == 1


def test_existing_account_profile_is_refreshed(db):
    _award(db, order_id="O1", email="old@example.com", name="Old Name")
    result = _award(db, order_id="O2", email="new@example.com", name="New Name")

    assert result.account.email == "new@example.com"
    assert result.account.name == "New Name"


def test_zero_point_order_is_still_recorded(db):
    result = _award(db, order_id="O-free", points=0)

    assert result.duplicate is False
    assert result.transaction.points_change == 0
    assert result.wallet.points == 0


def test_concurrent_redelivery_hits_unique_constraint(db, monkeypatch):
    _award(db, order_id="O1", points=30)

    # Simulate a second delivery that passed the duplicate check before the
    # first one committed.
    real_find = ledger_mod.find_order_transaction
    calls = {"n": 0}

    def racing_find(*, session, order_id):
        calls["n"] += 1
        if calls["n"] == 1:
            return None
        return real_find(session=session, order_id=order_id)

    monkeypatch.setattr(ledger_mod, "find_order_transaction", racing_find)
    result = _award(db, order_id="O1", points=30)

    assert result.duplicate is True
    db.expire_all()
    wallet = db.exec(select(Wallet)).one()
    assert wallet.points == 30
    assert wallet.lifetime_points == 30
    assert len(db.exec(select(WalletTransaction)).all()) == 1


def test_concurrent_first_purchase_retries_account_creation(db, monkeypatch):
    _award(db, order_id="O1", points=30)

    # The first lookup misses the account as if another request created it
    # in the meantime; the insert then collides and the award is retried.
    real_get = accounts_mod.get_by_customer_id
    calls = {"n": 0}

    def racing_get(*, session, customer_id):
        calls["n"] += 1
        if calls["n"] == 1:
            return None
        return real_get(session=session, customer_id=customer_id)

    monkeypatch.setattr(accounts_mod, "get_by_customer_id", racing_get)
    result = _award(db, order_id="O2", points=15)

    assert result.duplicate is False
    assert result.wallet.points == 45
    assert len(db.exec(select(Account)).all()) == 1


def test_failure_mid_award_leaves_no_partial_write(db, monkeypatch):
    def failing_update(*_args, **_kwargs):
        raise OperationalError("UPDATE wallets", {}, Exception("statement timeout"))

    monkeypatch.setattr(ledger_mod, "update", failing_update)

    with pytest.raises(OperationalError):
        _award(db, customer_id="C-fail", order_id="O-fail", points=30)

    db.expire_all()
    assert db.exec(select(Account)).all() == []
    assert db.exec(select(Wallet)).all() == []
    assert db.exec(select(WalletTransaction)).all() == []


def test_get_or_create_wallet_is_single_per_account(db):
    account = crud.upsert_account(session=db, customer_id="C9", email=None, name=None)
    first = crud.get_or_create_wallet(session=db, account_id=account.id)
    second = crud.get_or_create_wallet(session=db, account_id=account.id)
    db.commit()

    assert first.id == second.id
    assert first.points == 0
    assert first.lifetime_points == 0


def test_get_account_by_email_prefers_latest(db):
    _award(db, customer_id="A", order_id="O1", email="shared@example.com", name="First")
    _award(db, customer_id="B", order_id="O2", email="shared@example.com", name="Second")

    account = crud.get_account_by_email(session=db, email="shared@example.com")
    assert account is not None
    assert account.shopify_customer_id == "B"
    assert crud.get_account_by_email(session=db, email="nobody@example.com") is None
