"""积分钱包查询（只读）"""
from __future__ import annotations

from dataclasses import dataclass

from sqlmodel import Session, col, func, select

from wallet import crud
from wallet.models import WalletTransaction


@dataclass
class WalletLookup:
    email: str
    name: str | None
    has_wallet: bool
    points: int
    lifetime_points: int


def lookup_wallet_by_email(*, session: Session, email: str) -> WalletLookup:
    """
    按邮箱查询积分余额

    没有账户或账户还没有钱包时返回 0 积分、has_wallet=False，而不是报错。
    """
    account = crud.get_account_by_email(session=session, email=email)
    if account is None or account.id is None:
        return WalletLookup(
            email=email, name=None, has_wallet=False, points=0, lifetime_points=0
        )

    wallet = crud.get_wallet(session=session, account_id=account.id)
    return WalletLookup(
        email=account.email or email,
        name=account.name,
        has_wallet=wallet is not None,
        points=wallet.points if wallet else 0,
        lifetime_points=wallet.lifetime_points if wallet else 0,
    )


def list_wallet_transactions(
    *, session: Session, email: str, page: int = 1, page_size: int = 20
) -> tuple[list[WalletTransaction], int]:
    """按邮箱分页查询积分流水，按时间倒序；返回 (当前页, 总数)"""
    account = crud.get_account_by_email(session=session, email=email)
    if account is None or account.id is None:
        return [], 0
    wallet = crud.get_wallet(session=session, account_id=account.id)
    if wallet is None:
        return [], 0

    count = session.exec(
        select(func.count())
        .select_from(WalletTransaction)
        .where(WalletTransaction.wallet_id == wallet.id)
    ).one()
    rows = session.exec(
        select(WalletTransaction)
        .where(WalletTransaction.wallet_id == wallet.id)
        .order_by(col(WalletTransaction.created_at).desc(), col(WalletTransaction.id).desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    ).all()
    return list(rows), count
