"""
积分钱包路由模块

只读接口，供店铺前端按邮箱展示积分：
- 查询积分余额
- 查询积分流水（分页）
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Query
from sqlalchemy.exc import SQLAlchemyError

from wallet.api.deps import SessionDep
from wallet.api.errors import email_required, wallet_lookup_failed
from wallet.api.schemas import (
    WalletByEmailResponse,
    WalletTransactionPublic,
    WalletTransactionsResponse,
)
from wallet.services.wallet_query import (
    list_wallet_transactions,
    lookup_wallet_by_email,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/wallet", tags=["wallet"])


@router.get("/by-email", response_model=WalletByEmailResponse)
def by_email(
    session: SessionDep,
    email: str | None = Query(default=None),
) -> WalletByEmailResponse:
    """
    按邮箱查询积分余额

    请求路径: GET /wallet/by-email?email=someone@example.com

    没有该用户或用户还没有钱包时返回 0 积分，hasWallet=false。
    """
    email = (email or "").strip()
    if not email:
        raise email_required()

    try:
        found = lookup_wallet_by_email(session=session, email=email)
    except SQLAlchemyError:
        logger.exception("GET /wallet/by-email failed for %s", email)
        raise wallet_lookup_failed()

    return WalletByEmailResponse(
        email=found.email,
        name=found.name,
        hasWallet=found.has_wallet,
        points=found.points,
        lifetime_points=found.lifetime_points,
    )


@router.get("/transactions", response_model=WalletTransactionsResponse)
def transactions(
    session: SessionDep,
    email: str | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
) -> WalletTransactionsResponse:
    """
    按邮箱分页查询积分流水，按时间倒序

    请求路径: GET /wallet/transactions?email=someone@example.com&page=1&page_size=20
    """
    email = (email or "").strip()
    if not email:
        raise email_required()

    try:
        rows, count = list_wallet_transactions(
            session=session, email=email, page=page, page_size=page_size
        )
    except SQLAlchemyError:
        logger.exception("GET /wallet/transactions failed for %s", email)
        raise wallet_lookup_failed()

    data = [
        WalletTransactionPublic(
            id=row.id,
            type=row.type,
            source=row.source,
            shopify_order_id=row.shopify_order_id,
            points_change=row.points_change,
            note=row.note,
            created_at=row.created_at,
        )
        for row in rows
    ]
    return WalletTransactionsResponse(email=email, count=count, data=data)
