"""
API 请求/响应数据模型（Schema）

这些模型不是数据库表，只用于 API 数据交换。
字段名（hasWallet、lifetime_points 等）与店铺前端已有的约定保持一致。
"""
from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from wallet.enums import TransactionSource, TransactionType


class ErrorResponse(BaseModel):
    """
    错误响应格式

    示例：
        {"success": false, "message": "email is required", "code": 400001}
    """
    success: bool = False
    message: str
    code: int | None = None
    errors: list[Any] | None = None


class WalletByEmailResponse(BaseModel):
    """按邮箱查询积分余额的响应"""
    success: bool = True
    email: str
    name: str | None = None
    hasWallet: bool
    points: int
    lifetime_points: int


class WalletTransactionPublic(BaseModel):
    """积分流水公开模型"""
    id: int
    type: TransactionType
    source: TransactionSource
    shopify_order_id: str | None = None
    points_change: int
    note: str | None = None
    created_at: datetime


class WalletTransactionsResponse(BaseModel):
    """积分流水列表响应"""
    success: bool = True
    email: str
    count: int
    data: list[WalletTransactionPublic]
