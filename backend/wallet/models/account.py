"""
客户账户模型模块
"""
from datetime import datetime

from sqlalchemy import Column, DateTime, String
from sqlmodel import Field, SQLModel

from .base import utc_now


class Account(SQLModel, table=True):
    """
    客户账户模型

    以 Shopify 客户 ID 作为唯一身份标识。首次收到该客户的订单时创建，
    之后每次收到订单都会刷新邮箱和姓名（以最后一次为准）。本服务不会删除账户。

    字段说明：
    - id: 主键
    - shopify_customer_id: Shopify 客户 ID（唯一且建立索引）
    - email: 客户邮箱（用于余额查询，不唯一）
    - name: 显示名称（"名 姓"）
    - created_at / updated_at: 创建和更新时间
    """
    __tablename__ = "accounts"
    id: int | None = Field(default=None, primary_key=True)
    shopify_customer_id: str = Field(
        max_length=64,
        sa_column=Column(String(64), unique=True, index=True, nullable=False),
    )
    email: str | None = Field(default=None, max_length=255, index=True)
    name: str | None = Field(default=None, max_length=255)

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
