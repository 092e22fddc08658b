"""
积分钱包模型模块

定义积分余额和积分流水两张表。
"""
from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlmodel import Field, SQLModel

from wallet.enums import TransactionSource, TransactionType

from .base import utc_now


class Wallet(SQLModel, table=True):
    """
    积分钱包（余额）模型

    与账户一一对应（account_id 唯一），在账户第一次获得积分时创建。
    points 和 lifetime_points 只能随积分流水一起增加，
    不允许出现没有对应流水的余额变动。

    字段说明：
    - id: 主键
    - account_id: 账户 ID（外键，唯一）
    - points: 当前可用积分（非负）
    - lifetime_points: 累计获得积分（只增不减）
    - updated_at: 最后更新时间
    """
    __tablename__ = "wallets"
    __table_args__ = (
        CheckConstraint("points >= 0", name="ck_wallets_points_non_negative"),
    )

    id: int | None = Field(default=None, primary_key=True)
    account_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("accounts.id", ondelete="CASCADE"),
            unique=True,
            index=True,
            nullable=False,
        )
    )
    points: int = Field(default=0, nullable=False)
    lifetime_points: int = Field(default=0, nullable=False)

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


class WalletTransaction(SQLModel, table=True):
    """
    积分流水模型

    只追加、不修改的审计记录。每次积分变动都对应一条流水。
    (source, shopify_order_id) 唯一，重复投递的同一订单会被数据库拒绝，
    从而保证同一订单只入账一次。

    字段说明：
    - id: 主键
    - wallet_id: 钱包 ID（外键）
    - type: 方向（earn/spend）
    - source: 来源（order）
    - shopify_order_id: 外部订单号
    - points_change: 积分变动值
    - note: 备注
    - created_at: 记录时间
    """
    __tablename__ = "wallet_transactions"
    __table_args__ = (
        UniqueConstraint(
            "source", "shopify_order_id", name="uq_wallet_transactions_source_order"
        ),
    )

    id: int | None = Field(default=None, primary_key=True)
    wallet_id: int = Field(
        sa_column=Column(
            Integer, ForeignKey("wallets.id", ondelete="CASCADE"), index=True, nullable=False
        )
    )
    type: TransactionType = Field(sa_column=Column(String(16), nullable=False))
    source: TransactionSource = Field(sa_column=Column(String(32), nullable=False))
    shopify_order_id: str | None = Field(default=None, max_length=64)
    points_change: int = Field(nullable=False)
    note: str | None = Field(default=None, max_length=255)

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
