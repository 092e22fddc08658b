"""
数据库模型定义模块

模型按功能拆分：
- account.py: 客户账户
- wallet.py: 积分钱包与积分流水
"""
from sqlmodel import SQLModel

from .account import Account
from .base import utc_now
from .wallet import Wallet, WalletTransaction

__all__ = [
    "SQLModel",
    "utc_now",
    "Account",
    "Wallet",
    "WalletTransaction",
]
