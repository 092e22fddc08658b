"""
数据库连接模块

管理数据库引擎的创建。

重要提示：
- 数据库表结构通过 Alembic 迁移管理，不要在这里创建表
- 所有数据库调用都带超时：连接超时、语句超时（statement_timeout）和连接池等待超时，
  超时会以 OperationalError / TimeoutError 抛出，由调用方转换为处理失败
"""
from typing import Any

from sqlalchemy import Engine
from sqlmodel import create_engine

from wallet.core.config import settings


def build_engine(url: str, *, timeout_seconds: int) -> Engine:
    """
    创建带超时配置的数据库引擎

    Args:
        url: 数据库连接字符串
        timeout_seconds: 连接、单条语句和连接池等待的超时时间（秒）

    Returns:
        Engine: SQLAlchemy 引擎
    """
    connect_args: dict[str, Any] = {}
    engine_kwargs: dict[str, Any] = {}
    if url.startswith("postgresql"):
        connect_args = {
            "connect_timeout": timeout_seconds,
            "options": f"-c statement_timeout={timeout_seconds * 1000}",
        }
        engine_kwargs = {"pool_pre_ping": True, "pool_timeout": timeout_seconds}
    return create_engine(url, connect_args=connect_args, **engine_kwargs)


engine = build_engine(
    str(settings.SQLALCHEMY_DATABASE_URI),
    timeout_seconds=settings.DB_TIMEOUT_SECONDS,
)
