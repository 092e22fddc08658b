"""
FastAPI 依赖注入模块

提供可复用的依赖项，用于路由处理函数中。
测试中通过 app.dependency_overrides 替换数据库会话和 webhook 服务。
"""
from collections.abc import Generator
from typing import Annotated

from fastapi import Depends, Request
from sqlmodel import Session

from wallet.core.db import engine
from wallet.services.purchase_webhook import (
    PurchaseWebhookService,
    get_purchase_webhook_service,
)


def get_db() -> Generator[Session, None, None]:
    """
    获取数据库会话（依赖注入）

    使用 yield 确保会话在请求结束后自动关闭，未提交的事务会被回滚。

    Yields:
        Session: 数据库会话对象
    """
    with Session(engine) as session:
        yield session


async def get_raw_body(request: Request) -> bytes:
    """
    读取未经解析的原始请求体

    签名校验必须基于原始字节，不能使用 FastAPI 解析后的 JSON。
    """
    return await request.body()


SessionDep = Annotated[Session, Depends(get_db)]
RawBodyDep = Annotated[bytes, Depends(get_raw_body)]
PurchaseWebhookDep = Annotated[
    PurchaseWebhookService, Depends(get_purchase_webhook_service)
]
