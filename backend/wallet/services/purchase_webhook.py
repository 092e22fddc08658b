"""
订单支付 webhook 处理流程

签名校验 -> 报文解析 -> 积分计算 -> 入账。
每一步的结果都以 WebhookResult 返回，由路由层统一翻译为 HTTP 响应，
这里不向外抛出异常。
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from wallet import crud
from wallet.core.config import settings
from wallet.core.security import verify_webhook_signature
from wallet.enums import WebhookOutcome
from wallet.services.points import calculate_points
from wallet.services.purchase_events import (
    PurchasePayloadError,
    normalize_purchase_event,
)

logger = logging.getLogger(__name__)


@dataclass
class WebhookResult:
    outcome: WebhookOutcome
    detail: str = ""
    ledger: crud.LedgerResult | None = None
    points: int = 0


class PurchaseWebhookService:
    """订单支付 webhook 服务"""

    def __init__(self, webhook_secret: str | None, points_rate: Decimal):
        """
        Args:
            webhook_secret: Webhook 签名共享密钥，未配置时所有请求都会被拒绝
            points_rate: 每 1 单位货币换算的积分
        """
        if not webhook_secret:
            logger.warning("Webhook secret not configured, every delivery will be rejected")
        self.webhook_secret = webhook_secret
        self.points_rate = points_rate

    def handle(
        self, *, session: Session, raw_body: bytes, signature: str | None
    ) -> WebhookResult:
        """
        处理一次订单支付投递

        Args:
            session: 数据库会话
            raw_body: 原始请求体（未经解析）
            signature: 请求头中的 base64 HMAC-SHA256 签名

        Returns:
            WebhookResult: 处理结果
        """
        if not verify_webhook_signature(raw_body, signature, self.webhook_secret):
            logger.warning("Rejected webhook with invalid signature")
            return WebhookResult(WebhookOutcome.unauthorized, "invalid signature")

        try:
            return self._award(session=session, raw_body=raw_body)
        except Exception as e:
            session.rollback()
            logger.exception("Unexpected failure while processing order webhook")
            return WebhookResult(WebhookOutcome.failed, str(e))

    def _award(self, *, session: Session, raw_body: bytes) -> WebhookResult:
        try:
            event = normalize_purchase_event(raw_body)
        except PurchasePayloadError as e:
            logger.exception("Failed to parse order payload")
            return WebhookResult(WebhookOutcome.failed, str(e))

        if event is None:
            logger.info("Order without customer, nothing to award")
            return WebhookResult(WebhookOutcome.no_customer)

        points = calculate_points(event.total_price, self.points_rate)
        logger.info(
            "Order paid: %s | %s | +%s points", event.order_id, event.total_price, points
        )

        try:
            ledger = crud.apply_order_award(
                session=session,
                customer_id=event.customer_id,
                email=event.email,
                name=event.name,
                order_id=event.order_id,
                points=points,
            )
        except SQLAlchemyError as e:
            logger.exception("Failed to apply points for order %s", event.order_id)
            return WebhookResult(WebhookOutcome.failed, str(e), points=points)

        if ledger.duplicate:
            logger.info("Order %s already applied, ignoring redelivery", event.order_id)
            return WebhookResult(WebhookOutcome.duplicate, ledger=ledger, points=0)
        return WebhookResult(WebhookOutcome.applied, ledger=ledger, points=points)


def get_purchase_webhook_service() -> PurchaseWebhookService:
    """根据全局配置构建 webhook 服务（FastAPI 依赖，测试中可覆盖）"""
    return PurchaseWebhookService(
        webhook_secret=settings.WEBHOOK_SECRET,
        points_rate=settings.POINTS_PER_CURRENCY_UNIT,
    )
