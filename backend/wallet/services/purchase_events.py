"""
订单事件解析

把已通过签名校验的 Shopify 订单报文解析为统一的 PurchaseEvent。
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any


class PurchasePayloadError(ValueError):
    """订单报文格式错误（非 JSON、不是对象、缺少订单号）"""


@dataclass(frozen=True)
class PurchaseEvent:
    order_id: str
    customer_id: str
    email: str | None
    first_name: str | None
    last_name: str | None
    total_price: str

    @property
    def name(self) -> str | None:
        """显示名称："名 姓"，两者都为空时返回 None"""
        full = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return full or None


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def normalize_purchase_event(raw_body: bytes) -> PurchaseEvent | None:
    """
    解析订单报文

    Args:
        raw_body: 原始请求体

    Returns:
        PurchaseEvent；报文中没有客户身份时返回 None（无需发放积分）

    Raises:
        PurchasePayloadError: 报文无法解析，或缺少订单号
    """
    try:
        order = json.loads(raw_body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
        raise PurchasePayloadError(f"Malformed order payload: {e}") from e
    if not isinstance(order, dict):
        raise PurchasePayloadError("Order payload must be a JSON object")

    customer = order.get("customer")
    if not isinstance(customer, dict):
        return None
    customer_id = _optional_str(customer.get("id"))
    if customer_id is None:
        return None

    order_id = _optional_str(order.get("id"))
    if order_id is None:
        raise PurchasePayloadError("Order payload is missing its id")

    total_price = order.get("total_price")
    return PurchaseEvent(
        order_id=order_id,
        customer_id=customer_id,
        email=_optional_str(customer.get("email")),
        first_name=_optional_str(customer.get("first_name")),
        last_name=_optional_str(customer.get("last_name")),
        total_price="0" if total_price is None else str(total_price),
    )
