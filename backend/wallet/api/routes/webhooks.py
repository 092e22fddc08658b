"""
Webhook 路由模块

接收 Shopify 订单支付事件并发放积分。
响应为纯文本，状态码由 WebhookOutcome 唯一决定：
- 401 "Invalid signature": 签名校验失败
- 200 "No customer": 订单没有客户信息
- 200 "OK": 已入账，或重复投递
- 500 "Server error": 处理失败
"""
from fastapi import APIRouter, Header
from fastapi.responses import PlainTextResponse

from wallet.api.deps import PurchaseWebhookDep, RawBodyDep, SessionDep
from wallet.enums import WebhookOutcome

router = APIRouter(tags=["webhooks"])

OUTCOME_RESPONSES: dict[WebhookOutcome, tuple[int, str]] = {
    WebhookOutcome.applied: (200, "OK"),
    WebhookOutcome.duplicate: (200, "OK"),
    WebhookOutcome.no_customer: (200, "No customer"),
    WebhookOutcome.unauthorized: (401, "Invalid signature"),
    WebhookOutcome.failed: (500, "Server error"),
}


@router.post("/events/purchase-completed", response_class=PlainTextResponse)
@router.post(
    "/shopify/orders-paid", response_class=PlainTextResponse, include_in_schema=False
)
def purchase_completed(
    session: SessionDep,
    service: PurchaseWebhookDep,
    raw_body: RawBodyDep,
    x_signature: str | None = Header(default=None, alias="X-Signature"),
    x_shopify_hmac_sha256: str | None = Header(
        default=None, alias="X-Shopify-Hmac-Sha256"
    ),
) -> PlainTextResponse:
    """
    订单支付完成 webhook

    请求路径: POST /events/purchase-completed
    （旧路径 POST /shopify/orders-paid 仍然可用）
    """
    result = service.handle(
        session=session,
        raw_body=raw_body,
        signature=x_signature or x_shopify_hmac_sha256,
    )
    status_code, text = OUTCOME_RESPONSES[result.outcome]
    return PlainTextResponse(text, status_code=status_code)
