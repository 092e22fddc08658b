"""
Webhook 签名校验

Shopify 在请求头中携带原始请求体的 base64(HMAC-SHA256) 签名。
校验必须基于原始字节流（JSON 解析之前），重新序列化后的 JSON 会得到不同的摘要。
"""
import base64
import hashlib
import hmac

SIGNATURE_HEADER = "X-Signature"
# Shopify 原生头部，X-Signature 缺失时兼容
LEGACY_SIGNATURE_HEADER = "X-Shopify-Hmac-Sha256"


def sign_webhook_body(raw_body: bytes, secret: str) -> str:
    """计算请求体的 base64 编码 HMAC-SHA256 签名"""
    digest = hmac.new(secret.encode(), raw_body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode()


def verify_webhook_signature(
    raw_body: bytes, signature: str | None, secret: str | None
) -> bool:
    """
    校验 webhook 签名

    Args:
        raw_body: 未经修改的原始请求体
        signature: 请求头中的签名值
        secret: 共享密钥

    Returns:
        签名是否有效。缺少签名或密钥时一律返回 False。
    """
    if not signature or not secret:
        return False
    expected = sign_webhook_body(raw_body, secret)
    return hmac.compare_digest(expected.encode(), signature.strip().encode())
