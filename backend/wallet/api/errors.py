"""
自定义异常模块

JSON 接口的业务异常都继承自 AppError，在 main.py 中有统一的异常处理器。
webhook 接口不走这里，它的结果由 WebhookOutcome 直接翻译为响应。
"""
from __future__ import annotations


class AppError(Exception):
    """
    应用自定义异常类

    - code: 业务错误码（用于前端区分不同错误）
    - message: 错误消息
    - status_code: HTTP 状态码

    使用示例：
        raise AppError(code=400001, message="email is required", status_code=400)
    """

    def __init__(self, *, code: int, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code


def email_required() -> AppError:
    """创建"缺少 email 参数"异常"""
    return AppError(code=400001, message="email is required", status_code=400)


def wallet_lookup_failed() -> AppError:
    """创建"钱包查询失败"异常"""
    return AppError(code=500001, message="Wallet lookup failed", status_code=500)
