"""
枚举类型定义模块

所有枚举都继承自 str 和 Enum，既可以用作字符串，又具有枚举的特性。
"""
from enum import Enum


class TransactionType(str, Enum):
    """
    积分流水方向

    - earn: 获得积分（订单奖励）
    - spend: 消费积分（本服务不产生）
    """
    earn = "earn"
    spend = "spend"


class TransactionSource(str, Enum):
    """
    积分流水来源

    - order: 订单支付完成
    """
    order = "order"


class WebhookOutcome(str, Enum):
    """
    webhook 处理结果

    - applied: 积分已入账
    - duplicate: 重复投递，已忽略（按成功处理）
    - no_customer: 订单没有客户信息，无需处理
    - unauthorized: 签名校验失败
    - failed: 处理失败（报文格式错误、数据库不可用或超时）
    """
    applied = "applied"
    duplicate = "duplicate"
    no_customer = "no_customer"
    unauthorized = "unauthorized"
    failed = "failed"
