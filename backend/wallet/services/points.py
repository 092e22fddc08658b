"""积分计算"""
from decimal import Decimal
from typing import Any


def calculate_points(total_price: Any, rate: Decimal) -> int:
    """
    按固定比例把订单金额换算为积分，结果向零截断

    无法解析、非有限、为负或换算溢出的金额一律按 0 处理，本函数不会抛出异常。

    示例：
        >>> calculate_points("10.00", Decimal("3"))
        30
        >>> calculate_points("9.99", Decimal("3"))
        29
    """
    try:
        amount = Decimal(str(total_price).strip())
        if not amount.is_finite() or amount <= 0:
            return 0
        return int(amount * rate)
    except (ArithmeticError, ValueError):
        return 0
