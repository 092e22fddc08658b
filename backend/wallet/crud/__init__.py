"""CRUD 操作模块"""
from .accounts import (
    get_by_email as get_account_by_email,
)
from .accounts import (
    get_or_create_wallet,
    get_wallet,
)
from .accounts import (
    upsert_by_customer_id as upsert_account,
)
from .ledger import LedgerResult, apply_order_award, find_order_transaction

__all__ = [
    "get_account_by_email",
    "get_wallet",
    "get_or_create_wallet",
    "upsert_account",
    "LedgerResult",
    "apply_order_award",
    "find_order_transaction",
]
