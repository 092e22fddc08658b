"""
积分入账

一次订单奖励在同一个数据库事务内完成：
账户 upsert -> 钱包获取/创建（行锁）-> 追加流水 -> 原子累加余额 -> 提交。
任何一步失败都整体回滚，读取方不会看到半条账。
"""
import logging
from dataclasses import dataclass

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from wallet.crud.accounts import get_or_create_wallet, upsert_by_customer_id
from wallet.enums import TransactionSource, TransactionType
from wallet.models import Account, Wallet, WalletTransaction, utc_now

logger = logging.getLogger(__name__)

ORDER_NOTE = "Points from order"


@dataclass
class LedgerResult:
    account: Account | None
    wallet: Wallet | None
    transaction: WalletTransaction | None
    duplicate: bool = False


def find_order_transaction(*, session: Session, order_id: str) -> WalletTransaction | None:
    """查询某个订单是否已经入账"""
    stmt = select(WalletTransaction).where(
        WalletTransaction.source == TransactionSource.order,
        WalletTransaction.shopify_order_id == order_id,
    )
    return session.exec(stmt).first()


def _duplicate(*, session: Session, existing: WalletTransaction) -> LedgerResult:
    wallet = session.get(Wallet, existing.wallet_id)
    account = session.get(Account, wallet.account_id) if wallet else None
    return LedgerResult(account=account, wallet=wallet, transaction=None, duplicate=True)


def _apply(
    *,
    session: Session,
    customer_id: str,
    email: str | None,
    name: str | None,
    order_id: str,
    points: int,
) -> LedgerResult:
    existing = find_order_transaction(session=session, order_id=order_id)
    if existing is not None:
        return _duplicate(session=session, existing=existing)

    account = upsert_by_customer_id(
        session=session, customer_id=customer_id, email=email, name=name
    )
    wallet = get_or_create_wallet(session=session, account_id=account.id)

    tx = WalletTransaction(
        wallet_id=wallet.id,
        type=TransactionType.earn,
        source=TransactionSource.order,
        shopify_order_id=order_id,
        points_change=points,
        note=ORDER_NOTE,
    )
    session.add(tx)
    session.flush()

    # Single-statement increment; the row lock from get_or_create_wallet
    # serializes concurrent awards for the same account.
    session.exec(
        update(Wallet)
        .where(Wallet.id == wallet.id)
        .values(
            points=Wallet.points + points,
            lifetime_points=Wallet.lifetime_points + points,
            updated_at=utc_now(),
        )
        .execution_options(synchronize_session=False)
    )
    session.commit()
    session.refresh(account)
    session.refresh(wallet)
    session.refresh(tx)
    return LedgerResult(account=account, wallet=wallet, transaction=tx)


def apply_order_award(
    *,
    session: Session,
    customer_id: str,
    email: str | None,
    name: str | None,
    order_id: str,
    points: int,
) -> LedgerResult:
    """
    把订单积分记入客户钱包，同一订单只入账一次

    并发重复投递时，后提交的一方会撞上 (source, shopify_order_id) 唯一约束，
    回滚后按重复处理。账户/钱包首次创建的并发冲突会重试一次。

    Raises:
        SQLAlchemyError: 数据库不可用、超时或重试后仍冲突
    """
    def attempt() -> LedgerResult:
        try:
            return _apply(
                session=session,
                customer_id=customer_id,
                email=email,
                name=name,
                order_id=order_id,
                points=points,
            )
        except Exception:
            session.rollback()
            raise

    try:
        return attempt()
    except IntegrityError:
        existing = find_order_transaction(session=session, order_id=order_id)
        if existing is not None:
            logger.info("order %s already applied by a concurrent delivery", order_id)
            return _duplicate(session=session, existing=existing)
        logger.warning("account/wallet creation raced for customer %s, retrying", customer_id)

    return attempt()
