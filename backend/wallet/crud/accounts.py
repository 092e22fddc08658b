"""账户 CRUD 操作"""
from sqlmodel import Session, col, select

from wallet.models import Account, Wallet, utc_now


def get_by_customer_id(*, session: Session, customer_id: str) -> Account | None:
    """根据 Shopify 客户 ID 查询账户"""
    statement = select(Account).where(Account.shopify_customer_id == customer_id)
    return session.exec(statement).first()


def get_by_email(*, session: Session, email: str) -> Account | None:
    """根据邮箱查询账户，多个账户共用邮箱时取最近更新的一个"""
    statement = (
        select(Account)
        .where(Account.email == email)
        .order_by(col(Account.updated_at).desc(), col(Account.id).desc())
    )
    return session.exec(statement).first()


def upsert_by_customer_id(
    *, session: Session, customer_id: str, email: str | None, name: str | None
) -> Account:
    """
    获取或创建账户，已存在时刷新邮箱和姓名

    只 flush 不 commit，由调用方统一提交。
    """
    account = get_by_customer_id(session=session, customer_id=customer_id)
    if account is None:
        account = Account(shopify_customer_id=customer_id, email=email, name=name)
    else:
        account.email = email
        account.name = name
        account.updated_at = utc_now()
    session.add(account)
    session.flush()
    return account


def get_wallet(
    *, session: Session, account_id: int, for_update: bool = False
) -> Wallet | None:
    """查询账户的积分钱包"""
    stmt = select(Wallet).where(Wallet.account_id == account_id)
    if for_update:
        stmt = stmt.with_for_update()
    return session.exec(stmt).first()


def get_or_create_wallet(*, session: Session, account_id: int) -> Wallet:
    """获取（加行锁）或创建积分钱包，只 flush 不 commit"""
    wallet = get_wallet(session=session, account_id=account_id, for_update=True)
    if wallet is None:
        wallet = Wallet(account_id=account_id, points=0, lifetime_points=0)
        session.add(wallet)
        session.flush()
    return wallet
