"""
应用启动前检查脚本

在应用启动（和执行 Alembic 迁移）之前等待数据库可用。
Docker Compose 启动时数据库容器可能还在初始化，这里通过重试避免启动失败。

运行方式：
    python -m wallet.backend_pre_start
"""
import logging

from sqlalchemy import Engine
from sqlmodel import Session, select
from tenacity import after_log, before_log, retry, stop_after_attempt, wait_fixed

from wallet.core.db import engine

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

max_tries = 60 * 5  # 5 分钟
wait_seconds = 1


@retry(
    stop=stop_after_attempt(max_tries),
    wait=wait_fixed(wait_seconds),
    before=before_log(logger, logging.INFO),
    after=after_log(logger, logging.WARN),
)
def init(db_engine: Engine) -> None:
    """
    执行 select(1) 检查数据库连接

    失败时抛出异常，由 tenacity 重试，最多重试 5 分钟。
    """
    try:
        with Session(db_engine) as session:
            session.exec(select(1))
    except Exception as e:
        logger.error(e)
        raise e


def main() -> None:
    logger.info("Waiting for the wallet database")
    init(engine)
    logger.info("Wallet database is ready")


if __name__ == "__main__":  # pragma: no cover
    main()
