"""
应用配置模块

使用 Pydantic Settings 管理所有环境变量和配置。
配置从项目根目录的 .env 文件读取，支持类型验证和默认值。

注意：核心业务函数不直接读取 settings，
只有工厂函数（数据库引擎、webhook 服务依赖）在进程启动时读取。
"""
import warnings
from decimal import Decimal
from typing import Annotated, Any, Literal

from pydantic import (
    AnyUrl,
    BeforeValidator,
    HttpUrl,
    PostgresDsn,
    computed_field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Self


def parse_cors(v: Any) -> list[str] | str:
    """
    解析 CORS 配置值

    支持两种格式：
    1. 逗号分隔的字符串："https://thcomalaysia.com,http://localhost:3000"
    2. 列表格式：["https://thcomalaysia.com"]

    Raises:
        ValueError: 当输入格式不正确时
    """
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",") if i.strip()]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    """
    应用配置类

    配置来源优先级：
    1. 环境变量（最高优先级）
    2. .env 文件
    3. 代码中的默认值（最低优先级）
    """
    model_config = SettingsConfigDict(
        env_file="../.env",
        env_ignore_empty=True,
        extra="ignore",
    )
    PROJECT_NAME: str = "THCO Wallet API"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"
    SENTRY_DSN: HttpUrl | None = None

    # 只读接口的跨域白名单（店铺域名）
    BACKEND_CORS_ORIGINS: Annotated[
        list[AnyUrl] | str, BeforeValidator(parse_cors)
    ] = []

    @computed_field  # type: ignore[prop-decorator]
    @property
    def all_cors_origins(self) -> list[str]:
        """CORS 允许的源列表（去除尾部斜杠）"""
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS]

    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = ""

    # 数据库连接、单条语句、连接池等待的统一超时（秒）
    DB_TIMEOUT_SECONDS: int = 10

    @computed_field  # type: ignore[prop-decorator]
    @property
    def SQLALCHEMY_DATABASE_URI(self) -> PostgresDsn:
        return PostgresDsn.build(
            scheme="postgresql+psycopg",
            username=self.POSTGRES_USER,
            password=self.POSTGRES_PASSWORD,
            host=self.POSTGRES_SERVER,
            port=self.POSTGRES_PORT,
            path=self.POSTGRES_DB,
        )

    # Shopify webhook 共享密钥（用于 HMAC-SHA256 签名校验）
    WEBHOOK_SECRET: str | None = None
    # 积分换算比例：每 1 单位货币（RM1）获得的积分
    POINTS_PER_CURRENCY_UNIT: Decimal = Decimal("3")

    @field_validator("POINTS_PER_CURRENCY_UNIT")
    @classmethod
    def _non_negative_rate(cls, v: Decimal) -> Decimal:
        if not v.is_finite() or v < 0:
            raise ValueError("POINTS_PER_CURRENCY_UNIT must be a non-negative number")
        return v

    def _check_default_secret(self, var_name: str, value: str | None) -> None:
        """
        检查敏感配置是否使用了默认值

        本地环境只警告，其他环境直接报错。
        """
        if value == "changethis":
            message = (
                f'The value of {var_name} is "changethis", '
                "for security, please change it, at least for deployments."
            )
            if self.ENVIRONMENT == "local":
                warnings.warn(message, stacklevel=1)
            else:
                raise ValueError(message)

    @model_validator(mode="after")
    def _enforce_non_default_secrets(self) -> Self:
        """
        模型验证器：确保敏感配置不使用默认值

        非本地环境必须配置 WEBHOOK_SECRET，否则所有 webhook 都会被拒绝。
        """
        self._check_default_secret("POSTGRES_PASSWORD", self.POSTGRES_PASSWORD)
        self._check_default_secret("WEBHOOK_SECRET", self.WEBHOOK_SECRET)
        if not self.WEBHOOK_SECRET and self.ENVIRONMENT != "local":
            raise ValueError("WEBHOOK_SECRET must be set outside the local environment")

        return self


# 创建全局配置实例，整个应用共享
settings = Settings()  # type: ignore
