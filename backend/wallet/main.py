"""
FastAPI 应用主入口

这是应用的启动文件，负责：
1. 创建 FastAPI 应用实例
2. 配置日志、Sentry 和 CORS
3. 注册全局异常处理器
4. 注册路由

运行方式：
    uvicorn wallet.main:app --reload  # 开发模式
"""
import logging

import sentry_sdk
from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute

from wallet.api.errors import AppError
from wallet.api.main import api_router
from wallet.api.schemas import ErrorResponse
from wallet.core.config import settings

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


def custom_generate_unique_id(route: APIRoute) -> str:
    """
    自定义 OpenAPI 操作 ID 生成函数

    格式：{tag}-{route_name}，例如 "wallet-by_email"
    """
    return f"{route.tags[0]}-{route.name}"


if settings.SENTRY_DSN and settings.ENVIRONMENT != "local":  # pragma: no cover
    sentry_sdk.init(dsn=str(settings.SENTRY_DSN), enable_tracing=True)

app = FastAPI(
    title=settings.PROJECT_NAME,
    generate_unique_id_function=custom_generate_unique_id,
)


def _error(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@app.exception_handler(AppError)
async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    """
    应用自定义异常处理器

    返回 {"success": false, "message": ..., "code": ...}
    """
    return _error(exc.status_code, ErrorResponse(message=exc.message, code=exc.code))


@app.exception_handler(HTTPException)
async def http_error_handler(_: Request, exc: HTTPException) -> JSONResponse:
    """
    HTTP 异常处理器

    detail 为字符串时直接作为 message，错误码为 状态码 * 1000。
    """
    if isinstance(exc.detail, dict) and {"code", "message"} <= set(exc.detail.keys()):
        body = ErrorResponse(message=str(exc.detail["message"]), code=exc.detail["code"])
    else:
        body = ErrorResponse(message=str(exc.detail), code=exc.status_code * 1000)
    return _error(exc.status_code, body)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    """
    请求验证错误处理器

    返回 422 和详细的验证错误列表。
    """
    body = ErrorResponse(
        message="Validation error", code=422000, errors=jsonable_encoder(exc.errors())
    )
    return _error(422, body)


# 只读接口允许店铺域名跨域访问
if settings.all_cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.all_cors_origins,
        allow_credentials=False,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

app.include_router(api_router)
