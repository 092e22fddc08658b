"""
API 路由聚合模块

- webhooks: Shopify 订单支付 webhook
- wallet: 积分余额与流水查询
- utils: 健康检查
"""
from fastapi import APIRouter

from wallet.api.routes import utils, wallet, webhooks

api_router = APIRouter()

api_router.include_router(webhooks.router)  # /events/*, /shopify/*
api_router.include_router(wallet.router)  # /wallet/*
api_router.include_router(utils.router)  # /utils/*
