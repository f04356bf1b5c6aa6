# app/api/v1/router.py
from fastapi import APIRouter

from .endpoints import health

# === API v1 主路由 ===
api_router = APIRouter()

# 系統健康檢查
api_router.include_router(health.router, prefix="/health", tags=["health"])
