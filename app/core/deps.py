# app/core/deps.py
from typing import Optional

import httpx
from fastapi import Request

from app.core.config import Settings


def get_app_settings(request: Request) -> Settings:
    """create_app() 傳入的 Settings（測試可注入假金鑰）"""
    return request.app.state.settings


def get_provider_transport(request: Request) -> Optional[httpx.AsyncBaseTransport]:
    """測試用：create_app(provider_transport=httpx.MockTransport(...))"""
    return getattr(request.app.state, "provider_transport", None)
