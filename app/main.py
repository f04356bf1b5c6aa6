# app/main.py
from typing import Optional

import httpx
import sentry_sdk
from fastapi import FastAPI
from loguru import logger
from prometheus_fastapi_instrumentator import Instrumentator

from app.core.config import Settings, get_settings
from app.core.errors import register_error_handlers
from app.core.logging import setup_logging
from app.core.security import is_uuid_shaped
from app.api.v1.router import api_router
from app.api.v1.endpoints.caption import router as caption_router
from app.services.providers.registry import PROVIDERS


def _validate_secrets(settings: Settings) -> None:
    """
    部署前安全檢查：prod/staging/preview 環境不允許缺少金鑰或開著 debug 旁路。
    """
    env = (settings.ENV or "").lower()
    if env in {"prod", "production", "staging", "preview"}:
        problems = []
        if not is_uuid_shaped(settings.APP_TOKEN):
            problems.append("APP_TOKEN (missing or not UUID-shaped)")
        if settings.AI_PROVIDER not in PROVIDERS:
            problems.append(f"AI_PROVIDER (unknown provider '{settings.AI_PROVIDER}')")
        elif not settings.provider_api_key():
            problems.append(f"API key for AI_PROVIDER={settings.AI_PROVIDER}")
        if settings.ALLOW_CLIENT_DEBUG_MODE:
            problems.append("ALLOW_CLIENT_DEBUG_MODE (must be false)")
        if problems:
            raise RuntimeError(
                f"Insecure config for {', '.join(problems)} in ENV={settings.ENV}. "
                "Please fix via environment variables."
            )


def create_app(
    settings: Optional[Settings] = None,
    provider_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)

    # 基本安全檢查
    _validate_secrets(settings)

    app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG)
    app.state.settings = settings
    app.state.provider_transport = provider_transport

    # ---- Sentry 初始化（未設定 SENTRY_DSN 就略過）----
    if settings.SENTRY_DSN:
        sentry_sdk.init(
            dsn=settings.SENTRY_DSN,
            traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
            environment=settings.SENTRY_ENV or settings.ENV,
        )

    # ---- Prometheus /metrics ----
    Instrumentator().instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)

    # 統一錯誤處理 + CORS / 安全 header
    register_error_handlers(app)

    # === API 路由 ===
    app.include_router(caption_router, tags=["caption"])
    # 舊部署的路徑（/api/generateCaption）
    app.include_router(caption_router, prefix="/api", include_in_schema=False)
    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    # 健康檢查（root & ops）
    @app.get("/", summary="Root")
    async def root():
        return {"app": settings.APP_NAME, "env": settings.ENV}

    @app.get("/healthz", tags=["ops"])
    async def healthz():
        return {"ok": True}

    @app.get("/readyz", tags=["ops"])
    async def readyz():
        return {"ready": True, "provider": settings.AI_PROVIDER}

    logger.info("Application initialized (env={}, provider={})", settings.ENV, settings.AI_PROVIDER)
    return app


# Uvicorn 進入點：uvicorn app.main:app
app = create_app()
