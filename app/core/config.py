# app/core/config.py
from __future__ import annotations

import os
from functools import lru_cache
from typing import Any, List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # === App Info ===
    APP_NAME: str = "Caption API"
    API_V1_PREFIX: str = "/api/v1"
    ENV: str = os.getenv("ENV", "dev")
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # === Auth（靜態共享金鑰，UUID 格式）===
    APP_TOKEN: Optional[str] = None

    # === AI Provider ===
    AI_PROVIDER: str = "openai"
    MAX_TOKENS: int = 300
    TEMPERATURE: float = 0.7
    REQUEST_TIMEOUT_SEC: float = 30.0
    CAPTION_PROMPT: str = (
        "if this is a picture of a dog respond with the words bark bark, "
        "if it is not respond with this is not a dog"
    )

    OPENAI_API_KEY: Optional[str] = None
    OPENAI_ENDPOINT: str = "https://api.openai.com/v1/chat/completions"
    OPENAI_MODEL: str = "gpt-4o"

    ANTHROPIC_API_KEY: Optional[str] = None
    ANTHROPIC_ENDPOINT: str = "https://api.anthropic.com/v1/messages"
    ANTHROPIC_MODEL: str = "claude-3-5-sonnet-latest"
    ANTHROPIC_VERSION: str = "2023-06-01"

    # === Image limits ===
    MAX_IMAGE_SIZE: int = 20 * 1024 * 1024
    MIN_IMAGE_SIZE: int = 100
    ALLOWED_IMAGE_TYPES: List[str] = [
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/webp",
    ]

    # 用戶端 debugMode 會略過驗證；正式環境必須關閉
    ALLOW_CLIENT_DEBUG_MODE: bool = True

    @field_validator("ALLOWED_IMAGE_TYPES", mode="before")
    @classmethod
    def _parse_types(cls, v: Any) -> List[str]:
        if isinstance(v, str):
            s = v.strip()
            if s.startswith("["):
                import json
                return [x.strip() for x in json.loads(s)]
            return [x.strip() for x in s.split(",") if x.strip()]
        return v

    @field_validator("AI_PROVIDER", mode="before")
    @classmethod
    def _normalize_provider(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    # === Observability（Sentry / Monitoring） ===
    SENTRY_DSN: Optional[str] = None
    SENTRY_ENV: str = os.getenv("SENTRY_ENV", "dev")
    SENTRY_TRACES_SAMPLE_RATE: float = 0.1

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        # pydantic-settings 會把 List 欄位當 JSON 解析，這裡交給 validator 處理逗號格式
        enable_decoding=False,
    )

    def provider_api_key(self) -> Optional[str]:
        """目前選用 provider 的 API key（未知 provider 回傳 None）"""
        return {
            "openai": self.OPENAI_API_KEY,
            "anthropic": self.ANTHROPIC_API_KEY,
        }.get(self.AI_PROVIDER)


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
