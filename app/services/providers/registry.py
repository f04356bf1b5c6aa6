# app/services/providers/registry.py
from typing import Dict, Optional, Type

import httpx

from app.core.config import Settings
from app.core.errors import InternalError
from app.services.providers.anthropic import AnthropicProvider
from app.services.providers.base import CaptionProvider
from app.services.providers.openai import OpenAIProvider

# AI_PROVIDER -> provider 類別
PROVIDERS: Dict[str, Type[CaptionProvider]] = {
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
}


def get_provider(settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> CaptionProvider:
    provider_cls = PROVIDERS.get(settings.AI_PROVIDER)
    if provider_cls is None:
        raise InternalError(details=f"AI provider '{settings.AI_PROVIDER}' not found")
    return provider_cls(settings, transport=transport)
