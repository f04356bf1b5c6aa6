# app/services/providers/base.py
from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

import httpx
from loguru import logger

from app.core.config import Settings
from app.core.errors import ProviderTimeoutError, ProviderUpstreamError
from app.schemas.caption import ProviderResult
from app.services.validation import clean_base64


class CaptionProvider(ABC):
    """
    視覺 LLM provider 的共同流程：
      1️⃣ 清掉 base64 空白並組 payload
      2️⃣ 在 REQUEST_TIMEOUT_SEC 內完成一次 POST（不重試）
      3️⃣ 非 2xx -> ProviderUpstreamError；逾時 -> ProviderTimeoutError
      4️⃣ 取第一個回覆文字，並由 stop reason 推出 confidence
    """

    name: str = ""
    normal_stop_reason: str = ""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        # 測試時可注入 httpx.MockTransport
        self.transport = transport

    # --- 子類實作 ---
    @property
    @abstractmethod
    def endpoint(self) -> str: ...

    @property
    @abstractmethod
    def model(self) -> str: ...

    @abstractmethod
    def build_headers(self) -> Dict[str, str]: ...

    @abstractmethod
    def build_payload(self, image_data: str, mime_type: str) -> Dict[str, Any]: ...

    @abstractmethod
    def parse_completion(self, data: Dict[str, Any]) -> Tuple[Optional[str], Optional[str]]:
        """回傳 (caption 原文, stop reason)"""

    # --- 共用流程 ---
    async def generate_caption(self, image_data: str, mime_type: str) -> ProviderResult:
        cleaned = clean_base64(image_data or "")
        payload = self.build_payload(cleaned, mime_type)
        timeout = self.settings.REQUEST_TIMEOUT_SEC

        try:
            response = await asyncio.wait_for(self._post(payload), timeout=timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.warning("{} request timed out after {}s", self.name, timeout)
            raise ProviderTimeoutError(
                f"Request timeout: {self.name} API took too long to respond"
            ) from e
        except httpx.HTTPError as e:
            raise ProviderUpstreamError(f"{self.name} processing failed: {e}") from e

        if not response.is_success:
            raise ProviderUpstreamError(
                f"{self.name} API error: {response.status_code} - {self._upstream_message(response)}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderUpstreamError(f"{self.name} processing failed: invalid JSON response") from e
        if not isinstance(data, dict):
            data = {}

        text, stop_reason = self.parse_completion(data)
        caption = text.strip() if isinstance(text, str) else ""
        if not caption:
            raise ProviderUpstreamError(f"No caption generated by {self.name}")

        usage = data.get("usage")
        return ProviderResult(
            caption=caption,
            provider=self.name,
            model=self.model,
            confidence="high" if stop_reason == self.normal_stop_reason else "medium",
            usage=usage if isinstance(usage, dict) else None,
        )

    async def _post(self, payload: Dict[str, Any]) -> httpx.Response:
        # 每次請求各自建立連線，不共用連線池
        async with httpx.AsyncClient(transport=self.transport) as client:
            return await client.post(
                self.endpoint,
                json=payload,
                headers=self.build_headers(),
                timeout=self.settings.REQUEST_TIMEOUT_SEC,
            )

    @staticmethod
    def _upstream_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = {}
        error = body.get("error") if isinstance(body, dict) else None
        message = error.get("message") if isinstance(error, dict) else None
        return message or "Unknown error"
