# app/services/providers/openai.py
from typing import Any, Dict, Optional, Tuple

from app.services.providers.base import CaptionProvider


class OpenAIProvider(CaptionProvider):
    """OpenAI Chat Completions（gpt-4o 等支援圖片輸入的模型）"""

    name = "OpenAI"
    normal_stop_reason = "stop"

    @property
    def endpoint(self) -> str:
        return self.settings.OPENAI_ENDPOINT

    @property
    def model(self) -> str:
        return self.settings.OPENAI_MODEL

    def build_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.settings.OPENAI_API_KEY or ''}",
        }

    def build_payload(self, image_data: str, mime_type: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": self.settings.CAPTION_PROMPT},
                        {
                            "type": "image_url",
                            "image_url": {
                                "url": f"data:{mime_type};base64,{image_data}",
                                "detail": "high",
                            },
                        },
                    ],
                }
            ],
            "max_tokens": self.settings.MAX_TOKENS,
            "temperature": self.settings.TEMPERATURE,
        }

    def parse_completion(self, data: Dict[str, Any]) -> Tuple[Optional[str], Optional[str]]:
        choices = data.get("choices") or []
        if not choices or not isinstance(choices[0], dict):
            return None, None
        first = choices[0]
        message = first.get("message") or {}
        return message.get("content"), first.get("finish_reason")
