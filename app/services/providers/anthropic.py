# app/services/providers/anthropic.py
from typing import Any, Dict, Optional, Tuple

from app.services.providers.base import CaptionProvider


class AnthropicProvider(CaptionProvider):
    """Anthropic Messages API（content block 內嵌 base64 圖片）"""

    name = "Anthropic"
    normal_stop_reason = "end_turn"

    @property
    def endpoint(self) -> str:
        return self.settings.ANTHROPIC_ENDPOINT

    @property
    def model(self) -> str:
        return self.settings.ANTHROPIC_MODEL

    def build_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-api-key": self.settings.ANTHROPIC_API_KEY or "",
            "anthropic-version": self.settings.ANTHROPIC_VERSION,
        }

    def build_payload(self, image_data: str, mime_type: str) -> Dict[str, Any]:
        # Anthropic 只接受 image/jpeg
        media_type = "image/jpeg" if mime_type == "image/jpg" else mime_type
        return {
            "model": self.model,
            "max_tokens": self.settings.MAX_TOKENS,
            "temperature": self.settings.TEMPERATURE,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image",
                            "source": {"type": "base64", "media_type": media_type, "data": image_data},
                        },
                        {"type": "text", "text": self.settings.CAPTION_PROMPT},
                    ],
                }
            ],
        }

    def parse_completion(self, data: Dict[str, Any]) -> Tuple[Optional[str], Optional[str]]:
        blocks = data.get("content") or []
        text = next(
            (b.get("text") for b in blocks if isinstance(b, dict) and b.get("type") == "text"),
            None,
        )
        return text, data.get("stop_reason")
