# tests/helpers.py
import base64

import httpx

from app.core.config import Settings

APP_TOKEN = "123e4567-e89b-12d3-a456-426614174000"

# 300 bytes -> 400 個 base64 字元，超過最小門檻
VALID_IMAGE_B64 = base64.b64encode(b"\xff\xd8\xff\xe0" + bytes(296)).decode()


def openai_completion(content="A golden retriever on a beach", finish_reason="stop", usage=None):
    return {
        "id": "chatcmpl-test",
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": finish_reason}
        ],
        "usage": usage,
    }


def make_settings(**overrides) -> Settings:
    base = dict(
        ENV="test",
        APP_TOKEN=APP_TOKEN,
        OPENAI_API_KEY="sk-test",
        ANTHROPIC_API_KEY="sk-ant-test",
        REQUEST_TIMEOUT_SEC=5,
    )
    base.update(overrides)
    return Settings(_env_file=None, **base)


class FakeUpstream:
    """記錄送出的請求，回傳預先設定的回應（httpx.MockTransport handler）"""

    def __init__(self):
        self.requests = []
        self.handler = lambda request: httpx.Response(200, json=openai_completion())

    def __call__(self, request: httpx.Request):
        self.requests.append(request)
        return self.handler(request)
