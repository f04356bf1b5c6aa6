# tests/conftest.py
import os

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# ---- 測試期環境變數（先於 app 載入）----
os.environ.setdefault("ENV", "test")
os.environ.setdefault("APP_TOKEN", "123e4567-e89b-12d3-a456-426614174000")
os.environ.setdefault("OPENAI_API_KEY", "sk-test")

from app.main import app  # noqa: E402
from helpers import APP_TOKEN, FakeUpstream, make_settings  # noqa: E402


@pytest.fixture
def settings(monkeypatch):
    """每個測試換一份 Settings（app 從 app.state 讀取）"""
    s = make_settings()
    monkeypatch.setattr(app.state, "settings", s)
    return s


@pytest.fixture
def upstream(monkeypatch):
    fake = FakeUpstream()
    monkeypatch.setattr(app.state, "provider_transport", httpx.MockTransport(fake))
    return fake


@pytest_asyncio.fixture
async def client(settings, upstream):
    """使用 ASGITransport 直接掛載 app，不需啟動伺服器。"""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def auth_headers():
    return {"X-App-Token": APP_TOKEN, "Content-Type": "application/json"}
