# tests/test_config.py
import pytest

from app.core.config import Settings
from app.core.errors import InternalError
from app.main import _validate_secrets, create_app
from app.services.providers.anthropic import AnthropicProvider
from app.services.providers.openai import OpenAIProvider
from app.services.providers.registry import get_provider
from helpers import APP_TOKEN, make_settings


def test_defaults():
    s = make_settings()
    assert s.AI_PROVIDER == "openai"
    assert s.MAX_IMAGE_SIZE == 20 * 1024 * 1024
    assert s.MIN_IMAGE_SIZE == 100
    assert s.ALLOWED_IMAGE_TYPES == ["image/jpeg", "image/jpg", "image/png", "image/webp"]
    assert Settings(_env_file=None).REQUEST_TIMEOUT_SEC == 30


def test_allowed_types_from_comma_env(monkeypatch):
    monkeypatch.setenv("ALLOWED_IMAGE_TYPES", "image/png, image/gif")
    assert Settings(_env_file=None).ALLOWED_IMAGE_TYPES == ["image/png", "image/gif"]


def test_allowed_types_from_json_env(monkeypatch):
    monkeypatch.setenv("ALLOWED_IMAGE_TYPES", '["image/png", "image/heic"]')
    assert Settings(_env_file=None).ALLOWED_IMAGE_TYPES == ["image/png", "image/heic"]


def test_provider_api_key_follows_selection():
    assert make_settings().provider_api_key() == "sk-test"
    assert make_settings(AI_PROVIDER="anthropic").provider_api_key() == "sk-ant-test"
    assert make_settings(AI_PROVIDER="other").provider_api_key() is None


def test_registry_selects_provider_by_setting():
    assert isinstance(get_provider(make_settings(AI_PROVIDER="openai")), OpenAIProvider)
    assert isinstance(get_provider(make_settings(AI_PROVIDER="Anthropic")), AnthropicProvider)


def test_registry_unknown_provider():
    with pytest.raises(InternalError) as ei:
        get_provider(make_settings(AI_PROVIDER="gemini"))
    assert ei.value.details == "AI provider 'gemini' not found"


def test_secret_checks_skipped_outside_prod():
    _validate_secrets(make_settings(APP_TOKEN=None, OPENAI_API_KEY=None))


def test_production_requires_hardened_config():
    s = make_settings(ENV="production", APP_TOKEN="short", OPENAI_API_KEY=None)
    with pytest.raises(RuntimeError) as ei:
        create_app(s)
    msg = str(ei.value)
    assert "APP_TOKEN" in msg
    assert "API key for AI_PROVIDER=openai" in msg
    assert "ALLOW_CLIENT_DEBUG_MODE" in msg


def test_production_rejects_unknown_provider():
    s = make_settings(ENV="prod", AI_PROVIDER="gemini", ALLOW_CLIENT_DEBUG_MODE=False)
    with pytest.raises(RuntimeError, match="unknown provider 'gemini'"):
        _validate_secrets(s)


def test_production_accepts_hardened_config():
    _validate_secrets(make_settings(ENV="prod", APP_TOKEN=APP_TOKEN, ALLOW_CLIENT_DEBUG_MODE=False))
