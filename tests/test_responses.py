# tests/test_responses.py
import re

from app.core.errors import (
    AuthenticationError,
    InternalError,
    MethodNotAllowedError,
    ProviderTimeoutError,
    RequestValidationFailed,
)
from app.schemas.caption import ProviderResult
from app.services.responses import build_success_response, new_request_id


def test_request_ids_are_distinct():
    ids = {new_request_id() for _ in range(1000)}
    assert len(ids) == 1000
    assert all(re.fullmatch(r"req_\d{13}_[0-9a-f]{32}", i) for i in ids)


def test_success_envelope_shape():
    result = ProviderResult(caption="bark bark", provider="OpenAI", model="gpt-4o", confidence="high")
    out = build_success_response(
        result, request_id="req_1_abc", processing_ms=42,
        image_data="QUJD\nRA==", mime_type="image/png", provider_id="openai",
    )
    assert out["success"] is True
    assert out["data"] == {
        "caption": "bark bark", "provider": "OpenAI", "model": "gpt-4o", "confidence": "high",
        "usage": None, "processingTime": "42ms", "requestId": "req_1_abc",
    }
    meta = out["metadata"]
    assert meta["provider"] == "openai"
    assert meta["requestId"] == "req_1_abc"
    assert meta["processingTime"] == 42
    assert meta["imageSize"] == 9
    assert meta["mimeType"] == "image/png"


def test_error_codes_and_statuses():
    cases = [
        (AuthenticationError(), "AUTH_001", 401, "Authentication failed"),
        (RequestValidationFailed(details=["x"]), "VAL_001", 400, "Request validation failed"),
        (MethodNotAllowedError(), "METHOD_001", 405, "Method not allowed"),
        (ProviderTimeoutError("Request timeout: OpenAI API took too long to respond"), "AI_001", 500,
         "Request timeout: OpenAI API took too long to respond"),
        (InternalError.wrap(ValueError("bad")), "AI_001", 500, "AI provider error"),
    ]
    for err, code, status, message in cases:
        assert (err.code, err.status_code, err.message) == (code, status, message)


def test_error_dict_omits_empty_details():
    assert "details" not in AuthenticationError().to_dict()
    assert "details" not in RequestValidationFailed(details=[]).to_dict()
    body = RequestValidationFailed(details=["a", "b"]).to_dict()
    assert body["details"] == ["a", "b"]
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", body["timestamp"])
