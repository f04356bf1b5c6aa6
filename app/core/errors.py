# app/core/errors.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

CORS_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-App-Token",
}

SECURITY_HEADERS: Dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
}


def iso_timestamp() -> str:
    """UTC ISO-8601（毫秒 + Z），與原本 JS 的 toISOString() 相同格式"""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


# === 錯誤分類（每個類別固定 code / HTTP status）===
class APIError(Exception):
    code: str = "AI_001"
    status_code: int = 500
    default_message: str = "AI provider error"

    def __init__(self, message: Optional[str] = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        self.timestamp = iso_timestamp()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "timestamp": self.timestamp,
        }
        # details 為空時不輸出
        if self.details:
            body["details"] = self.details
        return body


class AuthenticationError(APIError):
    code = "AUTH_001"
    status_code = 401
    default_message = "Authentication failed"


class RequestValidationFailed(APIError):
    code = "VAL_001"
    status_code = 400
    default_message = "Request validation failed"


class MethodNotAllowedError(APIError):
    code = "METHOD_001"
    status_code = 405
    default_message = "Method not allowed"


class ProviderError(APIError):
    """上游 AI provider 失敗的共同基底"""


class ProviderUpstreamError(ProviderError):
    pass


class ProviderTimeoutError(ProviderError):
    pass


class InternalError(APIError):
    """未分類的例外；訊息維持 'AI provider error'，原始內容放在 details"""

    @classmethod
    def wrap(cls, exc: BaseException) -> "InternalError":
        return cls(details=str(exc) or type(exc).__name__)


def error_response(err: APIError) -> JSONResponse:
    return JSONResponse(
        status_code=err.status_code,
        content={"success": False, "error": err.to_dict()},
    )


def log_api_error(err: APIError, request_id: Optional[str] = None,
                  exc: Optional[BaseException] = None) -> None:
    logger.opt(exception=exc or err).error(
        "[{}] Error: code={} message={} details={}",
        request_id or "-", err.code, err.message, err.details,
    )


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        log_api_error(exc, getattr(request.state, "request_id", None))
        return error_response(exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_exc_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 405:
            return error_response(
                MethodNotAllowedError(details=f"Method {request.method} not allowed")
            )
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(Exception)
    async def unhandled_exc_handler(request: Request, exc: Exception):
        # ServerErrorMiddleware 在最外層，這裡的回應不會經過下面的 middleware，需自行補 header
        err = InternalError.wrap(exc)
        log_api_error(err, getattr(request.state, "request_id", None), exc=exc)
        resp = error_response(err)
        resp.headers.update(CORS_HEADERS)
        resp.headers.update(SECURITY_HEADERS)
        return resp

    @app.middleware("http")
    async def add_response_headers(request: Request, call_next):
        resp = await call_next(request)
        for name, value in {**CORS_HEADERS, **SECURITY_HEADERS}.items():
            resp.headers[name] = value
        return resp
