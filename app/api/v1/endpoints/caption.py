# app/api/v1/endpoints/caption.py
import time
from typing import Any, Optional

import httpx
from fastapi import APIRouter, Depends, Request, Response
from loguru import logger

from app.core.config import Settings
from app.core.deps import get_app_settings, get_provider_transport
from app.core.errors import (
    APIError,
    AuthenticationError,
    InternalError,
    RequestValidationFailed,
    error_response,
    log_api_error,
)
from app.core.security import extract_app_token, validate_app_token
from app.schemas.caption import CaptionRequest, CaptionSuccessResponse, ErrorResponse
from app.services.providers.registry import get_provider
from app.services.responses import build_success_response, new_request_id
from app.services.validation import validate_request_body

router = APIRouter()


async def _read_json(request: Request) -> Any:
    # 非 JSON / 空 body 一律當作 None，交給 validator 回報
    try:
        return await request.json()
    except ValueError:
        return None


@router.options("/generateCaption", include_in_schema=False)
async def generate_caption_preflight():
    # CORS preflight：空 body，header 由 middleware 補上
    return Response(status_code=200)


@router.post(
    "/generateCaption",
    response_model=CaptionSuccessResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse},
               405: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Generate a caption for a base64 image",
)
async def generate_caption(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_provider_transport),
):
    """
    流程：驗證 token -> 驗證 body -> 呼叫 AI provider -> 包裝回應。
    任何一步失敗都輸出 {success: false, error: {...}}，不會有部分回應。
    """
    request_id = new_request_id()
    request.state.request_id = request_id

    try:
        # 1) Authentication
        if not validate_app_token(extract_app_token(request.headers), settings.APP_TOKEN):
            raise AuthenticationError(details="Invalid or missing app token")

        # 2) Request validation
        body = await _read_json(request)
        validation = validate_request_body(body, settings)
        if not validation.is_valid:
            raise RequestValidationFailed(details=validation.errors)
        caption_req = CaptionRequest.from_body(body)

        # 3) AI processing
        provider = get_provider(settings, transport=transport)
        started = time.perf_counter()
        result = await provider.generate_caption(caption_req.image_data, caption_req.mime_type)
        processing_ms = int((time.perf_counter() - started) * 1000)

        logger.info(
            "[{}] caption generated by {} in {}ms (debug={})",
            request_id, result.provider, processing_ms, validation.debug,
        )
        return build_success_response(
            result,
            request_id=request_id,
            processing_ms=processing_ms,
            image_data=caption_req.image_data,
            mime_type=caption_req.mime_type,
            provider_id=settings.AI_PROVIDER,
        )

    except APIError as err:
        log_api_error(err, request_id)
        return error_response(err)
    except Exception as exc:
        err = InternalError.wrap(exc)
        log_api_error(err, request_id, exc=exc)
        return error_response(err)
