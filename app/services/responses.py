# app/services/responses.py
import time
from typing import Any, Dict
from uuid import uuid4

from app.core.errors import iso_timestamp
from app.schemas.caption import CaptionData, CaptionMetadata, CaptionSuccessResponse, ProviderResult


def new_request_id() -> str:
    """req_<epoch ms>_<uuid4 hex>"""
    return f"req_{int(time.time() * 1000)}_{uuid4().hex}"


def build_success_response(
    result: ProviderResult,
    *,
    request_id: str,
    processing_ms: int,
    image_data: str,
    mime_type: str,
    provider_id: str,
) -> Dict[str, Any]:
    data = CaptionData(
        **result.model_dump(),
        processing_time=f"{processing_ms}ms",
        request_id=request_id,
    )
    metadata = CaptionMetadata(
        timestamp=iso_timestamp(),
        provider=provider_id,
        request_id=request_id,
        processing_time=processing_ms,
        # 原始字串長度（未清空白、非解碼後大小）
        image_size=len(image_data),
        mime_type=mime_type,
    )
    return CaptionSuccessResponse(data=data, metadata=metadata).model_dump(by_alias=True)
