# app/schemas/caption.py
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class CaptionRequest(BaseModel):
    """驗證通過後的請求內容（debugMode 略過驗證時欄位可能為空字串）"""
    model_config = ConfigDict(populate_by_name=True)

    image_data: str = Field("", alias="imageData")
    mime_type: str = Field("", alias="mimeType")
    debug_mode: bool = Field(False, alias="debugMode")

    @classmethod
    def from_body(cls, body: Dict[str, Any]) -> "CaptionRequest":
        image_data = body.get("imageData")
        mime_type = body.get("mimeType")
        return cls(
            image_data=image_data if isinstance(image_data, str) else "",
            mime_type=mime_type if isinstance(mime_type, str) else "",
            debug_mode=body.get("debugMode") is True,
        )


class ValidationResult(BaseModel):
    is_valid: bool
    errors: List[str] = Field(default_factory=list)
    debug: bool = False


class ProviderResult(BaseModel):
    caption: str
    provider: str
    model: str
    # 由 stop reason 推得的粗略標籤，不是機率
    confidence: Literal["high", "medium"]
    usage: Optional[Dict[str, Any]] = None


class CaptionData(ProviderResult):
    model_config = ConfigDict(populate_by_name=True)

    processing_time: str = Field(..., alias="processingTime")
    request_id: str = Field(..., alias="requestId")


class CaptionMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    timestamp: str
    provider: str
    request_id: str = Field(..., alias="requestId")
    processing_time: int = Field(..., alias="processingTime")
    image_size: int = Field(..., alias="imageSize")
    mime_type: str = Field(..., alias="mimeType")


class CaptionSuccessResponse(BaseModel):
    success: Literal[True] = True
    data: CaptionData
    metadata: CaptionMetadata


class ErrorBody(BaseModel):
    code: str
    message: str
    timestamp: str
    details: Optional[Any] = None


class ErrorResponse(BaseModel):
    success: Literal[False] = False
    error: ErrorBody
