from fastapi import APIRouter, Depends

from app.core.config import Settings
from app.core.deps import get_app_settings

router = APIRouter()


@router.get("/", summary="Health check")
async def health_root(settings: Settings = Depends(get_app_settings)):
    return {"status": "ok", "provider": settings.AI_PROVIDER}
