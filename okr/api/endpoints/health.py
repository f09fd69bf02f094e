from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends

from okr.core.config import Settings, get_settings
from okr.services import score_levels

router = APIRouter()


@router.get("/health", summary="Health check")
def health_check(settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    levels = score_levels.load_configuration()
    return {
        "status": "ok",
        "app": settings.app_name,
        "environment": settings.environment,
        "score_levels": len(levels),
        "default_scale": levels.is_default,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
