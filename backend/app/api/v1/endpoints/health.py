from __future__ import annotations

from fastapi import APIRouter

from app.core.config import settings
from app.services.directory_service import directory_service

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check():
    services: dict[str, str] = {}

    try:
        if directory_service.initialized:
            ok = await directory_service.check_connection()
            services["hr_directory"] = "ok" if ok else "error"
        else:
            services["hr_directory"] = "not_configured"
    except Exception:
        services["hr_directory"] = "error"

    all_ok = all(v in ("ok", "not_configured") for v in services.values())

    return {
        "status": "healthy" if all_ok else "degraded",
        "version": settings.APP_VERSION,
        "services": services,
    }


@router.get("/ready")
async def readiness_probe():
    return {"ready": True}
