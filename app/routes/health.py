"""
Health check routes
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Service health check"""
    settings = request.app.state.settings
    cache = request.app.state.task_cache
    return {
        "service": "saas-starter",
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": request.app.version,
        "supabase": "configured" if settings.supabase_configured else "not_configured",
        "cache": "enabled" if cache.enabled else "disabled"
    }
