import time

from fastapi import APIRouter, Request

router = APIRouter(prefix="/health", tags=["health"])

_STARTED = time.monotonic()


@router.get("", summary="Health check")
async def health(request: Request):
    settings = request.app.state.settings
    return {
        "status": "healthy",
        "version": settings.version,
        "uptime_seconds": round(time.monotonic() - _STARTED, 1),
        "storage_backend": settings.storage_backend,
    }


@router.get("/ready", summary="Readiness check")
async def ready(request: Request):
    engine = request.app.state.engine
    return {
        "status": "ready",
        "checks": {
            "store": engine.store is not None,
            "rates_cached": len(engine.cached_rates()),
        },
    }


@router.get("/live", summary="Liveness check")
async def live():
    return {"status": "alive"}
