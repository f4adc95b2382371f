"""Health, readiness, and version endpoints."""

from fastapi import APIRouter, Depends

from tourney.config import get_settings
from tourney.kv import KVStore, get_store

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe — returns 200 if the process is alive."""
    return {"status": "healthy"}


@router.get("/ready")
async def readiness(store: KVStore = Depends(get_store)) -> dict[str, object]:
    """Readiness probe — checks key-value store connectivity."""
    checks: dict[str, object] = {}

    try:
        checks["store"] = "ok" if await store.ping() else "error: ping failed"
    except Exception as exc:
        checks["store"] = f"error: {exc}"

    all_ok = all(v == "ok" for v in checks.values())
    return {"status": "ready" if all_ok else "degraded", "checks": checks}


@router.get("/version")
async def version() -> dict[str, str]:
    """Return API version and environment."""
    settings = get_settings()
    return {
        "version": settings.app_version,
        "environment": settings.environment,
    }
