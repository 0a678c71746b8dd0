# app/routes/health.py
"""
Health check endpoints.
"""

import time

from fastapi import APIRouter, Request

from app.config import settings

router = APIRouter()


@router.get("/healthz")
async def healthz():
    """Basic health check - always returns 200 if app is running."""
    return {"status": "ok", "service": "ambassador-outreach"}


@router.get("/readyz")
async def readyz(request: Request):
    """
    Readiness check: the document store must be open and writable.
    """
    checks = {}
    overall_ok = True

    store = getattr(request.app.state, "store", None)
    if store is None:
        checks["store"] = {"ok": False, "error": "Store not initialized"}
        overall_ok = False
    else:
        try:
            store_health = store.health_check()
            checks["store"] = {
                "ok": store_health["healthy"],
                "users": store_health["users"],
                "contacts": store_health["contacts"],
            }
            overall_ok = overall_ok and store_health["healthy"]
        except Exception as e:
            checks["store"] = {"ok": False, "error": f"{type(e).__name__}: {e}"}
            overall_ok = False

    config_issues = []
    if not settings.AUTH_JWT_SECRET:
        config_issues.append("AUTH_JWT_SECRET not set")

    checks["configuration"] = {
        "ok": not config_issues,
        "issues": config_issues or None,
        "environment": settings.environment,
    }
    overall_ok = overall_ok and not config_issues

    return {"overall_ok": overall_ok, "checks": checks, "timestamp": time.time()}
