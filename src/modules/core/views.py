import time
from typing import Any, Callable, Dict

import structlog
from django.core.cache import cache
from django.db import connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone

logger = structlog.get_logger(__name__)


def _ping_database() -> None:
    conn = connections["default"]
    conn.ensure_connection()
    with conn.cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()


def _ping_cache() -> None:
    cache.set("_health_check", "ok", 10)
    if cache.get("_health_check") != "ok":
        raise ConnectionError("Cache read failed")


def _probe(name: str, check: Callable[[], None]) -> Dict[str, Any]:
    start = time.monotonic()
    try:
        check()
    except Exception:
        logger.exception("health.probe_failed", component=name)
        return {"status": "down"}
    return {
        "status": "up",
        "response_time_ms": round((time.monotonic() - start) * 1000, 2),
    }


def _settings_state() -> str:
    """``stored`` once ``settings/init`` ran; checkout uses built-in defaults before."""
    from modules.store_settings.constants import TAX_RATE
    from modules.store_settings.models import Setting

    return "stored" if Setting.objects.filter(key=TAX_RATE).exists() else "defaults"


def health_check(request: HttpRequest) -> JsonResponse:
    """GET /health: 200 when database and cache answer, 503 otherwise."""
    services = {
        "database": _probe("database", _ping_database),
        "cache": _probe("cache", _ping_cache),
    }
    healthy = all(s["status"] == "up" for s in services.values())

    body: Dict[str, Any] = {
        "status": "healthy" if healthy else "unhealthy",
        "timestamp": timezone.now().isoformat(),
        "services": services,
    }
    if services["database"]["status"] == "up":
        body["store_settings"] = _settings_state()

    logger.info("health.checked", status=body["status"])
    return JsonResponse(body, status=200 if healthy else 503)
