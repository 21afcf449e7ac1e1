"""``GET /health/``: database and realtime gateway status."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

from django.db import connection
from django.http import JsonResponse

from taskflow.realtime.socketio import gateway

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Callable

logger = logging.getLogger(__name__)


def check_db() -> dict[str, Any]:
    with connection.cursor() as cursor:
        cursor.execute("SELECT 1;")
        cursor.fetchone()
    return {}


def check_realtime() -> dict[str, Any]:
    return {
        "connections": gateway.connection_count,
        "online_users": len(gateway.presence),
    }


COMPONENT_CHECKS: dict[str, Callable[[], dict[str, Any]]] = {
    "db": check_db,
    "realtime": check_realtime,
}


def run_check(name: str, check: Callable[[], dict[str, Any]]) -> dict[str, Any]:
    """Run one component check; a raising check reports ``ok: False``."""
    try:
        details = check()
    except Exception as exc:  # noqa: BLE001 - health must degrade, not crash
        logger.warning("Health check %s failed: %s", name, exc)
        return {"ok": False, "error": str(exc)}
    return {"ok": True, **details}


def overall_status(components: dict[str, dict[str, Any]]) -> str:
    healthy = [component["ok"] for component in components.values()]
    if all(healthy):
        return "ok"
    return "degraded" if any(healthy) else "down"


def health(request):
    components = {name: run_check(name, check) for name, check in COMPONENT_CHECKS.items()}
    status = overall_status(components)
    return JsonResponse(
        {"status": status, "components": components},
        status=200 if status == "ok" else 503,
    )
