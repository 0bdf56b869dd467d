"""Connection health and admin status."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from app.backend import Backend
from app.core.config import Settings
from app.schemas.health import AdminStatusResponse, ConnectionStatus, HealthResponse, ServiceCheck, SupabaseStatus

logger = logging.getLogger(__name__)


def _probe(name: str, ping: Callable[[], dict[str, Any]]) -> ServiceCheck:
    try:
        detail = ping()
    except Exception as exc:  # noqa: BLE001
        logger.warning("health.probe_failed service=%s error=%s", name, exc)
        return ServiceCheck(ok=False, reason=str(exc) or exc.__class__.__name__)
    return ServiceCheck(ok=bool(detail.get("ok", True)), detail=detail)


class HealthService:
    def __init__(self, backend: Backend, settings: Settings) -> None:
        self._backend = backend
        self._settings = settings

    def check(self) -> HealthResponse:
        status = ConnectionStatus(
            database=_probe("database", self._backend.tables.ping),
            auth=_probe("auth", self._backend.identity.ping),
            storage=_probe("storage", self._backend.storage.ping),
        )
        return HealthResponse(ok=status.healthy, status=status)

    def admin_status(self) -> AdminStatusResponse:
        return AdminStatusResponse(
            status="operational",
            environment=self._settings.app_env,
            backend=self._backend.name,
            supabase=SupabaseStatus(
                url="configured" if self._settings.supabase_url else "missing",
                service_role="configured" if self._settings.supabase_service_role_key else "missing",
            ),
            timestamp=datetime.now(UTC),
        )


__all__ = ["HealthService"]
