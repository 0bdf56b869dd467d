"""Health and admin status schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class ServiceCheck(BaseModel):
    ok: bool
    reason: str | None = None
    detail: dict[str, Any] | None = None


class ConnectionStatus(BaseModel):
    database: ServiceCheck
    auth: ServiceCheck
    storage: ServiceCheck

    @property
    def healthy(self) -> bool:
        return self.database.ok and self.auth.ok and self.storage.ok


class HealthResponse(BaseModel):
    ok: bool
    status: ConnectionStatus


class SupabaseStatus(BaseModel):
    url: str
    service_role: str


class AdminStatusResponse(BaseModel):
    status: str
    environment: str
    backend: str
    supabase: SupabaseStatus
    timestamp: datetime
