"""Health and admin status routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from app.core.permissions import Action, Resource
from app.routes.dependencies import get_health_service, require_capability
from app.schemas.auth import AuthPrincipal
from app.schemas.error import ERROR_RESPONSES
from app.schemas.health import AdminStatusResponse, HealthResponse
from app.services.health import HealthService

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
def health(
    response: Response,
    service: Annotated[HealthService, Depends(get_health_service)],
) -> HealthResponse:
    result = service.check()
    if not result.ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return result


@router.get("/admin/status", response_model=AdminStatusResponse, responses=ERROR_RESPONSES)
def admin_status(
    _: Annotated[AuthPrincipal, Depends(require_capability(Resource.SYSTEM, Action.LIST))],
    service: Annotated[HealthService, Depends(get_health_service)],
) -> AdminStatusResponse:
    return service.admin_status()
