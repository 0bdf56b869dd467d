"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.backend import build_backend
from app.core.config import Settings, get_settings, log_config_summary
from app.core.db_errors import translate_storage_error
from app.core.logging import configure_logging
from app.core.validation import validation_error
from app.errors import ApiError, internal_error
from app.repositories.base import StorageError
from app.routes import (
    blog_router,
    categories_router,
    content_router,
    custom_codes_router,
    health_router,
    media_router,
    tags_router,
    uploads_router,
    users_router,
)

logger = logging.getLogger(__name__)

_HTTP_ERROR_CODES = {
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


def _log_error(request: Request, error: ApiError) -> None:
    if error.status_code >= 500:
        level = logging.ERROR
    elif error.status_code >= 400:
        level = logging.WARNING
    else:
        level = logging.INFO
    logger.log(
        level,
        "error.handled status=%s code=%s method=%s path=%s operational=%s",
        error.status_code,
        error.code,
        request.method,
        request.url.path,
        str(error.is_operational).lower(),
    )
    if not error.is_operational:
        logger.error(
            "error.non_operational code=%s method=%s path=%s restart_recommended=true",
            error.code,
            request.method,
            request.url.path,
        )


def _error_response(
    request: Request,
    error: ApiError,
    settings: Settings,
    origin: BaseException | None = None,
) -> JSONResponse:
    _log_error(request, error)
    payload = error.payload
    source = origin or error
    if not settings.is_production and source.__traceback__ is not None:
        payload.stack = "".join(traceback.format_exception(source))
    return JSONResponse(
        status_code=error.status_code,
        content=payload.model_dump(mode="json", exclude_none=True),
    )


def _register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
        return _error_response(request, exc, settings)

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError) -> JSONResponse:
        return _error_response(request, translate_storage_error(exc), settings, origin=exc)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error_response(request, validation_error(exc.errors()), settings)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        error = ApiError(
            exc.status_code,
            _HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
            str(exc.detail),
        )
        response = _error_response(request, error, settings)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("error.unhandled method=%s path=%s", request.method, request.url.path)
        return _error_response(request, internal_error(), settings, origin=exc)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)
    log_config_summary(settings)

    app = FastAPI(title="CMS API", version="1.0.0")
    app.state.settings = settings
    app.state.backend = build_backend(settings)

    origins = settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app, settings)

    api_prefix = "/api"
    app.include_router(health_router, prefix=api_prefix)
    app.include_router(users_router, prefix=api_prefix)
    app.include_router(content_router, prefix=api_prefix)
    app.include_router(blog_router, prefix=api_prefix)
    app.include_router(categories_router, prefix=api_prefix)
    app.include_router(tags_router, prefix=api_prefix)
    app.include_router(custom_codes_router, prefix=api_prefix)
    app.include_router(media_router, prefix=api_prefix)
    app.include_router(uploads_router, prefix=api_prefix)

    return app
