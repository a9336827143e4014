"""
FastAPI application entry point for the CMS backend.
"""

from __future__ import annotations

import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from cms_backend.config import Settings, get_settings
from cms_backend.errors import CmsError
from cms_backend.routes import admin, admins, auth, contacts, events, health, news
from cms_backend.schemas import envelope

logger = logging.getLogger(__name__)


def _first_error_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Requisição inválida"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(CmsError)
    async def handle_cms_error(request: Request, exc: CmsError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=envelope(success=False, message=exc.message),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content=envelope(success=False, message=_first_error_message(exc)),
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        message = "Rota não encontrada" if exc.status_code == 404 else str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content=envelope(success=False, message=message),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        content = envelope(success=False, message="Erro interno do servidor")
        if not settings.is_production:
            content["error"] = "".join(
                traceback.format_exception(type(exc), exc, exc.__traceback__)
            )
        return JSONResponse(status_code=500, content=content)


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=logging.INFO)

    app = FastAPI(
        title="Site CMS Backend (FastAPI)",
        version="0.1.0",
        docs_url=None if settings.is_production else "/api/docs",
        redoc_url=None,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "Accept"],
        expose_headers=["Content-Length", "Content-Type"],
    )
    register_exception_handlers(app, settings)

    app.include_router(health.router)
    for module in (auth, events, news, contacts, admins, admin):
        app.include_router(module.router, prefix=settings.api_prefix)

    if not settings.use_in_memory_backends:
        settings.upload_dir.mkdir(parents=True, exist_ok=True)
        app.mount(
            "/uploads",
            StaticFiles(directory=str(settings.upload_dir)),
            name="uploads",
        )
    return app


app = create_app()
