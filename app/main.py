import logging
import sys

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse

from app.api.auth_routes import router as auth_router
from app.api.v1 import api_v1_router
from app.core.exceptions import AppException, NoProvidersConfiguredError
from app.core.lifespan import lifespan
from app.core.logging import setup_logging
from app.core.settings import Settings, settings as default_settings
from app.oauth.http import OAuthHttpClient
from app.oauth.registry import OAuthProviderRegistry, build_provider_registry
from app.oauth.service import OAuthService
from app.schemas.common import create_error_response
from app.sessions import SessionCookieSigner, SessionManager, SessionStore
from app.web.pages import render_error_page

logger = logging.getLogger(__name__)


def _wants_json(request: Request) -> bool:
    return request.url.path.startswith("/api/")


def _error_response(
    request: Request, code: str, message: str, status_code: int
) -> JSONResponse | HTMLResponse:
    if _wants_json(request):
        return create_error_response(
            code=code, message=message, status_code=status_code
        )
    return render_error_page(code, message, status_code)


def _register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(AppException)
    async def app_exception_handler(
        request: Request, exc: AppException
    ) -> JSONResponse | HTMLResponse:
        logger.warning(
            "AppException on %s %s: code=%s message=%s",
            request.method,
            request.url.path,
            exc.code,
            exc.message,
        )
        return _error_response(request, exc.code, exc.message, exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse | HTMLResponse:
        logger.warning(
            "Validation error on %s %s: %s",
            request.method,
            request.url.path,
            exc.errors(),
        )
        return _error_response(
            request, "VALIDATION_ERROR", "Request validation failed", 422
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse | HTMLResponse:
        logger.exception(
            "Unhandled exception on %s %s: %s",
            request.method,
            request.url.path,
            exc,
        )
        return _error_response(
            request, "INTERNAL_ERROR", "An unexpected error occurred", 500
        )


def create_app(
    settings: Settings | None = None,
    registry: OAuthProviderRegistry | None = None,
) -> FastAPI:
    settings = settings or default_settings
    if registry is None:
        registry = build_provider_registry(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    http_client = OAuthHttpClient(timeout=settings.http_timeout_seconds)
    session_store = SessionStore(ttl_seconds=settings.session_ttl_seconds)

    app.state.settings = settings
    app.state.http_client = http_client
    app.state.session_manager = SessionManager(
        session_store, SessionCookieSigner(settings.secret_key_base)
    )
    app.state.oauth_service = OAuthService(
        registry, http_client, state_ttl_seconds=settings.oauth_state_ttl_seconds
    )

    _register_exception_handlers(app)

    app.include_router(auth_router)
    app.include_router(api_v1_router)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    return app


def run(settings: Settings | None = None) -> None:
    settings = settings or default_settings
    setup_logging(settings.log_level)

    try:
        registry = build_provider_registry(settings)
    except NoProvidersConfiguredError as e:
        logger.critical(e.message)
        sys.exit(1)

    if settings.uses_default_secret_key_base:
        logger.warning(
            "SECRET_KEY_BASE is not set; using the development default. "
            "Do not use this in production."
        )

    app = create_app(settings, registry)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
