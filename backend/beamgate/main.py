import logging

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from beamgate import __version__
from beamgate.config import Settings, VMDefaults, get_settings
from beamgate.errors import GatewayError
from beamgate.middleware import GatewayMiddleware
from beamgate.routers import sessions, vms

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, vm_defaults: VMDefaults | None = None) -> FastAPI:
    settings = settings or get_settings()
    is_production = settings.environment != "development"

    app = FastAPI(
        title="beamgate",
        description="Stateless gateway in front of the Hyperbeam VM API",
        version=__version__,
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
        openapi_url=None if is_production else "/openapi.json",
        # Only exact paths match; "/start-vm/" is a 404, not a redirect
        redirect_slashes=False,
    )
    app.state.settings = settings
    app.state.vm_defaults = vm_defaults or VMDefaults()

    app.add_middleware(GatewayMiddleware)

    @app.exception_handler(GatewayError)
    async def _gateway_error_handler(request: Request, exc: GatewayError):
        return exc.to_response()

    @app.exception_handler(StarletteHTTPException)
    async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Unknown paths and known paths with the wrong method both read as 404
        if exc.status_code in (404, 405):
            return PlainTextResponse("Not Found", status_code=404)
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code)

    app.include_router(vms.router, tags=["vms"])
    if settings.deployment_variant == "viewer":
        app.include_router(sessions.router, tags=["sessions"])

    logger.info("beamgate configured (variant=%s)", settings.deployment_variant)
    return app


app = create_app()
