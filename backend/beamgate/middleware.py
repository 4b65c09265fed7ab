import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from beamgate.errors import ConfigurationError, InternalServerError

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


class GatewayMiddleware(BaseHTTPMiddleware):
    """Outermost request boundary.

    Answers preflights, refuses to route anything while the Hyperbeam key is
    unset, turns unexpected exceptions into a 500 and stamps the CORS headers
    on every response.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=CORS_HEADERS)

        settings = request.app.state.settings
        if not settings.api_key_configured:
            logger.error("HB_API_KEY is not configured; rejecting %s %s", request.method, request.url.path)
            response = ConfigurationError(
                "Hyperbeam API key is not configured on the server."
            ).to_response()
        else:
            request.state.hb_api_key = settings.hb_api_key
            try:
                response = await call_next(request)
            except Exception as exc:
                logger.exception("Unhandled error on %s %s", request.method, request.url.path)
                response = InternalServerError.from_exception(exc).to_response()

        response.headers.update(CORS_HEADERS)
        logger.info("%s %s - %d", request.method, request.url.path, response.status_code)
        return response
