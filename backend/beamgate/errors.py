from typing import Any

from fastapi.responses import JSONResponse


class GatewayError(Exception):
    """Base for errors rendered as ``{"error": <name>, "message": ...}``."""

    status_code = 500
    error = "InternalServerError"

    def __init__(self, message: str, details: Any = None, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        body = {"error": self.error, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body

    def to_response(self) -> JSONResponse:
        return JSONResponse(status_code=self.status_code, content=self.to_dict())


class ConfigurationError(GatewayError):
    status_code = 500
    error = "ConfigurationError"


class HyperbeamAPIError(GatewayError):
    """Non-success response from Hyperbeam; carries the upstream status code."""

    error = "HyperbeamAPIError"


class TooManyVMs(GatewayError):
    status_code = 503
    error = "TooManyVMs"


class BadRequest(GatewayError):
    status_code = 400
    error = "BadRequest"


class InternalServerError(GatewayError):
    status_code = 500
    error = "InternalServerError"

    @classmethod
    def from_exception(cls, exc: Exception) -> "InternalServerError":
        return cls("An unexpected error occurred.", details=str(exc))
