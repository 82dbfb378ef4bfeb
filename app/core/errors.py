"""
Domain errors raised by services and clients.

API handlers translate these into HTTP responses; only errors flagged with
``expose`` have their message returned to the client verbatim.
"""

from fastapi import HTTPException

GENERIC_ERROR_MESSAGE = "An internal server error occurred."


class AppError(Exception):
    status_code: int = 500
    expose: bool = False

    def __init__(self, message: str, expose: bool | None = None):
        super().__init__(message)
        self.message = message
        if expose is not None:
            self.expose = expose

    @property
    def public_message(self) -> str:
        return self.message if self.expose else GENERIC_ERROR_MESSAGE


class ValidationError(AppError):
    """Missing or empty required field."""
    status_code = 400
    expose = True


class AuthError(AppError):
    """Upstream credential rejected."""
    status_code = 401
    expose = True


class ContentBlockedError(AppError):
    """Provider withheld the response because of its safety filters."""
    status_code = 400
    expose = True


class UpstreamError(AppError):
    """Database or third-party service failure."""
    status_code = 500


class NotConnectedError(AppError):
    """Database handle unavailable."""
    status_code = 500


def to_http_exception(error: AppError, include_details: bool = False) -> HTTPException:
    """Translate a domain error into the HTTP error returned to the client."""
    if include_details and not error.expose:
        return HTTPException(
            status_code=error.status_code,
            detail={"error": error.public_message, "details": error.message},
        )
    return HTTPException(status_code=error.status_code, detail=error.public_message)
