from typing import Any, Optional


class ApiError(Exception):
    """A request to the Notionary API did not succeed."""

    def __init__(self, message: str, status_code: Optional[int] = None, detail: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class UnauthorizedError(ApiError):
    """No session, or the session expired."""


class InvalidInputError(ApiError):
    """A required field is missing or a value was rejected."""


class NotFoundError(ApiError):
    """The entity does not exist or belongs to someone else."""


class TransportError(ApiError):
    """The request never produced an HTTP response."""


def error_for_status(status_code: int, detail: Any) -> ApiError:
    message = f"HTTP {status_code}: {detail}"
    if status_code == 401:
        return UnauthorizedError(message, status_code, detail)
    if status_code == 404:
        return NotFoundError(message, status_code, detail)
    if status_code in (400, 409, 422):
        return InvalidInputError(message, status_code, detail)
    return ApiError(message, status_code, detail)
