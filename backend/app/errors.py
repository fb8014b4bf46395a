"""
Application Errors
Operational errors raised by services and endpoints.
Each one carries the HTTP status it is reported with.
"""

from fastapi import status


class AppError(Exception):
    """Expected failure that is safe to report to the client."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Bad request"

    def __init__(self, message: str | None = None, headers: dict[str, str] | None = None):
        self.message = message or self.default_message
        self.headers = headers
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input data"


class InvalidCredentials(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Incorrect email or password"


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid or expired token. Please log in again."

    def __init__(self, message: str | None = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You are not allowed to perform this action"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class RequestTimeout(AppError):
    status_code = status.HTTP_408_REQUEST_TIMEOUT
    default_message = "Request timeout"


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


# Token verification failures. These are not HTTP errors: callers decide
# how to report them.

class TokenError(Exception):
    pass


class InvalidToken(TokenError):
    pass


class ExpiredToken(TokenError):
    pass
