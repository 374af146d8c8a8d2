# src/vitatasks/api/errors.py

from __future__ import annotations


class ApiError(RuntimeError):
    """Base class for everything the backend client raises."""


class TransportError(ApiError):
    """Backend unreachable (connect/read timeout, DNS, refused connection)."""


class InvalidCredentialsError(ApiError):
    """POST /auth/login rejected the username/password."""


class UsernameTakenError(ApiError):
    """POST /auth/register rejected the username (usually already in use)."""


class NotAuthenticatedError(ApiError):
    """Task endpoint answered 401/403: no session or the token has expired."""


class ApiStatusError(ApiError):
    def __init__(self, status_code: int, body: str = "") -> None:
        super().__init__(f"Backend returned HTTP {status_code}")
        self.status_code = status_code
        self.body = body


class ApiDecodeError(ApiError):
    """Response body is not the JSON shape we expect."""


def friendly_api_error_message(err: Exception) -> str:
    if isinstance(err, InvalidCredentialsError):
        return "Invalid username or password"
    if isinstance(err, UsernameTakenError):
        return str(err) or "Failed to create account. Username might be taken."
    if isinstance(err, NotAuthenticatedError):
        return "Your session has expired. Use /login to sign in again."
    if isinstance(err, TransportError):
        return "Could not reach the server. Check your connection and try again."
    if isinstance(err, ApiStatusError):
        return f"The server could not complete the request (HTTP {err.status_code})."
    if isinstance(err, ApiDecodeError):
        return "The server sent an unexpected response."
    msg = str(err).strip()
    return msg or "Request failed."
