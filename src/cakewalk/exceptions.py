"""Exception hierarchy for cakewalk.

All exceptions inherit from :class:`CakewalkError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`cakewalk.exit_codes`.
Library callers catch the typed subclasses; the CLI entry point in
:func:`cakewalk.app.main` catches ``CakewalkError`` and exits with the
matching code.

Subclass hierarchy::

    CakewalkError (exit 1)
    +-- ConfigError         (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- DecodeError         (exit 1)
    +-- ApiError            (exit 1)
        +-- AuthError       (exit 3)
        +-- NotFoundError   (exit 4)
        +-- ServerError     (exit 5)

Network failures are not wrapped: the underlying :class:`httpx.TransportError`
reaches the caller unchanged.
"""

from __future__ import annotations

from cakewalk.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)


class CakewalkError(Exception):
    """Base exception for all cakewalk errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(CakewalkError):
    """Raised for missing credentials or an unreadable ``cakewalk.json``."""

    exit_code = EXIT_GENERIC_FAILURE


class InvalidUsageError(CakewalkError):
    """Raised for invalid CLI arguments."""

    exit_code = EXIT_INVALID_USAGE


class DecodeError(CakewalkError):
    """Raised when a response body is not JSON or does not match the expected shape."""

    exit_code = EXIT_GENERIC_FAILURE


class ApiError(CakewalkError):
    """Raised when the API answers with a non-2xx status.

    The message always embeds the numeric status, e.g.
    ``"Cakewalk API error: 500 Internal Server Error"``. Callers should
    branch on :attr:`status_code` rather than on the message text.

    Args:
        status_code: The HTTP status code of the response.
        status_text: The HTTP reason phrase (may be empty).
    """

    def __init__(self, status_code: int, status_text: str = "") -> None:
        self.status_code = status_code
        self.status_text = status_text
        message = f"Cakewalk API error: {status_code} {status_text}".rstrip()
        super().__init__(message)


class AuthError(ApiError):
    """Raised when the API key is rejected (HTTP 401 / 403)."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(ApiError):
    """Raised when the API returns HTTP 404."""

    exit_code = EXIT_NOT_FOUND


class ServerError(ApiError):
    """Raised when the API returns an HTTP 5xx server error."""

    exit_code = EXIT_SERVER_ERROR


def error_for_status(status_code: int, status_text: str = "") -> ApiError:
    """Build the :class:`ApiError` subclass matching *status_code*."""
    if status_code in (401, 403):
        return AuthError(status_code, status_text)
    if status_code == 404:
        return NotFoundError(status_code, status_text)
    if status_code >= 500:
        return ServerError(status_code, status_text)
    return ApiError(status_code, status_text)
