import json
from typing import Any, Optional

import httpx


class PixelLabError(Exception):
    """Base error for everything the PixelLab client raises.

    ``detail`` holds whatever the service returned alongside the failure and
    is kept verbatim for inspection.
    """

    def __init__(
        self, message: str, status_code: Optional[int] = None, detail: Any = None
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.detail = detail

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"status_code={self.status_code!r})"
        )


class AuthenticationError(PixelLabError):
    """The secret was missing or rejected (401)."""

    def __init__(self, message: str, detail: Any = None):
        super().__init__(message, 401, detail)


class BadRequestError(PixelLabError):
    """The request was malformed (400)."""

    def __init__(self, message: str, detail: Any = None):
        super().__init__(message, 400, detail)


class ValidationError(PixelLabError):
    """The service rejected one or more field values (422)."""

    def __init__(self, message: str, detail: Any = None):
        super().__init__(message, 422, detail)


class DecodeError(PixelLabError):
    """Image data could not be decoded from base64."""


class ConfigurationError(PixelLabError):
    """No usable secret could be resolved while building a client."""


_STATUS_ERRORS = {
    401: AuthenticationError,
    400: BadRequestError,
    422: ValidationError,
}


def error_from_response(response: httpx.Response) -> PixelLabError:
    """Classifies a failed response into the matching error type."""
    try:
        body = response.json()
    except ValueError:
        detail = response.text
    else:
        detail = body.get("detail") if isinstance(body, dict) else None
        if detail is None:
            detail = body

    message = detail if isinstance(detail, str) else json.dumps(detail)

    error_cls = _STATUS_ERRORS.get(response.status_code)
    if error_cls is not None:
        return error_cls(message, detail)
    return PixelLabError(message, response.status_code, detail)
