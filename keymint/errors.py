"""
Error types and the failure normalization used by every KeyMint call.

A failed request is first classified as one of two variants:

- ``HasResponse``: the API answered with a non-2xx status.
- ``NoResponse``: nothing came back (connection error, timeout, bad URL).

``normalize_error`` turns either variant into a ``KeyMintApiError``.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import httpx

DEFAULT_API_ERROR_MESSAGE = "An API error occurred during the request."
DEFAULT_UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred."
UNEXPECTED_RESPONSE_MESSAGE = "Unexpected response format from the API."


class KeyMintError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(KeyMintError, ValueError):
    """Raised when the client cannot be constructed."""


class KeyMintApiError(KeyMintError):
    """
    The single error shape surfaced by client operations.

    ``status`` is the HTTP status code when the API responded, else None.
    """

    def __init__(self, message: str, code: int = -1, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "code": self.code, "status": self.status}

    def __repr__(self) -> str:
        return (
            f"KeyMintApiError(message={self.message!r}, code={self.code!r}, "
            f"status={self.status!r})"
        )


@dataclass(frozen=True)
class HasResponse:
    body: Any
    status: int


@dataclass(frozen=True)
class NoResponse:
    message: Optional[str] = None


Failure = Union[HasResponse, NoResponse]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def normalize_error(failure: Failure) -> KeyMintApiError:
    """
    Map a failure variant to a KeyMintApiError.
    """
    if isinstance(failure, HasResponse):
        body = failure.body
        if isinstance(body, dict) and "message" in body:
            code = body.get("code")
            return KeyMintApiError(
                message=body["message"] or DEFAULT_API_ERROR_MESSAGE,
                code=code if _is_number(code) else -1,
                status=failure.status,
            )
        # Responded, but not with a {message, code} body
        return KeyMintApiError(
            message=DEFAULT_API_ERROR_MESSAGE,
            code=-1,
            status=failure.status,
        )

    return KeyMintApiError(
        message=failure.message or DEFAULT_UNEXPECTED_ERROR_MESSAGE,
        code=-1,
        status=None,
    )


def _decode_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def failure_from_exception(exc: Exception) -> Failure:
    """
    Classify an exception raised while sending a request.
    """
    if isinstance(exc, httpx.HTTPStatusError):
        return HasResponse(body=_decode_body(exc.response), status=exc.response.status_code)
    return NoResponse(message=str(exc) or None)
