"""Error hierarchy for atproto-xrpc client."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class RequestDetails:
    method_id: str
    method: str
    url: str
    status_code: int | None = None
    response_body: bytes | None = None


class XrpcError(Exception):
    """Base class for all client errors."""


class RequestPrepareError(XrpcError):
    """Raised before any network I/O when a request cannot be built."""


class InvalidRequestURLError(RequestPrepareError):
    """Raised when no host can be resolved or the request URL cannot be built."""


class MissingActiveSessionError(RequestPrepareError):
    """Raised when an authenticated call is made without an active session."""


class TransportError(XrpcError):
    """Raised on network/transport failures."""


class ClientTimeoutError(TransportError):
    """Raised when request times out."""


class ApiError(XrpcError):
    """Raised when the server answers with a non-2xx status."""

    def __init__(
        self,
        message: str,
        *,
        details: RequestDetails,
        error: str | None = None,
        error_message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.details = details
        self.error = error
        self.error_message = error_message

    @property
    def status_code(self) -> int | None:
        return self.details.status_code

    @property
    def body(self) -> bytes | None:
        return self.details.response_body


class BadRequestError(ApiError):
    """Raised for invalid request parameters (400)."""


class AuthError(ApiError):
    """Raised for authentication/authorization failures."""


class NotFoundError(ApiError):
    """Raised when requested resource does not exist."""


class PayloadTooLargeError(ApiError):
    """Raised when the request body exceeds the server limit."""


class RateLimitError(ApiError):
    """Raised when the server rate limits the caller."""


class ServerError(ApiError):
    """Raised for server-side failures."""


class DecodingError(XrpcError):
    """Raised when a successful response does not match the expected shape."""

    def __init__(
        self,
        *,
        method_id: str,
        model_name: str,
        errors: Any,
        status_code: int | None = None,
        raw_sample: Any | None = None,
    ) -> None:
        super().__init__(f"{method_id} response decoding failed for {model_name}")
        self.method_id = method_id
        self.model_name = model_name
        self.errors = errors
        self.status_code = status_code
        self.raw_sample = raw_sample


class DateDecodingError(DecodingError, ValueError):
    """Raised when a timestamp does not match any accepted wire variant."""

    def __init__(self, value: Any) -> None:
        DecodingError.__init__(
            self,
            method_id="datetime",
            model_name="datetime",
            errors=[{"type": "datetime_parsing", "input": value}],
            raw_sample=value,
        )
        self.args = (f"invalid wire datetime {value!r}",)


def classify_api_error(
    details: RequestDetails,
    *,
    error: str | None = None,
    error_message: str | None = None,
) -> ApiError:
    status = details.status_code or 0
    message = f"{details.method_id} failed with status {status}"
    if error:
        message += f": {error}"
        if error_message:
            message += f" ({error_message})"

    kwargs = {"details": details, "error": error, "error_message": error_message}
    if status in (401, 403):
        return AuthError(message, **kwargs)
    if status == 400:
        return BadRequestError(message, **kwargs)
    if status == 404:
        return NotFoundError(message, **kwargs)
    if status == 413:
        return PayloadTooLargeError(message, **kwargs)
    if status == 429:
        return RateLimitError(message, **kwargs)
    if status >= 500:
        return ServerError(message, **kwargs)

    return ApiError(message, **kwargs)
