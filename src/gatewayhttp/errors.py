"""
Error taxonomy for gateway calls.

`FailureCategory` tags which step of an attempt failed. The exception types below carry
those failures back to callers:
- `GatewayRequestError`: one failed attempt, formatted by `format_failure`
- `RetryExhaustedError`: every attempt of `do_http_with_retry` failed
- `ResponseStatusError` / `ResponseDecodeError`: underlying errors built from a read body
- `InvalidHostError` / `InvalidPortError`: raised by `parse_url`
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gatewayhttp.domain.models import RequestSpec

# Bodies attached to error text are cut to this many bytes.
MAX_BODY_CONTEXT_BYTES = 200


class FailureCategory(Enum):
    NEW_REQUEST = "new_request"
    MARSHAL_INPUT = "marshal_input"
    UNMARSHAL_OUTPUT = "unmarshal_output"
    STATUS_NOT_OK = "status_not_ok"
    SEND = "send"
    READ_BODY = "read_body"

    @property
    def clause(self) -> str:
        return _CLAUSES[self]


_CLAUSES = {
    FailureCategory.NEW_REQUEST: "new fail",
    FailureCategory.MARSHAL_INPUT: "in parameter marshal to json fail",
    FailureCategory.UNMARSHAL_OUTPUT: "out parameter unmarshal from json fail",
    FailureCategory.STATUS_NOT_OK: "get code is not ok",
    FailureCategory.SEND: "do fail",
    FailureCategory.READ_BODY: "read body fail",
}


def truncate_body(body: bytes) -> bytes:
    return body[:MAX_BODY_CONTEXT_BYTES]


def _body_text(body: bytes) -> str:
    return body.decode("utf-8", errors="replace")


class GatewayHttpError(Exception):
    """Base class for errors raised by gatewayhttp."""


class InvalidHostError(GatewayHttpError, ValueError):
    def __init__(self, url: str):
        super().__init__(f"invalid host: {url}")
        self.url = url


class InvalidPortError(GatewayHttpError, ValueError):
    def __init__(self, url: str, port: str):
        super().__init__(f"invalid port {port!r} in url: {url}")
        self.url = url
        self.port = port


class ResponseStatusError(GatewayHttpError):
    """The gateway answered with a status other than 200."""

    def __init__(self, status_code: int, body: bytes):
        self.status_code = status_code
        self.body = truncate_body(body)
        super().__init__(f"code: {status_code}, message: {_body_text(self.body)}")


class ResponseDecodeError(GatewayHttpError):
    """The response body could not be decoded into the requested type."""

    def __init__(self, cause: Exception, body: bytes):
        self.cause = cause
        self.body = truncate_body(body)
        super().__init__(f"{cause}, body:{_body_text(self.body)}")


def error_prefix(spec: RequestSpec) -> str:
    return (
        f"request(method:{spec.method} path:{spec.path} "
        f"cluster:{spec.cluster_name} host:{spec.host})"
    )


class GatewayRequestError(GatewayHttpError):
    """A single attempt failed; the message names the request and the failed step."""

    def __init__(self, spec: RequestSpec, category: FailureCategory, cause: Exception):
        self.spec = spec
        self.category = category
        self.cause = cause
        super().__init__(f"{error_prefix(spec)} {category.clause}:{cause}")


class RetryExhaustedError(GatewayHttpError):
    """All attempts failed; only the last attempt's error is kept."""

    def __init__(self, max_attempts: int, path: str, last_error: Exception):
        self.max_attempts = max_attempts
        self.path = path
        self.last_error = last_error
        super().__init__(
            f"request error, retry at maxtimes:{max_attempts}, path:{path}, err:{last_error}"
        )


def format_failure(
    spec: RequestSpec, category: FailureCategory, error: Exception
) -> GatewayRequestError:
    """Default error formatter: turn a classified failure into a descriptive error."""
    return GatewayRequestError(spec, category, error)
