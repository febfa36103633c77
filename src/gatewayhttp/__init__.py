"""Internal JSON-over-HTTP client for calling the co-located gateway service."""

from gatewayhttp.core.http import FailureHandler, GatewayClient, do_http_with_handler
from gatewayhttp.core.urls import ParsedURL, parse_url
from gatewayhttp.domain.models import Failure, Outcome, RequestSpec, Success
from gatewayhttp.errors import (
    FailureCategory,
    GatewayHttpError,
    GatewayRequestError,
    InvalidHostError,
    InvalidPortError,
    ResponseDecodeError,
    ResponseStatusError,
    RetryExhaustedError,
    format_failure,
)

__all__ = [
    "Failure",
    "FailureCategory",
    "FailureHandler",
    "GatewayClient",
    "GatewayHttpError",
    "GatewayRequestError",
    "InvalidHostError",
    "InvalidPortError",
    "Outcome",
    "ParsedURL",
    "RequestSpec",
    "ResponseDecodeError",
    "ResponseStatusError",
    "RetryExhaustedError",
    "Success",
    "do_http_with_handler",
    "format_failure",
    "parse_url",
]
