"""
HTTP client for the co-located gateway.

This module centralizes the request logic used to call internal services through the
gateway. One contract only: JSON in, JSON out, against a configured internal origin.

Design goals:
- Failures never escape `execute` as exceptions; each failed step is reported once, as a
  `Failure` outcome and (optionally) through a caller-supplied handler.
- `do_http` turns that into a plain raise-on-error call using `format_failure`.
- `do_http_with_retry` repeats `do_http` with a fixed delay and surfaces only the last error.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable

import httpx
from pydantic import BaseModel, TypeAdapter

from gatewayhttp.config.settings import Settings, get_settings
from gatewayhttp.domain.models import Failure, Outcome, RequestSpec, Success
from gatewayhttp.errors import (
    FailureCategory,
    GatewayRequestError,
    ResponseDecodeError,
    ResponseStatusError,
    RetryExhaustedError,
    format_failure,
)

logger = logging.getLogger(__name__)

FailureHandler = Callable[[FailureCategory, Exception], None]

# Same redirect limit as Go's default http.Client.
MAX_REDIRECTS = 10


def _marshal(payload: Any) -> bytes:
    """Serialize `payload` to compact JSON bytes."""
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(mode="json")
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, allow_nan=False).encode(
        "utf-8"
    )


def _unmarshal(body: bytes, adapter: TypeAdapter[Any] | None) -> Any:
    if adapter is None:
        return json.loads(body)
    return adapter.validate_json(body)


class GatewayClient:
    """Sends JSON requests to the internal gateway origin."""

    def __init__(
        self,
        internal_server: str,
        *,
        service_handshake: str = "kuscia-handshake",
        source_header: str = "Kuscia-Source",
        host_header: str = "Kuscia-Host",
        timeout_seconds: float = 15,
        wait_seconds: float = 1.0,
        max_attempts: int = 3,
        transport: httpx.BaseTransport | None = None,
    ):
        self._internal_server = internal_server.rstrip("/")
        self._cluster_header = f"{service_handshake}-Cluster"
        self._source_header = source_header
        self._host_header = host_header
        self._timeout_seconds = timeout_seconds
        self._wait_seconds = wait_seconds
        self._max_attempts = max_attempts
        self._transport = transport

    @classmethod
    def from_settings(
        cls, settings: Settings | None = None, *, transport: httpx.BaseTransport | None = None
    ) -> GatewayClient:
        settings = settings or get_settings()
        gateway = settings.gateway
        return cls(
            gateway.internal_server,
            service_handshake=gateway.service_handshake,
            source_header=gateway.source_header,
            host_header=gateway.host_header,
            timeout_seconds=settings.app.http_timeout_seconds,
            wait_seconds=settings.retry.wait_seconds,
            max_attempts=settings.retry.max_attempts,
            transport=transport,
        )

    @property
    def internal_server(self) -> str:
        return self._internal_server

    def _headers(self, spec: RequestSpec) -> httpx.Headers:
        headers = httpx.Headers(
            {
                "Content-Type": "application/json",
                self._cluster_header: spec.cluster_name,
                self._source_header: spec.source,
                self._host_header: spec.host,
            }
        )
        # Caller headers replace injected ones (names compare case-insensitively).
        for key, value in spec.headers.items():
            headers[key] = value
        return headers

    def execute(
        self,
        spec: RequestSpec,
        payload: Any = None,
        *,
        response_type: Any | None = None,
        handler: FailureHandler | None = None,
    ) -> Outcome:
        """Run one attempt and return its outcome.

        GET requests never serialize `payload`. On failure, `handler` (if given) is called
        exactly once with the category and underlying error; it is never called on success.
        """
        outcome = self._attempt(spec, payload, response_type)
        if isinstance(outcome, Failure):
            logger.debug(
                "Gateway request %s %s failed at %s: %s",
                spec.method,
                spec.path,
                outcome.category.value,
                outcome.error,
            )
            if handler is not None:
                handler(outcome.category, outcome.error)
        return outcome

    def _attempt(self, spec: RequestSpec, payload: Any, response_type: Any | None) -> Outcome:
        url = self._internal_server + spec.path
        # Built before any network I/O; unusable types raise here.
        adapter = TypeAdapter(response_type) if response_type is not None else None

        content: bytes | None = None
        if not spec.is_get:
            try:
                content = _marshal(payload)
            except (TypeError, ValueError) as exc:
                return Failure(FailureCategory.MARSHAL_INPUT, exc)

        with httpx.Client(
            timeout=self._timeout_seconds,
            transport=self._transport,
            follow_redirects=True,
            max_redirects=MAX_REDIRECTS,
        ) as client:
            try:
                request = client.build_request(
                    spec.method, url, content=content, headers=self._headers(spec)
                )
            except (httpx.InvalidURL, TypeError, ValueError) as exc:
                return Failure(FailureCategory.NEW_REQUEST, exc)

            try:
                response = client.send(request, stream=True)
            except httpx.HTTPError as exc:
                return Failure(FailureCategory.SEND, exc)

            try:
                body = response.read()
            except httpx.HTTPError as exc:
                return Failure(FailureCategory.READ_BODY, exc)
            finally:
                response.close()

        if response.status_code != httpx.codes.OK:
            error = ResponseStatusError(response.status_code, body)
            return Failure(FailureCategory.STATUS_NOT_OK, error, error.body)

        try:
            value = _unmarshal(body, adapter)
        except ValueError as exc:
            # json.JSONDecodeError and pydantic.ValidationError are both ValueErrors.
            error = ResponseDecodeError(exc, body)
            return Failure(FailureCategory.UNMARSHAL_OUTPUT, error, error.body)

        return Success(value)

    def do_http(
        self, spec: RequestSpec, payload: Any = None, *, response_type: Any | None = None
    ) -> Any:
        """Run one attempt; return the decoded body or raise `GatewayRequestError`."""
        error: GatewayRequestError | None = None

        def capture(category: FailureCategory, cause: Exception) -> None:
            nonlocal error
            if error is None:
                error = format_failure(spec, category, cause)

        outcome = self.execute(spec, payload, response_type=response_type, handler=capture)
        if error is not None:
            raise error from error.cause
        return outcome.value

    def do_http_with_retry(
        self,
        spec: RequestSpec,
        payload: Any = None,
        *,
        response_type: Any | None = None,
        wait_seconds: float | None = None,
        max_attempts: int | None = None,
    ) -> Any:
        """Call `do_http` up to `max_attempts` times with a fixed delay between attempts.

        Raises:
            ValueError: If `max_attempts` is below 1 or `wait_seconds` is negative.
            RetryExhaustedError: If every attempt failed (carries the last error only).
        """
        wait = self._wait_seconds if wait_seconds is None else float(wait_seconds)
        attempts = self._max_attempts if max_attempts is None else int(max_attempts)
        if attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if wait < 0:
            raise ValueError("wait_seconds must be >= 0")

        attempt = 1
        while True:
            try:
                return self.do_http(spec, payload, response_type=response_type)
            except GatewayRequestError as exc:
                if attempt >= attempts:
                    raise RetryExhaustedError(attempts, spec.path, exc) from exc
                logger.warning(
                    "Gateway request %s failed (%s); retrying in %.2fs (attempt %s/%s)",
                    spec.path,
                    exc.category.value,
                    wait,
                    attempt,
                    attempts,
                )
            time.sleep(wait)
            attempt += 1


def do_http_with_handler(
    client: GatewayClient,
    spec: RequestSpec,
    payload: Any,
    handler: FailureHandler | None,
    *,
    response_type: Any | None = None,
) -> Outcome:
    """Function form of `GatewayClient.execute` for callers that only register a handler."""
    return client.execute(spec, payload, response_type=response_type, handler=handler)
