"""
Domain models.

These types are the contract between callers and the request executor:
- `RequestSpec` describes one call (method, path, routing/identity fields, extra headers)
- `Success` / `Failure` are the tagged outcome of a single attempt
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

if TYPE_CHECKING:
    from gatewayhttp.errors import FailureCategory


class RequestSpec(BaseModel):
    """Immutable description of one gateway call."""

    model_config = ConfigDict(frozen=True)

    method: str = "GET"
    path: str
    cluster_name: str = ""
    source: str = ""
    host: str = ""
    # Stored as a read-only copy of the caller mapping.
    headers: Mapping[str, str] = Field(default_factory=dict, validate_default=True)

    @field_validator("method")
    @classmethod
    def _normalize_method(cls, value: str) -> str:
        method = value.strip().upper()
        if not method:
            raise ValueError("method must not be empty")
        return method

    @field_validator("headers")
    @classmethod
    def _freeze_headers(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    @field_serializer("headers")
    def _dump_headers(self, value: Mapping[str, str]) -> dict[str, str]:
        return dict(value)

    @property
    def is_get(self) -> bool:
        return self.method == "GET"


@dataclass(frozen=True)
class Success:
    """A completed attempt; `value` holds the decoded response body."""

    value: Any

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """A failed attempt, tagged with the step that failed."""

    category: FailureCategory
    error: Exception
    # Truncated response body, when the failure happened after the body was read.
    body: bytes | None = None

    @property
    def ok(self) -> bool:
        return False


Outcome = Union[Success, Failure]
