# src/gatewayhttp/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/gatewayhttp/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `GATEWAYHTTP_INTERNAL_SERVER`, `GATEWAYHTTP_LOG_LEVEL`)
- an external YAML file via `GATEWAYHTTP_CONFIG_PATH`

Design rule:
- The gateway origin and header names are configuration, never module-level constants.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from gatewayhttp.core.env import load_dotenv_if_present
from gatewayhttp.core.urls import parse_url


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `gatewayhttp.config`."""
    text = resources.files("gatewayhttp.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "gatewayhttp"
    http_timeout_seconds: float = Field(15, gt=0)
    log_level: str = "INFO"


class GatewaySettings(BaseModel):
    """Where requests go and which identity headers they carry."""

    internal_server: str = "http://127.0.0.1:80"
    service_handshake: str = "kuscia-handshake"
    source_header: str = "Kuscia-Source"
    host_header: str = "Kuscia-Host"

    @field_validator("internal_server")
    @classmethod
    def _validate_internal_server(cls, value: str) -> str:
        # Raises InvalidHostError / InvalidPortError (both ValueError) on bad origins.
        parse_url(value)
        return value.rstrip("/")


class RetrySettings(BaseModel):
    """Fixed-delay retry policy used by `GatewayClient.do_http_with_retry`."""

    wait_seconds: float = Field(1.0, ge=0)
    max_attempts: int = Field(3, ge=1)


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    gateway: GatewaySettings = Field(default_factory=GatewaySettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: only a small whitelist is honoured; header names stay file-configured.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("GATEWAYHTTP_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    timeout = os.getenv("GATEWAYHTTP_HTTP_TIMEOUT_SECONDS")
    if timeout:
        data.setdefault("app", {})["http_timeout_seconds"] = timeout

    internal_server = os.getenv("GATEWAYHTTP_INTERNAL_SERVER")
    if internal_server:
        data.setdefault("gateway", {})["internal_server"] = internal_server

    handshake = os.getenv("GATEWAYHTTP_SERVICE_HANDSHAKE")
    if handshake:
        data.setdefault("gateway", {})["service_handshake"] = handshake

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("GATEWAYHTTP_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
