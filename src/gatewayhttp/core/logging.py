"""
Logging configuration.

We use a YAML logging config (`src/gatewayhttp/config/logging.yaml`) and then apply
runtime overrides from settings (e.g., `GATEWAYHTTP_LOG_LEVEL`).
"""

from __future__ import annotations

import logging.config

from gatewayhttp.config.settings import Settings, get_logging_config, get_settings


def configure_logging(settings: Settings | None = None) -> None:
    """Configure the Python logging system based on packaged YAML config + settings."""
    settings = settings or get_settings()
    # Copy so the cached config is not mutated between calls.
    config = dict(get_logging_config())
    config["handlers"] = {
        name: dict(handler) if isinstance(handler, dict) else handler
        for name, handler in config.get("handlers", {}).items()
    }
    config["root"] = dict(config.get("root", {}))

    level = settings.app.log_level.upper()
    config["root"]["level"] = level
    for handler in config["handlers"].values():
        if isinstance(handler, dict) and "level" in handler:
            handler["level"] = level

    logging.config.dictConfig(config)
