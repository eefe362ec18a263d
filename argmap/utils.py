"""Logging and environment helpers."""

from __future__ import annotations

import logging
import os

_TRUTHY = {"1", "true", "yes", "on"}


def configure_logging() -> None:
    """Ensure logging has at least a basic configuration."""
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        )


def env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean toggle from the environment."""
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY
