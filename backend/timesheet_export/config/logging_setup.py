"""Logging set-up for entry points"""

from __future__ import annotations

import logging

from .runtime_config import RuntimeConfig


def configure_logging(config: RuntimeConfig) -> None:
    logging.basicConfig(
        level=getattr(logging, config.logging.log_level.upper(), logging.INFO),
        format=config.logging.log_format,
    )
