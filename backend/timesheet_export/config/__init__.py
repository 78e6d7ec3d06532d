"""
Configuration layer - runtime settings and the layout registry

Responsibilities:
- load runtime settings (timeouts, signing, storage, export limits)
- load the layout registry (config/layouts.yaml)
- configure logging for entry points
"""

from .layout_spec import LayoutSpec, SpecLoader, load_layouts
from .logging_setup import configure_logging
from .runtime_config import RuntimeConfig, get_config, reload_config

__all__ = [
    "LayoutSpec",
    "SpecLoader",
    "load_layouts",
    "RuntimeConfig",
    "get_config",
    "reload_config",
    "configure_logging",
]
