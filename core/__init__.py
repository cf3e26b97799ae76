"""Core package exports.

Exports configuration and runtime helpers for CLI/API entrypoints.
"""

from .config import AppConfig
from .runtime import build_registry, configure_logging

__all__ = ["AppConfig", "build_registry", "configure_logging"]
