"""Utility modules for shared functionality."""

from .constants import DEFAULT_MAX_CONCURRENCY, DEFAULT_REQUEST_TIMEOUT
from .logging import configure_logging
from .yaml import dump_yaml_to_string

__all__ = [
    "DEFAULT_MAX_CONCURRENCY",
    "DEFAULT_REQUEST_TIMEOUT",
    "configure_logging",
    "dump_yaml_to_string",
]
