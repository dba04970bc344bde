"""Utility functions for spinup."""

from spinup.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
]
