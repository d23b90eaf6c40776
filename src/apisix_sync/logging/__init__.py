"""Logging configuration for apisix_sync."""

from apisix_sync.logging.config import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
