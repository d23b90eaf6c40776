"""Version information for apisix_sync."""

__version__ = "0.1.0"
