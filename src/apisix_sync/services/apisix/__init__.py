"""APISIX services - configuration-source loading."""

from apisix_sync.services.apisix.config_loader import ConfigLoader

__all__ = ["ConfigLoader"]
