"""APISIX declarative configuration codecs and resource model."""

from apisix_sync.__version__ import __version__

__all__ = ["__version__"]
