"""APISIX integration - resource models, wire codecs and connection config."""

from apisix_sync.integrations.apisix.config import ApisixClientConfig
from apisix_sync.integrations.apisix.defaults import (
    DefaultsProvider,
    SchemaDefaultsProvider,
    passthrough_defaults,
)
from apisix_sync.integrations.apisix.exceptions import (
    ApisixCodecError,
    ConfigLoadError,
    EmptyPayloadError,
    InvalidIdentifierError,
    MalformedNodeError,
    MalformedValueError,
)

__all__ = [
    "ApisixClientConfig",
    "ApisixCodecError",
    "ConfigLoadError",
    "DefaultsProvider",
    "EmptyPayloadError",
    "InvalidIdentifierError",
    "MalformedNodeError",
    "MalformedValueError",
    "SchemaDefaultsProvider",
    "passthrough_defaults",
]
