"""APISIX entity models and wire codecs."""

from apisix_sync.integrations.apisix.models.base import ApisixEntityBase, Labels
from apisix_sync.integrations.apisix.models.config import (
    RESOURCE_MODELS,
    Configuration,
    ResourceKind,
    decode_list_response,
    decode_resource,
    encode_resource,
)
from apisix_sync.integrations.apisix.models.consumer import Consumer, ConsumerGroup
from apisix_sync.integrations.apisix.models.global_rule import GlobalRule, PluginConfig
from apisix_sync.integrations.apisix.models.plugin import (
    Plugin,
    Plugins,
    apply_plugin_defaults,
    decode_plugins,
    deep_copy_plugins,
    encode_plugins,
)
from apisix_sync.integrations.apisix.models.plugin_metadata import (
    PluginMetadata,
    decode_plugin_metadata,
    encode_plugin_metadata,
)
from apisix_sync.integrations.apisix.models.route import Route
from apisix_sync.integrations.apisix.models.service import Service
from apisix_sync.integrations.apisix.models.ssl import SSL
from apisix_sync.integrations.apisix.models.upstream import (
    ClientTLS,
    Upstream,
    UpstreamHealthCheck,
    UpstreamNode,
    UpstreamTimeout,
    decode_nodes,
    encode_nodes,
)
from apisix_sync.integrations.apisix.models.values import (
    ListValue,
    ScalarValue,
    StringOrList,
    decode_string_or_list,
    encode_string_or_list,
)

__all__ = [
    "RESOURCE_MODELS",
    "SSL",
    "ApisixEntityBase",
    "ClientTLS",
    "Configuration",
    "Consumer",
    "ConsumerGroup",
    "GlobalRule",
    "Labels",
    "ListValue",
    "Plugin",
    "PluginConfig",
    "PluginMetadata",
    "Plugins",
    "ResourceKind",
    "Route",
    "ScalarValue",
    "Service",
    "StringOrList",
    "Upstream",
    "UpstreamHealthCheck",
    "UpstreamNode",
    "UpstreamTimeout",
    "apply_plugin_defaults",
    "decode_list_response",
    "decode_nodes",
    "decode_plugin_metadata",
    "decode_plugins",
    "decode_resource",
    "decode_string_or_list",
    "deep_copy_plugins",
    "encode_nodes",
    "encode_plugin_metadata",
    "encode_plugins",
    "encode_resource",
    "encode_string_or_list",
]
