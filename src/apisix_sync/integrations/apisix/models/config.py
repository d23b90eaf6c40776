"""Declarative configuration bundle and per-kind resource codecs.

A ``Configuration`` is the unit exchanged with the configuration-source
loader: every APISIX resource the tool manages, grouped by kind, in
declaration order. The module also maps each ``ResourceKind`` to its model
so the transport layer can hand over raw Admin API bytes per kind.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from enum import StrEnum
from typing import TYPE_CHECKING, Annotated, Any, Self

import structlog
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from apisix_sync.integrations.apisix.exceptions import MalformedValueError
from apisix_sync.integrations.apisix.models.base import (
    ApisixEntityBase,
    Payload,
    dump_payload,
    load_payload,
    plugin_context,
)
from apisix_sync.integrations.apisix.models.consumer import Consumer, ConsumerGroup
from apisix_sync.integrations.apisix.models.global_rule import GlobalRule, PluginConfig
from apisix_sync.integrations.apisix.models.plugin_metadata import (
    PluginMetadata,
    coerce_plugin_metadatas,
)
from apisix_sync.integrations.apisix.models.route import Route
from apisix_sync.integrations.apisix.models.service import Service
from apisix_sync.integrations.apisix.models.ssl import SSL
from apisix_sync.integrations.apisix.models.upstream import Upstream

if TYPE_CHECKING:
    from apisix_sync.integrations.apisix.defaults import DefaultsProvider

logger = structlog.get_logger()


class ResourceKind(StrEnum):
    """APISIX Admin API resource kinds.

    The value is the Admin API collection path (``/apisix/admin/<value>``).
    ``bundle_key`` names the matching list in a ``Configuration``. The two
    differ for plugin metadata, whose collection path is singular, and
    upstreams have no list of their own because the bundle embeds them in
    services.
    """

    ROUTES = "routes"
    SERVICES = "services"
    UPSTREAMS = "upstreams"
    CONSUMERS = "consumers"
    SSLS = "ssls"
    GLOBAL_RULES = "global_rules"
    PLUGIN_CONFIGS = "plugin_configs"
    CONSUMER_GROUPS = "consumer_groups"
    PLUGIN_METADATAS = "plugin_metadata"

    @property
    def bundle_key(self) -> str | None:
        """Field name of this kind in a ``Configuration``, if it has one."""
        if self is ResourceKind.UPSTREAMS:
            return None
        if self is ResourceKind.PLUGIN_METADATAS:
            return "plugin_metadatas"
        return self.value


RESOURCE_MODELS: dict[ResourceKind, type[ApisixEntityBase]] = {
    ResourceKind.ROUTES: Route,
    ResourceKind.SERVICES: Service,
    ResourceKind.UPSTREAMS: Upstream,
    ResourceKind.CONSUMERS: Consumer,
    ResourceKind.SSLS: SSL,
    ResourceKind.GLOBAL_RULES: GlobalRule,
    ResourceKind.PLUGIN_CONFIGS: PluginConfig,
    ResourceKind.CONSUMER_GROUPS: ConsumerGroup,
    ResourceKind.PLUGIN_METADATAS: PluginMetadata,
}


def decode_resource(
    kind: ResourceKind | str,
    payload: Payload,
    defaults: DefaultsProvider | None = None,
) -> ApisixEntityBase:
    """Decode a single resource of the given kind from Admin API bytes.

    Args:
        kind: Resource kind, as enum or collection name.
        payload: Raw JSON object.
        defaults: Plugin default-value provider.

    Returns:
        The validated entity model.
    """
    model = RESOURCE_MODELS[ResourceKind(kind)]
    return model.from_json(payload, defaults)


def encode_resource(entity: ApisixEntityBase) -> bytes:
    """Encode a resource as an Admin API request body."""
    return entity.to_json()


def decode_list_response(
    kind: ResourceKind | str,
    payload: Payload,
    defaults: DefaultsProvider | None = None,
) -> list[ApisixEntityBase]:
    """Decode an Admin API v3 list response.

    The response wraps every resource in an etcd node envelope::

        {"total": 1, "list": [{"key": "/apisix/routes/1", "value": {...}}]}

    An empty ``list`` may arrive as ``{}``, the same way empty node sets do.

    Raises:
        MalformedValueError: If the envelope does not have this shape.
    """
    kind = ResourceKind(kind)
    model = RESOURCE_MODELS[kind]
    data = load_payload(payload, field=kind.value)
    if not isinstance(data, dict):
        raise MalformedValueError("Expected a list response object", field=kind.value, payload=payload)

    items = data.get("list") or []
    if not isinstance(items, list):
        raise MalformedValueError("Expected 'list' to be an array", field=kind.value, payload=payload)

    entities: list[ApisixEntityBase] = []
    for item in items:
        if not isinstance(item, Mapping) or not isinstance(item.get("value"), Mapping):
            raise MalformedValueError(
                "Expected list items with an object 'value'", field=kind.value, payload=item
            )
        entities.append(model.from_payload(item["value"], defaults))

    logger.debug("list_response_decoded", kind=kind.value, count=len(entities))
    return entities


class Configuration(BaseModel):
    """Full declarative configuration of an APISIX gateway.

    Attributes:
        name: Configuration name.
        version: Configuration version.
        services: Service definitions.
        routes: Route definitions.
        consumers: Consumer definitions.
        ssls: SSL certificate bundles.
        global_rules: Global rules.
        plugin_configs: Shared plugin configs.
        consumer_groups: Consumer groups.
        plugin_metadatas: Plugin metadata objects.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str = ""
    version: str = ""

    services: list[Service] = Field(default_factory=list)
    routes: list[Route] = Field(default_factory=list)
    consumers: list[Consumer] = Field(default_factory=list)
    ssls: list[SSL] = Field(default_factory=list)
    global_rules: list[GlobalRule] = Field(default_factory=list)
    plugin_configs: list[PluginConfig] = Field(default_factory=list)
    consumer_groups: list[ConsumerGroup] = Field(default_factory=list)
    plugin_metadatas: Annotated[
        list[PluginMetadata], BeforeValidator(coerce_plugin_metadatas)
    ] = Field(default_factory=list)

    @property
    def resource_count(self) -> int:
        """Total number of resources across all kinds."""
        return sum(
            len(getattr(self, kind.bundle_key)) for kind in ResourceKind if kind.bundle_key
        )

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        defaults: DefaultsProvider | None = None,
    ) -> Self:
        """Validate a parsed configuration tree.

        Any codec error aborts the whole bundle.
        """
        config = cls.model_validate(data, context=plugin_context(defaults))
        logger.debug("configuration_decoded", name=config.name, resources=config.resource_count)
        return config

    @classmethod
    def from_json(
        cls,
        payload: Payload,
        defaults: DefaultsProvider | None = None,
    ) -> Self:
        """Decode a configuration from JSON bytes."""
        data = load_payload(payload, field="configuration")
        if not isinstance(data, dict):
            raise MalformedValueError(
                "Expected a JSON object for configuration",
                field="configuration",
                payload=payload,
            )
        return cls.from_dict(data, defaults)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible tree, omitting empty resource kinds."""
        data = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        return {key: value for key, value in data.items() if value != []}

    def to_json(self) -> bytes:
        """Encode the configuration as JSON bytes."""
        return dump_payload(self.to_dict())

    def deep_copy(self) -> Self:
        """Return an independent copy sharing no mutable state."""
        return copy.deepcopy(self)
