"""Pydantic models for APISIX upstreams and their nodes.

An upstream is a load-balanced pool of backend nodes. The Admin API sends
``nodes`` in one of two shapes:

    [{"host": "10.0.0.1", "port": 8080, "weight": 5}]
    {"10.0.0.1:8080": 5}

The gateway encodes an empty node list as ``{}`` because its JSON encoder
cannot tell an empty array from an empty table, and the compact map form is
also accepted from configuration files. Both shapes decode to the same list
of ``UpstreamNode``; encoding always produces the array form.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from typing import Annotated, Any, ClassVar

import structlog
from pydantic import (
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StrictInt,
    ValidationError,
)

from apisix_sync.integrations.apisix.exceptions import MalformedNodeError
from apisix_sync.integrations.apisix.models.base import (
    ApisixEntityBase,
    Payload,
    dump_payload,
    load_payload,
)

logger = structlog.get_logger()

# Port assumed for a compact node key without one
DEFAULT_NODE_PORT = 80
# Weight used for load distribution when a node does not carry one
DEFAULT_NODE_WEIGHT = 1


class UpstreamNode(BaseModel):
    """A single backend endpoint of an upstream.

    Attributes:
        host: Backend host name or IP address.
        port: Backend port.
        weight: Load balancing weight; 0 takes the node out of rotation.
    """

    model_config = ConfigDict(extra="ignore")

    # Record-shaped nodes must carry JSON integers; "80" or true are rejected
    host: str | None = None
    port: StrictInt | None = Field(default=None, ge=0, le=65535)
    weight: StrictInt | None = Field(default=None, ge=0)

    @property
    def effective_weight(self) -> int:
        """Weight to use for load distribution."""
        return DEFAULT_NODE_WEIGHT if self.weight is None else self.weight

    @property
    def address(self) -> str:
        """``host:port`` form of the node, as used for compact map keys."""
        port = DEFAULT_NODE_PORT if self.port is None else self.port
        return f"{self.host or ''}:{port}"


def _parse_weight(key: str, value: Any) -> int:
    # bool is an int subclass but never a valid weight
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise MalformedNodeError("Non-numeric weight for upstream node", key=key, payload=value)
    if not math.isfinite(value):
        raise MalformedNodeError("Non-finite weight for upstream node", key=key, payload=value)
    weight = int(value)
    if weight < 0:
        raise MalformedNodeError("Negative weight for upstream node", key=key, payload=value)
    return weight


def node_from_map_entry(key: str, value: Any) -> UpstreamNode:
    """Build a node from one ``"host[:port]": weight`` map entry.

    Raises:
        MalformedNodeError: If the key has more than one colon, the port is
            not numeric, or the weight is not a non-negative number.
    """
    parts = key.split(":")
    if len(parts) > 2:
        raise MalformedNodeError("Invalid upstream node", key=key)

    host = parts[0]
    port = str(DEFAULT_NODE_PORT) if len(parts) == 1 else parts[1]
    if not port.isascii() or not port.isdigit():
        raise MalformedNodeError("Failed to parse port of upstream node", key=key)

    try:
        return UpstreamNode(host=host, port=int(port), weight=_parse_weight(key, value))
    except ValidationError as e:
        raise MalformedNodeError("Invalid upstream node", key=key, payload=value) from e


def coerce_nodes(value: Any) -> list[UpstreamNode]:
    """Normalize either wire shape of ``nodes`` into a list of nodes.

    Map-shaped input keeps the key order of the source object. ``null`` is
    an empty node set.

    Raises:
        MalformedNodeError: If the value is neither shape or an entry is invalid.
    """
    if value is None:
        return []

    if isinstance(value, Mapping):
        nodes = [node_from_map_entry(str(key), weight) for key, weight in value.items()]
        logger.debug("node_map_decoded", count=len(nodes))
        return nodes

    if isinstance(value, list | tuple):
        nodes = []
        for item in value:
            if isinstance(item, UpstreamNode):
                nodes.append(item)
                continue
            if not isinstance(item, Mapping):
                raise MalformedNodeError("Expected an object for upstream node", payload=item)
            try:
                nodes.append(UpstreamNode.model_validate(item))
            except ValidationError as e:
                raise MalformedNodeError("Invalid upstream node", payload=item) from e
        return nodes

    raise MalformedNodeError(
        f"Expected an array or object of nodes, got {type(value).__name__}", payload=value
    )


def decode_nodes(payload: Payload) -> list[UpstreamNode]:
    """Decode a raw ``nodes`` payload.

    Raises:
        EmptyPayloadError: If the payload is empty.
        MalformedNodeError: If the payload is not a valid node set.
    """
    return coerce_nodes(load_payload(payload, field="nodes"))


def encode_nodes(nodes: Iterable[UpstreamNode]) -> bytes:
    """Encode nodes in the array-of-records shape."""
    return dump_payload([node.model_dump(exclude_none=True) for node in nodes])


UpstreamNodes = Annotated[list[UpstreamNode], BeforeValidator(coerce_nodes)]


class UpstreamTimeout(BaseModel):
    """Connect/send/read timeouts in seconds."""

    model_config = ConfigDict(extra="ignore")

    connect: int = 0
    send: int = 0
    read: int = 0


class ClientTLS(BaseModel):
    """Client certificate and key used for mTLS towards the nodes."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    cert: str | None = Field(default=None, alias="client_cert")
    key: str | None = Field(default=None, alias="client_key")


class PassiveHealthy(BaseModel):
    """Conditions marking a node healthy from live traffic."""

    model_config = ConfigDict(extra="ignore")

    http_statuses: list[int] | None = None
    successes: int | None = None


class PassiveUnhealthy(BaseModel):
    """Conditions marking a node unhealthy from live traffic."""

    model_config = ConfigDict(extra="ignore")

    http_statuses: list[int] | None = None
    http_failures: int | None = None
    tcp_failures: int | None = None
    timeouts: int | None = None


class ActiveHealthy(PassiveHealthy):
    """Conditions marking a node healthy from active probes."""

    interval: int | None = None


class ActiveUnhealthy(PassiveUnhealthy):
    """Conditions marking a node unhealthy from active probes."""

    interval: int | None = None


class ActiveHealthCheck(BaseModel):
    """Active health check probing each node."""

    model_config = ConfigDict(extra="ignore")

    type: str | None = None
    timeout: int | None = None
    concurrency: int | None = None
    host: str | None = None
    port: int | None = None
    http_path: str | None = None
    https_verify_certificate: bool | None = None
    req_headers: list[str] | None = None
    healthy: ActiveHealthy | None = None
    unhealthy: ActiveUnhealthy | None = None


class PassiveHealthCheck(BaseModel):
    """Passive health check driven by proxied traffic."""

    model_config = ConfigDict(extra="ignore")

    type: str | None = None
    healthy: PassiveHealthy | None = None
    unhealthy: PassiveUnhealthy | None = None


class UpstreamHealthCheck(BaseModel):
    """Active and/or passive health checks of an upstream."""

    model_config = ConfigDict(extra="ignore")

    active: ActiveHealthCheck | None = None
    passive: PassiveHealthCheck | None = None


class Upstream(ApisixEntityBase):
    """APISIX upstream entity model.

    Attributes:
        id: Upstream identifier.
        name: Upstream name.
        type: Load balancing algorithm (roundrobin, chash, ewma, least_conn).
        hash_on: Hash input for ``chash``.
        key: Hash key for ``chash``.
        checks: Health check configuration.
        nodes: Backend nodes.
        scheme: Protocol used to talk to the nodes.
        retries: Number of retries on failure.
        timeout: Connect/send/read timeouts.
        tls: Client certificate for mTLS towards the nodes.
        pass_host: How the Host header is passed to the nodes.
        service_name: Service name for service discovery.
        discovery_type: Service discovery backend.
        discovery_args: Extra service discovery arguments.
    """

    _entity_name: ClassVar[str] = "upstream"

    # Unset for upstreams embedded in a service
    id: str | None = None
    name: str | None = None
    type: str | None = None
    hash_on: str | None = None
    key: str | None = None
    checks: UpstreamHealthCheck | None = None
    nodes: UpstreamNodes = Field(default_factory=list)
    scheme: str | None = None
    retries: int | None = None
    timeout: UpstreamTimeout | None = None
    tls: ClientTLS | None = None
    # Older tooling wrote "passhost"; it is read but always written as pass_host
    pass_host: str | None = Field(
        default=None, validation_alias=AliasChoices("pass_host", "passhost")
    )

    # Service discovery
    service_name: str | None = None
    discovery_type: str | None = None
    discovery_args: dict[str, str] | None = None
