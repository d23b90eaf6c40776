"""Pydantic models for APISIX Routes.

A Route matches client requests (by host, URI, method, remote address and
``vars`` expressions) and forwards them to an upstream, either directly or
through a Service.
"""

from __future__ import annotations

from typing import ClassVar

from apisix_sync.integrations.apisix.models.base import ApisixEntityBase, Labels
from apisix_sync.integrations.apisix.models.plugin import PluginsField
from apisix_sync.integrations.apisix.models.upstream import UpstreamTimeout
from apisix_sync.integrations.apisix.models.values import Vars


class Route(ApisixEntityBase):
    """APISIX Route entity model.

    Attributes:
        id: Route identifier.
        name: Route name.
        labels: Classification labels.
        desc: Free-form description.
        host: Single host to match.
        hosts: Hosts to match.
        uri: Single URI to match.
        uris: URIs to match.
        priority: Match priority when several routes overlap.
        timeout: Connect/send/read timeouts towards the upstream.
        vars: Match expressions, each a list of string-or-list values.
        methods: HTTP methods to match.
        enable_websocket: Whether to proxy websocket upgrades.
        remote_addrs: Client addresses to match.
        upstream_id: Upstream to forward to.
        service_id: Service the route belongs to.
        plugins: Route-level plugin configuration.
        plugin_config_id: Shared plugin config to bind.
        filter_func: Lua function used as an extra matcher.
    """

    _entity_name: ClassVar[str] = "route"

    id: str = ""
    name: str = ""
    labels: Labels | None = None
    desc: str | None = None

    # Matching
    host: str | None = None
    hosts: list[str] | None = None
    uri: str | None = None
    uris: list[str] | None = None
    priority: int | None = None
    vars: Vars | None = None
    methods: list[str] | None = None
    remote_addrs: list[str] | None = None
    filter_func: str | None = None

    # Forwarding
    timeout: UpstreamTimeout | None = None
    enable_websocket: bool | None = None
    upstream_id: str | None = None
    service_id: str | None = None

    # Plugins
    plugins: PluginsField | None = None
    plugin_config_id: str | None = None
