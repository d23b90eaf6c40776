"""Pydantic models for APISIX Services.

A Service groups the upstream and plugin settings shared by several
routes.
"""

from __future__ import annotations

from typing import ClassVar

from apisix_sync.integrations.apisix.models.base import ApisixEntityBase, Labels
from apisix_sync.integrations.apisix.models.plugin import PluginsField
from apisix_sync.integrations.apisix.models.upstream import Upstream


class Service(ApisixEntityBase):
    """APISIX Service entity model.

    Attributes:
        id: Service identifier.
        name: Service name.
        desc: Free-form description.
        labels: Classification labels.
        hosts: HTTP hosts served.
        plugins: Service-level plugin configuration.
        upstream: Inline upstream definition.
        upstream_id: Reference to a standalone upstream.
        enable_websocket: Whether to proxy websocket upgrades.
    """

    _entity_name: ClassVar[str] = "service"

    id: str = ""
    name: str = ""
    desc: str | None = None
    labels: Labels | None = None
    hosts: list[str] | None = None
    plugins: PluginsField | None = None
    upstream: Upstream | None = None
    upstream_id: str | None = None
    enable_websocket: bool | None = None
