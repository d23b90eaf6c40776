"""Pydantic models for APISIX Consumers and Consumer Groups."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from apisix_sync.integrations.apisix.models.base import ApisixEntityBase, Labels
from apisix_sync.integrations.apisix.models.plugin import PluginsField


class Consumer(ApisixEntityBase):
    """APISIX Consumer entity model.

    Consumers are identified by username; authentication plugins in
    ``plugins`` hold their credentials.

    Attributes:
        username: Unique consumer name.
        desc: Free-form description.
        labels: Classification labels.
        plugins: Consumer-level plugin configuration.
        group_id: Consumer group the consumer belongs to.
    """

    _entity_name: ClassVar[str] = "consumer"

    username: str = ""
    desc: str | None = None
    labels: Labels | None = None
    plugins: PluginsField | None = None
    group_id: str | None = None


class ConsumerGroup(ApisixEntityBase):
    """APISIX Consumer Group entity model.

    Attributes:
        id: Group identifier.
        desc: Free-form description.
        labels: Classification labels.
        plugins: Plugins applied to every consumer of the group.
    """

    _entity_name: ClassVar[str] = "consumer_group"

    id: str | None = None
    desc: str | None = None
    labels: Labels | None = None
    plugins: PluginsField = Field(default_factory=dict)
