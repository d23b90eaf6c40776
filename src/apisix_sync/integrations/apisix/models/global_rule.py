"""Pydantic models for APISIX Global Rules and Plugin Configs.

Both entities are little more than a named bag of plugins: global rules run
on every request, plugin configs are bound to routes by
``plugin_config_id``.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from apisix_sync.integrations.apisix.models.base import ApisixEntityBase, Labels
from apisix_sync.integrations.apisix.models.plugin import PluginsField


class GlobalRule(ApisixEntityBase):
    """APISIX Global Rule entity model."""

    _entity_name: ClassVar[str] = "global_rule"

    id: str = ""
    plugins: PluginsField = Field(default_factory=dict)


class PluginConfig(ApisixEntityBase):
    """APISIX Plugin Config entity model.

    Attributes:
        id: Plugin config identifier.
        desc: Free-form description.
        labels: Classification labels.
        plugins: Shared plugin configuration.
    """

    _entity_name: ClassVar[str] = "plugin_config"

    id: str | None = None
    desc: str | None = None
    labels: Labels | None = None
    plugins: PluginsField = Field(default_factory=dict)
