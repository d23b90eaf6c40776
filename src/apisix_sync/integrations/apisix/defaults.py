"""Plugin default-value providers.

A provider is any callable ``(plugin_name, supplied_config) -> merged_config``.
The plugin schema registry that knows real defaults lives outside this
package; the codecs only ever see the injected callable, so tests can pass a
stub and a sync run can pass a provider backed by the gateway's schemas.

Providers must be pure: they may not mutate ``supplied_config`` and must
return it unchanged for plugin names they do not know.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping
from typing import Any

import structlog

logger = structlog.get_logger()

DefaultsProvider = Callable[[str, dict[str, Any]], dict[str, Any]]


def passthrough_defaults(name: str, supplied: dict[str, Any]) -> dict[str, Any]:
    """Provider that knows no plugin and returns the supplied config."""
    return supplied


def merge_defaults(defaults: Mapping[str, Any], supplied: Mapping[str, Any]) -> dict[str, Any]:
    """Merge supplied values over schema defaults.

    Nested mappings are merged recursively; any other supplied value
    (including lists and ``None``) replaces the default outright. Neither
    input is modified.

    Example:
        >>> merge_defaults({"a": 1, "b": {"c": 2, "d": 3}}, {"b": {"c": 5}})
        {'a': 1, 'b': {'c': 5, 'd': 3}}
    """
    merged = copy.deepcopy(dict(defaults))
    for key, value in supplied.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_defaults(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class SchemaDefaultsProvider:
    """Provider backed by a static mapping of plugin name to defaults.

    Attributes:
        schemas: Plugin name to default config record.

    Example:
        >>> provider = SchemaDefaultsProvider({"limit-count": {"policy": "local"}})
        >>> provider("limit-count", {"count": 2})
        {'policy': 'local', 'count': 2}
    """

    def __init__(self, schemas: Mapping[str, Mapping[str, Any]]) -> None:
        # Snapshot so later changes to the caller's mapping are not observed
        self.schemas: dict[str, dict[str, Any]] = {
            name: copy.deepcopy(dict(defaults)) for name, defaults in schemas.items()
        }

    def __contains__(self, name: object) -> bool:
        return name in self.schemas

    def __call__(self, name: str, supplied: dict[str, Any]) -> dict[str, Any]:
        defaults = self.schemas.get(name)
        if defaults is None:
            logger.debug("plugin_defaults_unknown_plugin", plugin=name)
            return supplied
        return merge_defaults(defaults, supplied)
