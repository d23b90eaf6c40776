"""Plugin configuration codec.

Routes, services, consumers and the other plugin-bearing entities carry a
``plugins`` object mapping plugin name to a plugin-defined config record.
Decoding runs every record through a default-value provider so the decoded
config always contains the plugin's schema defaults, with user-supplied
values taking precedence.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Annotated, Any

import structlog
from pydantic import BeforeValidator, ValidationInfo

from apisix_sync.integrations.apisix.defaults import DefaultsProvider, passthrough_defaults
from apisix_sync.integrations.apisix.exceptions import MalformedValueError
from apisix_sync.integrations.apisix.models.base import (
    Payload,
    defaults_from_info,
    dump_payload,
    load_payload,
)

logger = structlog.get_logger()

Plugin = dict[str, Any]
Plugins = dict[str, Plugin]


def apply_plugin_defaults(
    plugins: Mapping[str, Any],
    defaults: DefaultsProvider | None = None,
    field: str = "plugins",
) -> Plugins:
    """Validate a parsed plugin mapping and merge schema defaults into it.

    Args:
        plugins: Plugin name to config record.
        defaults: Default-value provider. Unknown plugins pass through.
        field: Field name used in error messages.

    Returns:
        New mapping of plugin name to merged config.

    Raises:
        MalformedValueError: If the mapping or one of its records is not a
            JSON object.
    """
    if not isinstance(plugins, Mapping):
        raise MalformedValueError(
            f"Expected an object of plugins, got {type(plugins).__name__}",
            field=field,
            payload=plugins,
        )
    provider = defaults or passthrough_defaults

    result: Plugins = {}
    for name, config in plugins.items():
        if config is None:
            config = {}
        if not isinstance(config, Mapping):
            raise MalformedValueError(
                f"Expected an object for plugin {name!r}", field=field, payload=config
            )
        result[name] = provider(name, dict(config))

    logger.debug("plugin_defaults_applied", plugins=list(result))
    return result


def decode_plugins(
    payload: Payload,
    defaults: DefaultsProvider | None = None,
) -> Plugins:
    """Decode a raw ``plugins`` payload.

    Raises:
        EmptyPayloadError: If the payload is empty.
        MalformedValueError: If the payload is not an object of objects.
    """
    return apply_plugin_defaults(load_payload(payload, field="plugins"), defaults)


def encode_plugins(plugins: Mapping[str, Mapping[str, Any]]) -> bytes:
    """Encode a plugin mapping to JSON bytes."""
    return dump_payload(plugins)


def deep_copy_plugins(plugins: Mapping[str, Mapping[str, Any]] | None) -> Plugins | None:
    """Return a fully independent copy of a plugin mapping.

    Plugin records nest dicts and lists; a shallow copy would share them.
    Hand each concurrent consumer its own copy instead of the decoded one.
    """
    if plugins is None:
        return None
    return {name: copy.deepcopy(dict(config)) for name, config in plugins.items()}


def _validate_plugins(value: Any, info: ValidationInfo) -> Any:
    if value is None:
        return None
    return apply_plugin_defaults(value, defaults_from_info(info), field=info.field_name or "plugins")


PluginsField = Annotated[Plugins, BeforeValidator(_validate_plugins)]
