"""Plugin metadata codec and model.

Plugin metadata is a plugin-defined settings object whose only statically
known field is its identifier (the plugin name). On the wire the identifier
sits next to the settings rather than in an envelope:

    {"id": "http-logger", "log_format": {"host": "$host"}}

Decoding lifts ``id`` out of the object so the remaining settings stay
clean; encoding puts it back on a copy, leaving the in-memory settings
untouched.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, ClassVar, Self

import structlog
from pydantic import Field, model_serializer, model_validator

from apisix_sync.integrations.apisix.exceptions import InvalidIdentifierError, MalformedValueError
from apisix_sync.integrations.apisix.models.base import (
    ApisixEntityBase,
    Payload,
    dump_payload,
    load_payload,
)

if TYPE_CHECKING:
    from apisix_sync.integrations.apisix.defaults import DefaultsProvider

logger = structlog.get_logger()

ID_FIELD = "id"
CONFIG_FIELD = "config"


def split_identifier(data: Mapping[str, Any], payload: Any = None) -> tuple[str, dict[str, Any]]:
    """Separate the ``id`` field from the rest of a parsed object.

    Args:
        data: Parsed JSON object. It is not modified.
        payload: Original payload, quoted in error messages. Defaults to
            ``data``.

    Returns:
        Tuple of identifier (empty when absent) and the remaining record.

    Raises:
        InvalidIdentifierError: If ``id`` is present but not a string.
    """
    record = dict(data)
    if ID_FIELD not in record:
        return "", record
    identifier = record.pop(ID_FIELD)
    if not isinstance(identifier, str):
        raise InvalidIdentifierError(data if payload is None else payload)
    return identifier, record


def join_identifier(identifier: str, record: Mapping[str, Any]) -> dict[str, Any]:
    """Return a new wire object with ``id`` placed beside the record fields."""
    joined: dict[str, Any] = {ID_FIELD: identifier}
    joined.update((key, value) for key, value in record.items() if key != ID_FIELD)
    return joined


def decode_plugin_metadata(payload: Payload) -> tuple[str, dict[str, Any]]:
    """Decode raw plugin metadata into identifier and settings.

    Raises:
        EmptyPayloadError: If the payload is empty.
        MalformedValueError: If the payload is not a JSON object.
        InvalidIdentifierError: If ``id`` is not a JSON string.
    """
    data = load_payload(payload, field="plugin_metadata")
    if not isinstance(data, dict):
        raise MalformedValueError(
            "Expected a JSON object for plugin metadata",
            field="plugin_metadata",
            payload=payload,
        )
    identifier, record = split_identifier(data, payload)
    logger.debug("plugin_metadata_decoded", id=identifier, fields=len(record))
    return identifier, record


def encode_plugin_metadata(identifier: str, record: Mapping[str, Any]) -> bytes:
    """Encode identifier and settings as one flat JSON object."""
    return dump_payload(join_identifier(identifier, record))


class PluginMetadata(ApisixEntityBase):
    """APISIX plugin metadata entity.

    Validation accepts both the split fields (``id`` and ``config``) and the
    flat wire object. A mapping holding nothing but ``id`` and a ``config``
    object is read as split fields; ``from_payload``/``from_json`` and the
    ``Configuration`` bundle always treat their input as wire data, so a
    setting literally named ``config`` survives those paths.

    Attributes:
        id: Plugin name the metadata belongs to.
        config: Plugin-defined settings, without ``id``.
    """

    _entity_name: ClassVar[str] = "plugin_metadata"

    id: str = ""
    config: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _split_flat_object(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        if isinstance(data.get(CONFIG_FIELD), Mapping) and set(data) <= {ID_FIELD, CONFIG_FIELD}:
            return data
        identifier, record = split_identifier(data)
        return {ID_FIELD: identifier, CONFIG_FIELD: record}

    @model_serializer
    def _serialize(self) -> dict[str, Any]:
        return join_identifier(self.id, self.config)

    @classmethod
    def from_payload(
        cls,
        data: Mapping[str, Any],
        defaults: DefaultsProvider | None = None,
    ) -> Self:
        """Split a flat wire object into identifier and settings."""
        if not isinstance(data, Mapping):
            raise MalformedValueError(
                "Expected a JSON object for plugin metadata",
                field=cls._entity_name,
                payload=data,
            )
        identifier, record = split_identifier(data)
        return cls(id=identifier, config=record)


def coerce_plugin_metadatas(value: Any) -> Any:
    """Convert flat wire objects in a list to ``PluginMetadata`` instances."""
    if not isinstance(value, list):
        return value
    return [
        item if isinstance(item, PluginMetadata) else PluginMetadata.from_payload(item)
        for item in value
    ]
