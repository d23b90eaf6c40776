"""Base models and JSON payload helpers for APISIX entities.

APISIX entities are exchanged with the Admin API as JSON objects. Optional
fields are left out of request bodies when unset, and server-managed fields
such as ``create_time`` and ``update_time`` are ignored when decoding.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict, ValidationInfo

from apisix_sync.integrations.apisix.exceptions import EmptyPayloadError, MalformedValueError

if TYPE_CHECKING:
    from apisix_sync.integrations.apisix.defaults import DefaultsProvider

# Validation context key under which the plugin default-value provider travels
PLUGIN_DEFAULTS_CONTEXT_KEY = "plugin_defaults"

Labels = dict[str, str]

Payload = bytes | bytearray | str


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not a valid JSON number")


def load_payload(payload: Payload, field: str | None = None) -> Any:
    """Parse a raw JSON field payload.

    Args:
        payload: UTF-8 JSON bytes (or an already decoded string).
        field: Field name used in error messages.

    Returns:
        The generic JSON tree.

    Raises:
        EmptyPayloadError: If the payload is zero-length or only whitespace.
        MalformedValueError: If the payload is not valid JSON. The non-standard
            ``NaN`` and ``Infinity`` literals count as invalid.
    """
    if not payload or not payload.strip():
        raise EmptyPayloadError(field=field)
    try:
        return json.loads(payload, parse_constant=_reject_constant)
    except ValueError as e:
        raise MalformedValueError(f"Invalid JSON payload: {e}", field=field, payload=payload) from e


def dump_payload(value: Any) -> bytes:
    """Serialize a generic JSON tree to compact UTF-8 bytes."""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def plugin_context(defaults: DefaultsProvider | None) -> dict[str, Any] | None:
    """Build the pydantic validation context carrying a defaults provider."""
    if defaults is None:
        return None
    return {PLUGIN_DEFAULTS_CONTEXT_KEY: defaults}


def defaults_from_info(info: ValidationInfo | None) -> DefaultsProvider | None:
    """Pull the defaults provider out of a validator's context, if any."""
    if info is None or not isinstance(info.context, Mapping):
        return None
    provider: DefaultsProvider | None = info.context.get(PLUGIN_DEFAULTS_CONTEXT_KEY)
    return provider


class ApisixEntityBase(BaseModel):
    """Base class for all APISIX entity models.

    Subclasses declare wire fields as pydantic fields. Fields that the
    Admin API treats as optional default to ``None`` and are dropped from
    encoded payloads; required fields always appear.
    """

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
    )

    # Subclasses should define this for better log and error messages
    _entity_name: ClassVar[str] = "entity"

    def to_payload(self) -> dict[str, Any]:
        """Convert the model to an Admin API request body.

        Returns:
            JSON-compatible dictionary without unset optional fields.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self) -> bytes:
        """Encode the model as UTF-8 JSON bytes."""
        return dump_payload(self.to_payload())

    @classmethod
    def from_payload(
        cls,
        data: Mapping[str, Any],
        defaults: DefaultsProvider | None = None,
    ) -> Self:
        """Validate an already parsed Admin API object.

        Args:
            data: Generic JSON object.
            defaults: Plugin default-value provider applied to every
                plugin mapping inside the entity.

        Returns:
            The validated entity.
        """
        return cls.model_validate(data, context=plugin_context(defaults))

    @classmethod
    def from_json(
        cls,
        payload: Payload,
        defaults: DefaultsProvider | None = None,
    ) -> Self:
        """Decode an entity from raw Admin API bytes.

        Raises:
            MalformedValueError: If the payload is not a JSON object.
        """
        data = load_payload(payload, field=cls._entity_name)
        if not isinstance(data, dict):
            raise MalformedValueError(
                f"Expected a JSON object for {cls._entity_name}",
                field=cls._entity_name,
                payload=payload,
            )
        return cls.from_payload(data, defaults)
