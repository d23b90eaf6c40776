"""String-or-list values.

Several APISIX fields (most notably the expressions in a route's ``vars``)
carry either a bare string or a list of strings. The two shapes are kept as
distinct tagged variants so a value is never both at once.
"""

from __future__ import annotations

from typing import Any, Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, model_serializer

from apisix_sync.integrations.apisix.exceptions import MalformedValueError
from apisix_sync.integrations.apisix.models.base import Payload, dump_payload, load_payload


class ScalarValue(BaseModel):
    """A single string transmitted as a bare JSON string."""

    model_config = ConfigDict(frozen=True)

    value: str

    @model_serializer
    def _serialize(self) -> str:
        return self.value


class ListValue(BaseModel):
    """A list of strings transmitted as a JSON array, even with one element."""

    model_config = ConfigDict(frozen=True)

    values: tuple[str, ...]

    @model_serializer
    def _serialize(self) -> list[str]:
        return list(self.values)


StringOrList = ScalarValue | ListValue


def coerce_string_or_list(value: Any, field: str | None = None) -> StringOrList:
    """Turn a parsed JSON value into its tagged variant.

    Args:
        value: A string, a list of strings, or an existing variant.
        field: Field name used in error messages.

    Raises:
        MalformedValueError: If the value is neither a string nor a list
            of strings.
    """
    if isinstance(value, ScalarValue | ListValue):
        return value
    if isinstance(value, str):
        return ScalarValue(value=value)
    if isinstance(value, list | tuple):
        if not all(isinstance(item, str) for item in value):
            raise MalformedValueError(
                "Expected a list of strings", field=field, payload=value
            )
        return ListValue(values=tuple(value))
    raise MalformedValueError(
        f"Expected a string or a list of strings, got {type(value).__name__}",
        field=field,
        payload=value,
    )


def decode_string_or_list(payload: Payload, field: str | None = None) -> StringOrList:
    """Decode a raw string-or-list field payload.

    A payload opening with ``[`` decodes as a list; anything else must be a
    JSON string.

    Raises:
        EmptyPayloadError: If the payload is empty.
        MalformedValueError: If the payload is neither a JSON string nor a
            JSON array of strings.
    """
    data = load_payload(payload, field=field)
    opens_as_list = payload.lstrip()[:1] in (b"[", "[")
    if opens_as_list:
        if not isinstance(data, list):
            raise MalformedValueError("Expected a JSON array", field=field, payload=payload)
    elif not isinstance(data, str):
        raise MalformedValueError(
            "Expected a JSON string or array of strings", field=field, payload=payload
        )
    return coerce_string_or_list(data, field=field)


def encode_string_or_list(value: StringOrList) -> bytes:
    """Encode a tagged value back to its wire shape."""
    return dump_payload(value.model_dump())


def _coerce_vars(value: Any) -> Any:
    if value is None:
        return None
    if not isinstance(value, list):
        raise MalformedValueError("Expected a list of expressions", field="vars", payload=value)
    expressions = []
    for expression in value:
        if not isinstance(expression, list):
            raise MalformedValueError(
                "Expected each expression to be a list", field="vars", payload=expression
            )
        expressions.append([coerce_string_or_list(item, field="vars") for item in expression])
    return expressions


# Route match expressions: [["arg_name", "==", "json"], ["arg_age", "in", ["1", "2"]]]
Vars = Annotated[list[list[StringOrList]], BeforeValidator(_coerce_vars)]
