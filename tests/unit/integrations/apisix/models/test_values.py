"""Unit tests for string-or-list values."""

from __future__ import annotations

import json

import pytest

from apisix_sync.integrations.apisix.exceptions import EmptyPayloadError, MalformedValueError
from apisix_sync.integrations.apisix.models.values import (
    ListValue,
    ScalarValue,
    coerce_string_or_list,
    decode_string_or_list,
    encode_string_or_list,
)


class TestDecodeStringOrList:
    """Tests for decode_string_or_list."""

    @pytest.mark.unit
    def test_decodes_bare_string_as_scalar(self) -> None:
        """A JSON string should decode to a scalar."""
        value = decode_string_or_list(b'"arg_name"')

        assert value == ScalarValue(value="arg_name")

    @pytest.mark.unit
    def test_decodes_array_as_list(self) -> None:
        """A JSON array should decode to a list."""
        value = decode_string_or_list(b'["1", "2"]')

        assert value == ListValue(values=("1", "2"))

    @pytest.mark.unit
    def test_leading_whitespace_before_array(self) -> None:
        """The list token is detected after leading whitespace."""
        value = decode_string_or_list(b'  \n["a"]')

        assert isinstance(value, ListValue)
        assert value.values == ("a",)

    @pytest.mark.unit
    def test_accepts_str_payload(self) -> None:
        """Already decoded text payloads should be accepted."""
        assert decode_string_or_list('"x"') == ScalarValue(value="x")

    @pytest.mark.unit
    def test_empty_payload_raises(self) -> None:
        """Zero-length payloads are rejected as empty."""
        with pytest.raises(EmptyPayloadError):
            decode_string_or_list(b"")

    @pytest.mark.unit
    def test_empty_payload_is_malformed_value(self) -> None:
        """EmptyPayloadError is a kind of MalformedValueError."""
        with pytest.raises(MalformedValueError):
            decode_string_or_list(b"")

    @pytest.mark.unit
    @pytest.mark.parametrize("payload", [b"42", b"true", b"null", b'{"a": "b"}'])
    def test_non_string_scalar_raises(self, payload: bytes) -> None:
        """Numbers, booleans, null and objects are not string-or-list values."""
        with pytest.raises(MalformedValueError):
            decode_string_or_list(payload)

    @pytest.mark.unit
    def test_array_with_non_strings_raises(self) -> None:
        """Arrays must only hold strings."""
        with pytest.raises(MalformedValueError):
            decode_string_or_list(b'["a", 1]')

    @pytest.mark.unit
    def test_invalid_json_raises(self) -> None:
        """Unparsable payloads are malformed."""
        with pytest.raises(MalformedValueError):
            decode_string_or_list(b'["a"')


class TestEncodeStringOrList:
    """Tests for encode_string_or_list."""

    @pytest.mark.unit
    def test_scalar_encodes_as_string(self) -> None:
        """Scalars are emitted as bare JSON strings."""
        assert json.loads(encode_string_or_list(ScalarValue(value="GET"))) == "GET"

    @pytest.mark.unit
    def test_single_element_list_stays_a_list(self) -> None:
        """A one-element list must not collapse to a scalar."""
        encoded = encode_string_or_list(ListValue(values=("only",)))

        assert json.loads(encoded) == ["only"]
        assert decode_string_or_list(encoded) == ListValue(values=("only",))

    @pytest.mark.unit
    @pytest.mark.parametrize("items", [[], ["a"], ["a", "b", "c"], ["", "ünïcode"]])
    def test_lists_survive_decode_after_encode(self, items: list[str]) -> None:
        """decode(encode(L)) == L for string lists."""
        value = ListValue(values=tuple(items))

        decoded = decode_string_or_list(encode_string_or_list(value))

        assert isinstance(decoded, ListValue)
        assert list(decoded.values) == items


class TestCoerceStringOrList:
    """Tests for coerce_string_or_list."""

    @pytest.mark.unit
    def test_existing_variant_is_returned_unchanged(self) -> None:
        """Variants pass through untouched."""
        value = ScalarValue(value="x")

        assert coerce_string_or_list(value) is value

    @pytest.mark.unit
    def test_error_names_field(self) -> None:
        """Errors should carry the field name."""
        with pytest.raises(MalformedValueError) as exc_info:
            coerce_string_or_list(3, field="vars")

        assert exc_info.value.field == "vars"
        assert "[field: vars]" in str(exc_info.value)

    @pytest.mark.unit
    def test_variants_are_never_both(self) -> None:
        """A scalar is not a list and vice versa."""
        scalar = coerce_string_or_list("a")
        items = coerce_string_or_list(["a"])

        assert isinstance(scalar, ScalarValue)
        assert not isinstance(scalar, ListValue)
        assert isinstance(items, ListValue)
        assert not isinstance(items, ScalarValue)
