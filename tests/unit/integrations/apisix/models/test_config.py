"""Unit tests for the configuration bundle and per-kind resource codecs."""

from __future__ import annotations

import json
from typing import Any

import pytest

from apisix_sync.integrations.apisix.defaults import SchemaDefaultsProvider
from apisix_sync.integrations.apisix.exceptions import (
    InvalidIdentifierError,
    MalformedNodeError,
    MalformedValueError,
)
from apisix_sync.integrations.apisix.models.config import (
    RESOURCE_MODELS,
    Configuration,
    ResourceKind,
    decode_list_response,
    decode_resource,
    encode_resource,
)
from apisix_sync.integrations.apisix.models.plugin_metadata import PluginMetadata
from apisix_sync.integrations.apisix.models.route import Route
from apisix_sync.integrations.apisix.models.upstream import Upstream, UpstreamNode


class TestConfiguration:
    """Tests for Configuration bundle decoding and encoding."""

    @pytest.mark.unit
    def test_decodes_every_kind(self, sample_configuration: dict[str, Any]) -> None:
        """Each resource kind lands in its own list."""
        config = Configuration.from_dict(sample_configuration)

        assert config.name == "demo"
        assert len(config.services) == 1
        assert len(config.routes) == 1
        assert len(config.consumers) == 1
        assert len(config.ssls) == 1
        assert len(config.global_rules) == 1
        assert len(config.plugin_configs) == 1
        assert len(config.consumer_groups) == 1
        assert config.plugin_metadatas == [
            PluginMetadata(
                id="http-logger",
                config={"log_format": {"host": "$host", "client_ip": "$remote_addr"}},
            )
        ]
        assert config.resource_count == 8

    @pytest.mark.unit
    def test_service_nodes_normalized(self, sample_configuration: dict[str, Any]) -> None:
        """Map-shaped nodes inside services become node records."""
        config = Configuration.from_dict(sample_configuration)
        upstream = config.services[0].upstream

        assert upstream is not None
        assert upstream.nodes == [
            UpstreamNode(host="httpbin.org", port=80, weight=1),
            UpstreamNode(host="10.0.0.2", port=80, weight=3),
        ]

    @pytest.mark.unit
    def test_defaults_reach_every_plugin_mapping(
        self,
        sample_configuration: dict[str, Any],
        schema_defaults: SchemaDefaultsProvider,
    ) -> None:
        """The injected provider is applied throughout the bundle."""
        config = Configuration.from_dict(sample_configuration, schema_defaults)

        assert config.routes[0].plugins is not None
        assert config.routes[0].plugins["limit-count"]["policy"] == "local"
        assert config.consumer_groups[0].plugins["limit-count"]["count"] == 200
        assert config.consumer_groups[0].plugins["limit-count"]["rejected_code"] == 503
        assert config.plugin_configs[0].plugins["proxy-rewrite"]["headers"] == {
            "set": {},
            "remove": [],
        }

    @pytest.mark.unit
    def test_declaration_order_preserved(self) -> None:
        """Resources keep the order they were declared in."""
        config = Configuration.from_dict(
            {"routes": [{"id": "b"}, {"id": "a"}, {"id": "c"}]}
        )

        assert [route.id for route in config.routes] == ["b", "a", "c"]

    @pytest.mark.unit
    def test_json_round_trip(self, sample_configuration: dict[str, Any]) -> None:
        """A bundle decodes back to itself after encoding."""
        config = Configuration.from_dict(sample_configuration)

        again = Configuration.from_json(config.to_json())

        assert again == config

    @pytest.mark.unit
    def test_to_dict_omits_empty_kinds(self) -> None:
        """Empty resource kinds are left out of the encoded bundle."""
        config = Configuration(name="n", version="1", routes=[Route(id="1")])

        assert config.to_dict() == {
            "name": "n",
            "version": "1",
            "routes": [{"id": "1", "name": ""}],
        }

    @pytest.mark.unit
    def test_plugin_metadata_encoded_flat(self, sample_configuration: dict[str, Any]) -> None:
        """Plugin metadata appears on the wire with id beside its settings."""
        data = Configuration.from_dict(sample_configuration).to_dict()

        assert data["plugin_metadatas"] == sample_configuration["plugin_metadatas"]

    @pytest.mark.unit
    def test_codec_error_aborts_bundle(self, sample_configuration: dict[str, Any]) -> None:
        """One malformed node fails the whole bundle."""
        sample_configuration["services"][0]["upstream"]["nodes"] = {"a:b:c": 1}

        with pytest.raises(MalformedNodeError):
            Configuration.from_dict(sample_configuration)

    @pytest.mark.unit
    def test_overflowing_node_weight_aborts_bundle(self) -> None:
        """A weight that parses to infinity surfaces as a node error."""
        payload = b'{"services": [{"id": "s", "upstream": {"nodes": {"h:80": 1e400}}}]}'

        with pytest.raises(MalformedNodeError) as exc_info:
            Configuration.from_json(payload)

        assert exc_info.value.key == "h:80"

    @pytest.mark.unit
    def test_invalid_metadata_identifier_aborts_bundle(self) -> None:
        """A non-string plugin metadata id fails the whole bundle."""
        with pytest.raises(InvalidIdentifierError):
            Configuration.from_json(b'{"plugin_metadatas": [{"id": 42}]}')

    @pytest.mark.unit
    def test_from_json_requires_object(self) -> None:
        """The top level must be an object."""
        with pytest.raises(MalformedValueError):
            Configuration.from_json(b"[]")

    @pytest.mark.unit
    def test_deep_copy_is_independent(self, sample_configuration: dict[str, Any]) -> None:
        """Mutating a copied bundle never alters the original."""
        config = Configuration.from_dict(sample_configuration)

        copied = config.deep_copy()
        assert copied.routes[0].plugins is not None
        copied.routes[0].plugins["limit-count"]["count"] = 99
        copied.plugin_metadatas[0].config["log_format"]["host"] = "changed"

        assert config.routes[0].plugins is not None
        assert config.routes[0].plugins["limit-count"]["count"] == 2
        assert config.plugin_metadatas[0].config["log_format"]["host"] == "$host"


class TestResourceCodecs:
    """Tests for per-kind decode/encode helpers."""

    @pytest.mark.unit
    def test_every_kind_has_a_model(self) -> None:
        """Each resource kind maps to a model."""
        assert set(RESOURCE_MODELS) == set(ResourceKind)

    @pytest.mark.unit
    def test_bundle_keys_name_configuration_fields(self) -> None:
        """Every bundle key is a Configuration list; upstreams have none."""
        keys = {kind: kind.bundle_key for kind in ResourceKind}

        assert keys[ResourceKind.PLUGIN_METADATAS] == "plugin_metadatas"
        assert ResourceKind.PLUGIN_METADATAS.value == "plugin_metadata"
        assert keys[ResourceKind.UPSTREAMS] is None
        assert keys[ResourceKind.ROUTES] == "routes"
        bundle_fields = {key for key in keys.values() if key is not None}
        assert bundle_fields == set(Configuration.model_fields) - {"name", "version"}

    @pytest.mark.unit
    def test_decode_resource_by_name(self) -> None:
        """Kinds may be given by collection name."""
        upstream = decode_resource("upstreams", b'{"id": "1", "nodes": {"a:81": 2}}')

        assert isinstance(upstream, Upstream)
        assert upstream.nodes == [UpstreamNode(host="a", port=81, weight=2)]

    @pytest.mark.unit
    def test_unknown_kind_raises(self) -> None:
        """Unknown kinds are rejected."""
        with pytest.raises(ValueError):
            decode_resource("widgets", b"{}")

    @pytest.mark.unit
    def test_encode_resource(self) -> None:
        """encode_resource produces the entity's request body."""
        route = Route(id="1", uri="/get")

        assert json.loads(encode_resource(route)) == {"id": "1", "name": "", "uri": "/get"}

    @pytest.mark.unit
    def test_decode_plugin_metadata_resource(self) -> None:
        """Plugin metadata resources split their identifier."""
        metadata = decode_resource(ResourceKind.PLUGIN_METADATAS, b'{"id": "p", "a": 1}')

        assert isinstance(metadata, PluginMetadata)
        assert metadata.config == {"a": 1}


class TestDecodeListResponse:
    """Tests for decode_list_response."""

    @pytest.mark.unit
    def test_unwraps_values(self, schema_defaults: SchemaDefaultsProvider) -> None:
        """Each list item's value is decoded as the kind's model."""
        payload = json.dumps(
            {
                "total": 2,
                "list": [
                    {
                        "key": "/apisix/routes/1",
                        "value": {"id": "1", "uri": "/a", "plugins": {"limit-count": {}}},
                        "createdIndex": 10,
                        "modifiedIndex": 10,
                    },
                    {"key": "/apisix/routes/2", "value": {"id": "2", "uri": "/b"}},
                ],
            }
        ).encode()

        routes = decode_list_response(ResourceKind.ROUTES, payload, schema_defaults)

        assert [route.id for route in routes] == ["1", "2"]
        first = routes[0]
        assert isinstance(first, Route)
        assert first.plugins is not None
        assert first.plugins["limit-count"]["policy"] == "local"

    @pytest.mark.unit
    @pytest.mark.parametrize("payload", [b'{"total": 0, "list": {}}', b'{"total": 0}'])
    def test_empty_list_shapes(self, payload: bytes) -> None:
        """An empty list may arrive as {} or be missing."""
        assert decode_list_response("routes", payload) == []

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "payload",
        [b"[]", b'{"list": "x"}', b'{"list": [{"key": "k"}]}', b'{"list": [1]}'],
    )
    def test_malformed_envelopes_raise(self, payload: bytes) -> None:
        """Envelopes of the wrong shape are rejected."""
        with pytest.raises(MalformedValueError):
            decode_list_response("routes", payload)
