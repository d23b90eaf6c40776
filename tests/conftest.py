"""Shared pytest fixtures for apisix_sync tests."""

from __future__ import annotations

import os
from typing import Any

import pytest

from apisix_sync.integrations.apisix.defaults import SchemaDefaultsProvider

# Defaults used by the stub provider, shaped like real plugin schemas
PLUGIN_SCHEMA_DEFAULTS: dict[str, dict[str, Any]] = {
    "limit-count": {
        "policy": "local",
        "rejected_code": 503,
        "show_limit_quota_header": True,
    },
    "proxy-rewrite": {
        "use_real_request_uri_unsafe": False,
        "headers": {"set": {}, "remove": []},
    },
}


@pytest.fixture
def schema_defaults() -> SchemaDefaultsProvider:
    """Defaults provider stub backed by PLUGIN_SCHEMA_DEFAULTS."""
    return SchemaDefaultsProvider(PLUGIN_SCHEMA_DEFAULTS)


@pytest.fixture
def recording_defaults() -> tuple[list[str], Any]:
    """Defaults provider that records the plugin names it was asked about."""
    calls: list[str] = []

    def provider(name: str, supplied: dict[str, Any]) -> dict[str, Any]:
        calls.append(name)
        return {"_defaulted": True, **supplied}

    return calls, provider


@pytest.fixture
def sample_configuration() -> dict[str, Any]:
    """A configuration tree touching every resource kind."""
    return {
        "name": "demo",
        "version": "1.0.0",
        "services": [
            {
                "id": "svc-1",
                "name": "httpbin",
                "hosts": ["httpbin.org"],
                "upstream": {
                    "type": "roundrobin",
                    "nodes": {"httpbin.org:80": 1, "10.0.0.2": 3},
                },
            }
        ],
        "routes": [
            {
                "id": "route-1",
                "name": "get",
                "uri": "/get",
                "methods": ["GET"],
                "service_id": "svc-1",
                "vars": [["arg_name", "==", "json"], ["arg_age", "in", ["1", "2"]]],
                "plugins": {"limit-count": {"count": 2, "time_window": 60}},
            }
        ],
        "consumers": [{"username": "jack", "plugins": {"key-auth": {"key": "auth-one"}}}],
        "ssls": [{"id": "ssl-1", "snis": ["example.com"], "cert": "CERT", "key": "KEY"}],
        "global_rules": [{"id": "1", "plugins": {"prometheus": {}}}],
        "plugin_configs": [{"id": "pc-1", "plugins": {"proxy-rewrite": {"uri": "/anything"}}}],
        "consumer_groups": [{"id": "company_a", "plugins": {"limit-count": {"count": 200}}}],
        "plugin_metadatas": [
            {"id": "http-logger", "log_format": {"host": "$host", "client_ip": "$remote_addr"}}
        ],
    }


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset environment variables for each test."""
    for key in list(os.environ.keys()):
        if key.startswith("ADC_"):
            monkeypatch.delenv(key, raising=False)
