"""APISIX Admin API connection configuration models."""

from __future__ import annotations

import os
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

logger = structlog.get_logger()

_TRUE_VALUES = {"1", "true", "yes", "on"}


class ApisixClientConfig(BaseModel):
    """Connection settings for the APISIX Admin API.

    Attributes:
        server: Admin API base URL.
        token: Admin API key sent as ``X-API-KEY``.
        ca_path: CA bundle for mTLS.
        cert: Client certificate for mTLS.
        cert_key: Client certificate key for mTLS.
        insecure: Skip server certificate verification.
    """

    model_config = ConfigDict(extra="forbid")

    server: str = "http://127.0.0.1:9180"
    token: str = ""
    ca_path: str | None = None
    cert: str | None = None
    cert_key: str | None = None
    insecure: bool = False

    @field_validator("server")
    @classmethod
    def validate_server(cls, v: str) -> str:
        """Validate server URL format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("server must start with http:// or https://")
        return v.rstrip("/")

    @model_validator(mode="after")
    def validate_mtls(self) -> ApisixClientConfig:
        """Require cert and key together and force https when mTLS is on."""
        if self.cert and not self.cert_key:
            raise ValueError("certificate key file path not provided")
        if self.cert_key and not self.cert:
            raise ValueError("certificate file path not provided")

        if self.ca_path and self.server.startswith("http://"):
            logger.warning(
                "server_scheme_upgraded",
                reason="mtls",
                server=self.server,
            )
            self.server = "https://" + self.server.removeprefix("http://")
        return self

    @property
    def mtls_enabled(self) -> bool:
        """Whether CA, certificate and key are all configured."""
        return bool(self.ca_path and self.cert and self.cert_key)

    @classmethod
    def from_env(cls, base_config: dict[str, Any] | None = None) -> ApisixClientConfig:
        """Create configuration with environment variable overrides.

        Environment variables take precedence over base_config values.

        Supported environment variables:
            ADC_SERVER: Admin API base URL
            ADC_TOKEN: Admin API key
            ADC_CA_PATH: CA bundle path
            ADC_CERT: Client certificate path
            ADC_CERT_KEY: Client certificate key path
            ADC_INSECURE: Skip certificate verification (1/true/yes/on)
        """
        config_dict = base_config.copy() if base_config else {}

        for field, env_var in (
            ("server", "ADC_SERVER"),
            ("token", "ADC_TOKEN"),
            ("ca_path", "ADC_CA_PATH"),
            ("cert", "ADC_CERT"),
            ("cert_key", "ADC_CERT_KEY"),
        ):
            if value := os.environ.get(env_var):
                config_dict[field] = value

        if insecure := os.environ.get("ADC_INSECURE"):
            config_dict["insecure"] = insecure.strip().lower() in _TRUE_VALUES

        return cls.model_validate(config_dict)
