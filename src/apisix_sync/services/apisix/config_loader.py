"""Configuration-source loader for APISIX declarative config files.

Reads YAML or JSON files into a ``Configuration`` and writes bundles back
out. Both formats map onto the same generic tree, so a file converted from
one to the other decodes to an equal bundle.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from apisix_sync.integrations.apisix.exceptions import ConfigLoadError, MalformedValueError
from apisix_sync.integrations.apisix.models.config import Configuration
from apisix_sync.logging import get_logger

if TYPE_CHECKING:
    from apisix_sync.integrations.apisix.defaults import DefaultsProvider

YAML_SUFFIXES = {".yaml", ".yml"}
JSON_SUFFIXES = {".json"}


class ConfigLoader:
    """Loader for declarative configuration files.

    Attributes:
        defaults: Plugin default-value provider applied while decoding.

    Example:
        >>> loader = ConfigLoader()
        >>> config = loader.load(Path("apisix.yaml"))
        >>> loader.save(config, Path("apisix.json"))
    """

    def __init__(self, defaults: DefaultsProvider | None = None) -> None:
        """Initialize the loader.

        Args:
            defaults: Plugin default-value provider. Unknown plugins and a
                missing provider both leave plugin configs as written.
        """
        self.defaults = defaults
        self._log = get_logger(__name__, service="config_loader")

    def _parse(self, path: Path, content: str) -> Any:
        suffix = path.suffix.lower()
        if suffix in YAML_SUFFIXES:
            try:
                return yaml.safe_load(content)
            except yaml.YAMLError as e:
                raise MalformedValueError(
                    f"Invalid YAML: {e}", field="configuration", payload=content
                ) from e
        if suffix in JSON_SUFFIXES:
            try:
                return json.loads(content)
            except json.JSONDecodeError as e:
                raise MalformedValueError(
                    f"Invalid JSON: {e}", field="configuration", payload=content
                ) from e
        raise ConfigLoadError("Unsupported configuration file type", path=str(path))

    def load(self, path: Path) -> Configuration:
        """Load a configuration file.

        Args:
            path: YAML (.yaml/.yml) or JSON (.json) file.

        Returns:
            The decoded configuration. An empty file yields an empty bundle.

        Raises:
            ConfigLoadError: If the file is missing, unreadable or of an
                unsupported type.
            ApisixCodecError: If any resource fails to decode.
        """
        self._log.debug("loading_configuration", path=str(path))

        if not path.is_file():
            raise ConfigLoadError("Configuration file not found", path=str(path))
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigLoadError(f"Failed to read configuration file ({e})", path=str(path)) from e

        data = self._parse(path, content) if content.strip() else None
        if data is None:
            return Configuration()
        if not isinstance(data, dict):
            raise MalformedValueError(
                "Expected a mapping at the top of the configuration file",
                field="configuration",
                payload=content,
            )

        config = Configuration.from_dict(data, self.defaults)
        self._log.info(
            "configuration_loaded",
            path=str(path),
            name=config.name,
            resources=config.resource_count,
        )
        return config

    def dumps(self, config: Configuration, fmt: str = "yaml") -> str:
        """Render a configuration as YAML or JSON text.

        Args:
            config: Configuration to render.
            fmt: ``yaml`` or ``json``.
        """
        data = config.to_dict()
        if fmt == "yaml":
            return yaml.safe_dump(
                data, default_flow_style=False, sort_keys=False, allow_unicode=True
            )
        if fmt == "json":
            return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
        raise ValueError(f"Unsupported output format: {fmt}")

    def save(self, config: Configuration, path: Path) -> None:
        """Write a configuration file, picking the format from the suffix.

        Raises:
            ConfigLoadError: If the suffix is not a supported type.
        """
        suffix = path.suffix.lower()
        if suffix in YAML_SUFFIXES:
            fmt = "yaml"
        elif suffix in JSON_SUFFIXES:
            fmt = "json"
        else:
            raise ConfigLoadError("Unsupported configuration file type", path=str(path))

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.dumps(config, fmt), encoding="utf-8")
        self._log.info(
            "configuration_saved", path=str(path), resources=config.resource_count
        )
