"""Objects sent to and returned by the converter service."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .models import Plugin, _bool, _object, _str


@dataclass
class ConverterPlugin:
    """A plugin as the converter service stores it."""

    arguments: str = ""
    description: str = ""
    enabled: bool = False
    executable: str = ""
    id: str = ""
    installed: bool = False
    name: str = ""
    repository: str = ""
    runtime: str = ""
    version: str = ""
    version_type: str = ""

    @classmethod
    def from_plugin(cls, plugin: Plugin, version_override: str | None = None) -> ConverterPlugin:
        """Build the object to post for a plugin, optionally replacing its version."""
        return cls(
            arguments=plugin.arguments,
            description=plugin.description,
            enabled=plugin.enabled,
            executable=plugin.executable,
            name=plugin.name,
            repository=plugin.repository,
            runtime=plugin.runtime,
            version=version_override or plugin.version,
            version_type=plugin.version_type,
        )

    @classmethod
    def from_dict(cls, data: Any) -> ConverterPlugin:
        data = _object(data, "converter plugin")
        return cls(
            arguments=_str(data, "arguments"),
            description=_str(data, "description"),
            enabled=_bool(data, "enabled"),
            executable=_str(data, "executable"),
            id=_str(data, "id"),
            installed=_bool(data, "installed"),
            name=_str(data, "name"),
            repository=_str(data, "repository"),
            runtime=_str(data, "runtime"),
            version=_str(data, "version"),
            version_type=_str(data, "version_type"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "arguments": self.arguments,
            "description": self.description,
            "enabled": self.enabled,
            "executable": self.executable,
            "id": self.id,
            "installed": self.installed,
            "name": self.name,
            "repository": self.repository,
            "runtime": self.runtime,
            "version": self.version,
            "version_type": self.version_type,
        }


@dataclass
class PluginRelation:
    """A link between a converter plugin and a distribution."""

    id: str = ""
    input_format: str = ""
    output_format: str = ""
    plugin_id: str = ""
    relation_id: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> PluginRelation:
        data = _object(data, "plugin relation")
        return cls(
            id=_str(data, "id"),
            input_format=_str(data, "input_format"),
            output_format=_str(data, "output_format"),
            plugin_id=_str(data, "plugin_id"),
            relation_id=_str(data, "relation_id"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "input_format": self.input_format,
            "output_format": self.output_format,
            "plugin_id": self.plugin_id,
            "relation_id": self.relation_id,
        }