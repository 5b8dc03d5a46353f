"""Data read from the plugins file and from the platform's resource endpoints."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

_MISSING = object()

_RFC3339 = re.compile(
    r"^(\d{4}-\d{2}-\d{2})[Tt](\d{2}:\d{2}:\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})$"
)


def _lookup(data: dict, key: str) -> Any:
    """Find a key the way JSON decoding into a record does: case-insensitively, last match wins."""
    result = _MISSING
    folded = key.casefold()
    for name, value in data.items():
        if name == key or name.casefold() == folded:
            result = value
    return None if result is _MISSING else result


def _object(data: Any, what: str) -> dict:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{what}: expected a JSON object, got {type(data).__name__}")
    return data


def _type_error(key: str, expected: str, value: Any) -> ValueError:
    return ValueError(f"field {key!r}: expected {expected}, got {type(value).__name__}")


def _str(data: dict, key: str) -> str:
    value = _lookup(data, key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise _type_error(key, "string", value)
    return value


def _bool(data: dict, key: str) -> bool:
    value = _lookup(data, key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise _type_error(key, "boolean", value)
    return value


def _int(data: dict, key: str) -> int:
    value = _lookup(data, key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise _type_error(key, "integer", value)
    return value


def _list(data: dict, key: str) -> list | None:
    value = _lookup(data, key)
    if value is None:
        return None
    if not isinstance(value, list):
        raise _type_error(key, "array", value)
    return value


def _str_list(data: dict, key: str) -> list[str]:
    items = _list(data, key) or []
    result = []
    for item in items:
        if item is None:
            item = ""
        if not isinstance(item, str):
            raise _type_error(key, "array of strings", item)
        result.append(item)
    return result


def _dict(data: dict, key: str) -> dict:
    return dict(_object(_lookup(data, key), f"field {key!r}"))


def _dict_list(data: dict, key: str) -> list[dict]:
    return [dict(_object(item, f"field {key!r}")) for item in _list(data, key) or []]


def _time(data: dict, key: str) -> datetime | None:
    value = _lookup(data, key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise _type_error(key, "RFC 3339 timestamp", value)
    match = _RFC3339.match(value)
    if not match:
        raise ValueError(f"field {key!r}: invalid RFC 3339 timestamp {value!r}")
    date, clock, fraction, zone = match.groups()
    micro = f".{(fraction + '000000')[:6]}" if fraction else ""
    offset = "+00:00" if zone in ("Z", "z") else zone
    try:
        return datetime.fromisoformat(f"{date}T{clock}{micro}{offset}")
    except ValueError as exc:
        raise ValueError(f"field {key!r}: invalid RFC 3339 timestamp {value!r}") from exc


@dataclass
class Relation:
    """A link from a plugin to an operation UID."""

    relation_id: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> Relation:
        data = _object(data, "relation")
        return cls(relation_id=_str(data, "relationId"))


@dataclass
class Plugin:
    """A plugin entry from the plugins file."""

    version: str = ""
    name: str = ""
    description: str = ""
    version_type: str = ""
    repository: str = ""
    runtime: str = ""
    executable: str = ""
    arguments: str = ""
    enabled: bool = False
    input_format: str = ""
    output_format: str = ""
    relations: list[Relation] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> Plugin:
        data = _object(data, "plugin")
        return cls(
            version=_str(data, "version"),
            name=_str(data, "name"),
            description=_str(data, "description"),
            version_type=_str(data, "version_type"),
            repository=_str(data, "repository"),
            runtime=_str(data, "runtime"),
            executable=_str(data, "executable"),
            arguments=_str(data, "arguments"),
            enabled=_bool(data, "enabled"),
            input_format=_str(data, "inputFormat"),
            output_format=_str(data, "outputFormat"),
            relations=[Relation.from_dict(item) for item in _list(data, "relations") or []],
        )


def load_plugins(data: str | bytes) -> list[Plugin]:
    """Parse the JSON text of a plugins file into plugins."""
    try:
        parsed = json.loads(data)
    except json.JSONDecodeError as exc:
        raise ValueError(f"invalid plugins JSON: {exc}") from exc
    if parsed is None:
        return []
    if not isinstance(parsed, list):
        raise ValueError(f"plugins file: expected a JSON array, got {type(parsed).__name__}")
    return [Plugin.from_dict(item) for item in parsed]


@dataclass
class AvailableFormat:
    """A format a distribution can be delivered in."""

    format: str = ""
    href: str = ""
    label: str = ""
    original_format: str = ""
    type: str = ""
    input_format: str = ""
    plugin_id: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> AvailableFormat:
        data = _object(data, "available format")
        return cls(
            format=_str(data, "format"),
            href=_str(data, "href"),
            label=_str(data, "label"),
            original_format=_str(data, "originalFormat"),
            type=_str(data, "type"),
            input_format=_str(data, "inputFormat"),
            plugin_id=_str(data, "pluginId"),
        )


@dataclass
class Distribution:
    """A distribution as listed by the search endpoint."""

    available_formats: list[AvailableFormat] = field(default_factory=list)
    description: str = ""
    href: str = ""
    href_extended: str = ""
    id: str = ""
    status: int = 0
    status_timestamp: datetime | None = None
    title: str = ""
    uid: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> Distribution:
        data = _object(data, "distribution")
        return cls(
            available_formats=[
                AvailableFormat.from_dict(item) for item in _list(data, "availableFormats") or []
            ],
            description=_str(data, "description"),
            href=_str(data, "href"),
            href_extended=_str(data, "hrefExtended"),
            id=_str(data, "id"),
            status=_int(data, "status"),
            status_timestamp=_time(data, "statusTimestamp"),
            title=_str(data, "title"),
            uid=_str(data, "uid"),
        )


@dataclass
class SearchResponse:
    """The search endpoint's answer; distributions is None when the response held none."""

    distributions: list[Distribution] | None = None

    @classmethod
    def from_dict(cls, data: Any) -> SearchResponse:
        data = _object(data, "search response")
        results = _object(_lookup(data, "results"), "field 'results'")
        items = _list(results, "distributions")
        if items is None:
            return cls(distributions=None)
        return cls(distributions=[Distribution.from_dict(item) for item in items])


@dataclass
class DetailsResponse:
    """The details of one distribution."""

    available_contact_points: list[dict] = field(default_factory=list)
    available_formats: list[AvailableFormat] = field(default_factory=list)
    categories: dict = field(default_factory=dict)
    data_provider: list[dict] = field(default_factory=list)
    description: str = ""
    editor_id: str = ""
    endpoint: str = ""
    frequency_update: str = ""
    href: str = ""
    href_extended: str = ""
    id: str = ""
    internal_id: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    license: str = ""
    meta_id: str = ""
    operation_id: str = ""
    science_domain: list[str] = field(default_factory=list)
    service_description: str = ""
    service_documentation: str = ""
    service_endpoint: str = ""
    service_name: str = ""
    service_parameters: list[dict] = field(default_factory=list)
    service_provider: dict = field(default_factory=dict)
    service_spatial: dict = field(default_factory=dict)
    service_temporal_start: datetime | None = None
    spatial: dict = field(default_factory=dict)
    temporal_start: datetime | None = None
    title: str = ""
    type: str = ""
    uid: str = ""
    versioning_status: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> DetailsResponse:
        data = _object(data, "details response")
        service_coverage = _object(
            _lookup(data, "serviceTemporalCoverage"), "field 'serviceTemporalCoverage'"
        )
        coverage = _object(_lookup(data, "temporalCoverage"), "field 'temporalCoverage'")
        return cls(
            available_contact_points=_dict_list(data, "availableContactPoints"),
            available_formats=[
                AvailableFormat.from_dict(item) for item in _list(data, "availableFormats") or []
            ],
            categories=_dict(data, "categories"),
            data_provider=_dict_list(data, "dataProvider"),
            description=_str(data, "description"),
            editor_id=_str(data, "editorId"),
            endpoint=_str(data, "endpoint"),
            frequency_update=_str(data, "frequencyUpdate"),
            href=_str(data, "href"),
            href_extended=_str(data, "hrefExtended"),
            id=_str(data, "id"),
            internal_id=_str_list(data, "internalID"),
            keywords=_str_list(data, "keywords"),
            license=_str(data, "license"),
            meta_id=_str(data, "metaId"),
            operation_id=_str(data, "operationid"),
            science_domain=_str_list(data, "scienceDomain"),
            service_description=_str(data, "serviceDescription"),
            service_documentation=_str(data, "serviceDocumentation"),
            service_endpoint=_str(data, "serviceEndpoint"),
            service_name=_str(data, "serviceName"),
            service_parameters=_dict_list(data, "serviceParameters"),
            service_provider=_dict(data, "serviceProvider"),
            service_spatial=_dict(data, "serviceSpatial"),
            service_temporal_start=_time(service_coverage, "startDate"),
            spatial=_dict(data, "spatial"),
            temporal_start=_time(coverage, "startDate"),
            title=_str(data, "title"),
            type=_str(data, "type"),
            uid=_str(data, "uid"),
            versioning_status=_str(data, "versioningStatus"),
        )