"""Posting plugins and their relations to the converter service."""

from __future__ import annotations

import json
import posixpath
from collections.abc import Mapping, Sequence
from typing import TypeVar, Union
from urllib.parse import quote, unquote, urlsplit, urlunsplit

import requests

from . import display
from .converter import ConverterPlugin, PluginRelation
from .models import Plugin

POST_TIMEOUT = 60.0

_Posted = TypeVar("_Posted", bound=Union[ConverterPlugin, PluginRelation])


class PopulationError(Exception):
    """Raised when populating an environment fails wholly or in part.

    ``posted`` holds the plugins that were created before the failure.
    """

    def __init__(self, message: str, posted: Sequence[ConverterPlugin] | None = None) -> None:
        super().__init__(message)
        self.posted: list[ConverterPlugin] = list(posted or [])


def _join_url(base_url: str, *parts: str, query: str | None = None) -> str:
    """Append path segments to a URL, cleaning the resulting path."""
    split = urlsplit(base_url)
    joined = posixpath.normpath(posixpath.join(unquote(split.path) or "/", *parts))
    if not joined.startswith("/"):
        joined = "/" + joined
    path = quote(joined, safe="/:@!$&'()*+,;=")
    return urlunsplit(
        (split.scheme, split.netloc, path, split.query if query is None else query, split.fragment)
    )


def _status(response: requests.Response) -> str:
    return f"{response.status_code} {response.reason or ''}".strip()


def post_json(url: str, obj: _Posted) -> _Posted:
    """POST an object as JSON and decode the successful answer into the same type."""
    try:
        response = requests.post(url, json=obj.to_dict(), timeout=POST_TIMEOUT)
    except requests.RequestException as exc:
        raise PopulationError(f"error posting object '{obj}': {exc}") from exc

    if not 200 <= response.status_code < 300:
        raise PopulationError(
            f"object post for '{obj}' returned non-success status {_status(response)}. "
            f"Body: {response.text}"
        )

    try:
        return type(obj).from_dict(json.loads(response.content))
    except ValueError as exc:
        raise PopulationError(
            f"failed to unmarshal successful response JSON for object '{obj}': {exc}. "
            f"Body: {response.text}"
        ) from exc


def post_plugins(
    base_url: str,
    plugins: Sequence[Plugin],
    version_override: str | None,
    operation_uid_map: Mapping[str, str],
) -> list[ConverterPlugin]:
    """Create every plugin and its relations in the converter service.

    Returns the created plugins. Raises PopulationError if nothing could be
    posted, or if any plugin or relation failed; in the latter case the
    error's ``posted`` lists the plugins that were created.
    """
    plugin_url = _join_url(base_url, "plugins")
    relation_url = _join_url(base_url, "plugin-relations")

    plugin_errors = 0
    relations_posted = 0
    relation_errors = 0
    relations_total = 0
    posted: list[ConverterPlugin] = []

    display.step("Starting plugin population process...")
    display.info("Found %d plugins to process", len(plugins))
    if version_override:
        display.info("Using custom version: %s", version_override)

    for number, plugin in enumerate(plugins, start=1):
        relations_total += len(plugin.relations)
        display.step("Processing plugin %d/%d: '%s'", number, len(plugins), plugin.name)

        try:
            created = post_json(plugin_url, ConverterPlugin.from_plugin(plugin, version_override))
        except PopulationError as exc:
            display.error("Failed to post plugin '%s': %s", plugin.name, exc)
            plugin_errors += 1
            continue

        posted.append(created)
        display.done("Plugin '%s' posted successfully (ID: %s)", created.name, created.id)

        if not plugin.relations:
            display.info("No relations to process for plugin '%s'", plugin.name)
            continue

        display.step("Processing %d relations for plugin '%s'", len(plugin.relations), plugin.name)
        for index, relation in enumerate(plugin.relations, start=1):
            uid = relation.relation_id
            if uid not in operation_uid_map:
                display.warn(
                    "  └─ Relation with operation UID '%s' has no mapping in the current environment",
                    uid,
                )
                relation_errors += 1
                continue

            display.info(
                "  └─ Posting relation %d/%d (ID: %s)", index, len(plugin.relations), uid
            )
            link = PluginRelation(
                input_format=plugin.input_format,
                output_format=plugin.output_format,
                plugin_id=created.id,
                relation_id=operation_uid_map[uid],
            )
            try:
                post_json(relation_url, link)
            except PopulationError as exc:
                display.warn(
                    "Failed to post relation '%s' for plugin '%s': %s", uid, plugin.name, exc
                )
                relation_errors += 1
                continue

            relations_posted += 1
            display.done("  └─ Relation '%s' posted successfully", uid)

    display.info("Population complete - Summary:")
    display.info(
        "Plugins: %d successful, %d failed (out of %d total)",
        len(posted),
        plugin_errors,
        len(plugins),
    )
    display.info(
        "Relations: %d successful, %d failed (out of %d total)",
        relations_posted,
        relation_errors,
        relations_total,
    )

    if not posted:
        display.error("No plugins were successfully posted")
        raise PopulationError("no plugin post has been successful")

    if plugin_errors or relation_errors:
        display.warn("Process completed with some errors - check logs above for details")
        raise PopulationError(
            "process completed with some errors - check logs for details", posted
        )

    display.done("All plugins and relations posted successfully!")
    return posted