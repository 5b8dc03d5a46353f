"""Discovering distributions in an environment and populating it with plugins."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable, Sequence
from typing import Any, TypeVar
from urllib.parse import urlencode

import requests

from . import display
from .converter import ConverterPlugin
from .models import DetailsResponse, Plugin, SearchResponse
from .post import PopulationError, _join_url, _status, post_plugins

GET_TIMEOUT = 30.0

_Parsed = TypeVar("_Parsed")


def get_json(url: str, parse: Callable[[Any], _Parsed]) -> _Parsed:
    """GET a URL and hand the decoded JSON body to ``parse``."""
    try:
        response = requests.get(url, timeout=GET_TIMEOUT)
    except requests.RequestException as exc:
        raise PopulationError(f"http GET request to {url} failed: {exc}") from exc

    if response.status_code not in (200, 202):
        raise PopulationError(
            f"http GET request to {url} returned status {_status(response)}. Body: {response.text}"
        )

    try:
        return parse(json.loads(response.content))
    except ValueError as exc:
        raise PopulationError(
            f"failed to unmarshal JSON response from {url}. Error: {exc}. Body: {response.text}"
        ) from exc


def find_distribution_ids(base_url: str) -> set[str]:
    """Return the IDs of all distributions the search endpoint lists."""
    search_url = _join_url(
        base_url, "resources/search", query=urlencode({"facets": "false", "q": ""})
    )
    display.step("Fetching all distributions from: %s", search_url)

    try:
        search = get_json(search_url, SearchResponse.from_dict)
    except PopulationError as exc:
        raise PopulationError(
            f"failed to get distributions from search endpoint '{search_url}': {exc}"
        ) from exc

    if search.distributions is None:
        display.warn(
            "Search response from %s contained no distribution items. Nothing to do.", search_url
        )
        return set()
    return {distribution.id for distribution in search.distributions}


def get_operation_id_for_distribution(base_url: str, dist_id: str) -> str:
    """Return the operation UID behind a distribution."""
    details_url = _join_url(base_url, "resources", "details", dist_id)
    try:
        details = get_json(details_url, DetailsResponse.from_dict)
    except PopulationError as exc:
        raise PopulationError(
            f"failed to get details for distribution at '{details_url}': {exc}"
        ) from exc

    if not details.operation_id:
        raise PopulationError(f"operation ID empty for distribution with id '{dist_id}'")
    return details.operation_id.removeprefix("file:///")


def get_dist_operation_uids(base_url: str, distribution_ids: Iterable[str]) -> dict[str, str]:
    """Map each distribution's operation UID to the distribution ID.

    Distributions whose details cannot be fetched are reported and skipped.
    """
    ids = sorted(set(distribution_ids))
    total = len(ids)
    count = 0
    failures = 0
    uid_map: dict[str, str] = {}

    for dist_id in ids:
        try:
            uid = get_operation_id_for_distribution(base_url, dist_id)
        except PopulationError as exc:
            display.warn("Failed to get details for distribution ID '%s': %s", dist_id, exc)
            failures += 1
            continue
        uid_map[uid] = dist_id

        count += 1
        if count % 100 == 0 or count == total:
            display.info(
                "Processed %d / %d distributions for Operation UIDs (%d errors so far)",
                count,
                total,
                failures,
            )

    if failures:
        display.warn(
            "Encountered %d errors while fetching details for %d distributions.", failures, total
        )
    return uid_map


def populate(
    base_url: str, plugins: Sequence[Plugin], version_override: str | None
) -> list[ConverterPlugin]:
    """Populate the environment at ``base_url`` with plugins and their relations."""
    display.step("Searching available distributions in environment")
    try:
        distribution_ids = find_distribution_ids(base_url)
    except PopulationError as exc:
        raise PopulationError(
            f"error finding distribution IDs in environment '{base_url}': {exc}"
        ) from exc

    display.done(
        "Found %d distributions in environment '%s'", len(distribution_ids), base_url
    )
    display.step("Mapping distributions to theirs operation UID")

    uid_map = get_dist_operation_uids(base_url, distribution_ids)

    display.done("Finished fetching details. Mapped %d Operation UIDs.", len(uid_map))
    display.step("Populating the converter with the plugins")

    try:
        return post_plugins(base_url, plugins, version_override, uid_map)
    except PopulationError as exc:
        raise PopulationError(f"error posting plugins: {exc}", exc.posted) from exc