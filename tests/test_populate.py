import json

import pytest
import responses

from eposplugins.models import Plugin, Relation
from eposplugins.populate import (
    find_distribution_ids,
    get_dist_operation_uids,
    get_json,
    get_operation_id_for_distribution,
    populate,
)
from eposplugins.post import PopulationError

BASE = "http://gateway.example.com/api"
SEARCH_URL = BASE + "/resources/search"
DETAILS_URL = BASE + "/resources/details/"
PLUGINS_URL = BASE + "/plugins"
RELATIONS_URL = BASE + "/plugin-relations"


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def _search(mocked, *ids):
    mocked.add(
        responses.GET,
        SEARCH_URL,
        json={"results": {"distributions": [{"id": i} for i in ids]}},
    )


def _details(mocked, dist_id, operation_id, status=200):
    mocked.add(
        responses.GET, DETAILS_URL + dist_id, json={"operationid": operation_id}, status=status
    )


def _echo(prefix):
    counter = iter(range(1, 10_000))

    def callback(request):
        body = json.loads(request.body)
        body["id"] = f"{prefix}-{next(counter)}"
        return 201, {}, json.dumps(body)

    return callback


def test_get_json_accepts_202(mocked):
    mocked.add(responses.GET, BASE + "/x", json={"k": "v"}, status=202)
    assert get_json(BASE + "/x", lambda data: data) == {"k": "v"}


def test_get_json_bad_status(mocked):
    mocked.add(responses.GET, BASE + "/x", body="missing", status=404)
    with pytest.raises(PopulationError, match="returned status 404"):
        get_json(BASE + "/x", lambda data: data)


def test_get_json_invalid_body(mocked):
    mocked.add(responses.GET, BASE + "/x", body="{not json", status=200)
    with pytest.raises(PopulationError, match="failed to unmarshal"):
        get_json(BASE + "/x", lambda data: data)


def test_get_json_connection_error(mocked):
    with pytest.raises(PopulationError, match="failed"):
        get_json(BASE + "/x", lambda data: data)


def test_find_distribution_ids(mocked):
    _search(mocked, "d1", "d2", "d1")
    assert find_distribution_ids(BASE) == {"d1", "d2"}
    assert mocked.calls[0].request.url == SEARCH_URL + "?facets=false&q="


def test_find_distribution_ids_none(mocked, capsys):
    mocked.add(responses.GET, SEARCH_URL, json={"results": {}})
    assert find_distribution_ids(BASE) == set()
    assert "contained no distribution items" in capsys.readouterr().out


def test_find_distribution_ids_failure(mocked):
    mocked.add(responses.GET, SEARCH_URL, body="oops", status=500)
    with pytest.raises(PopulationError, match="failed to get distributions"):
        find_distribution_ids(BASE)


def test_operation_id_strips_file_prefix(mocked):
    _details(mocked, "d1", "file:///op-1")
    assert get_operation_id_for_distribution(BASE, "d1") == "op-1"


def test_operation_id_without_prefix(mocked):
    _details(mocked, "d1", "op-plain")
    assert get_operation_id_for_distribution(BASE, "d1") == "op-plain"


def test_operation_id_empty_raises(mocked):
    _details(mocked, "d1", "")
    with pytest.raises(PopulationError, match="operation ID empty"):
        get_operation_id_for_distribution(BASE, "d1")


def test_dist_operation_uids_skips_failures(mocked):
    _details(mocked, "d1", "file:///op-1")
    _details(mocked, "d2", "op-2", status=500)
    assert get_dist_operation_uids(BASE, {"d1", "d2"}) == {"op-1": "d1"}


def test_populate_end_to_end(mocked):
    _search(mocked, "d1")
    _details(mocked, "d1", "file:///op-1")
    mocked.add_callback(responses.POST, PLUGINS_URL, callback=_echo("plugin"))
    mocked.add_callback(responses.POST, RELATIONS_URL, callback=_echo("rel"))
    plugins = [Plugin(name="conv", relations=[Relation(relation_id="op-1")])]

    posted = populate(BASE, plugins, "")

    assert [p.name for p in posted] == ["conv"]
    relation_bodies = [
        json.loads(c.request.body) for c in mocked.calls if c.request.url == RELATIONS_URL
    ]
    assert [b["relation_id"] for b in relation_bodies] == ["d1"]
    assert relation_bodies[0]["plugin_id"] == posted[0].id


def test_populate_search_failure(mocked):
    mocked.add(responses.GET, SEARCH_URL, body="oops", status=500)
    with pytest.raises(PopulationError, match="error finding"):
        populate(BASE, [Plugin(name="conv")], "")


def test_populate_post_failure(mocked):
    _search(mocked)
    mocked.add(responses.POST, PLUGINS_URL, body="boom", status=500)
    with pytest.raises(PopulationError, match="error posting plugins") as info:
        populate(BASE, [Plugin(name="conv")], "")
    assert info.value.posted == []