import pytest

from eposplugins.converter import ConverterPlugin, PluginRelation
from eposplugins.models import Plugin, Relation


def _plugin():
    return Plugin(
        version="1.0.0",
        name="conv",
        description="desc",
        version_type="tag",
        repository="https://git.example.com/conv.git",
        runtime="python",
        executable="main.py",
        arguments="-v",
        enabled=True,
        input_format="in",
        output_format="out",
        relations=[Relation("op-1")],
    )


def test_from_plugin_copies_fields():
    converted = ConverterPlugin.from_plugin(_plugin(), "")
    assert converted.name == "conv"
    assert converted.version == "1.0.0"
    assert converted.version_type == "tag"
    assert converted.runtime == "python"
    assert converted.arguments == "-v"
    assert converted.enabled is True
    assert converted.id == ""
    assert converted.installed is False


def test_from_plugin_version_override():
    assert ConverterPlugin.from_plugin(_plugin(), "9.9.9").version == "9.9.9"


def test_from_plugin_none_override_keeps_version():
    assert ConverterPlugin.from_plugin(_plugin(), None).version == "1.0.0"


def test_plugin_to_dict_keys():
    data = ConverterPlugin.from_plugin(_plugin(), "").to_dict()
    assert list(data) == [
        "arguments",
        "description",
        "enabled",
        "executable",
        "id",
        "installed",
        "name",
        "repository",
        "runtime",
        "version",
        "version_type",
    ]
    assert data["executable"] == "main.py"


def test_plugin_round_trip():
    original = ConverterPlugin(id="abc", installed=True, name="x", version="2")
    assert ConverterPlugin.from_dict(original.to_dict()) == original


def test_plugin_from_dict_rejects_bad_type():
    with pytest.raises(ValueError):
        ConverterPlugin.from_dict({"installed": "no"})


def test_relation_to_dict_keys():
    relation = PluginRelation(input_format="in", output_format="out", plugin_id="p", relation_id="d")
    data = relation.to_dict()
    assert data == {
        "id": "",
        "input_format": "in",
        "output_format": "out",
        "plugin_id": "p",
        "relation_id": "d",
    }


def test_relation_round_trip():
    relation = PluginRelation(id="r", input_format="a", output_format="b", plugin_id="p", relation_id="d")
    assert PluginRelation.from_dict(relation.to_dict()) == relation


def test_relation_from_dict_rejects_non_object():
    with pytest.raises(ValueError):
        PluginRelation.from_dict("text")