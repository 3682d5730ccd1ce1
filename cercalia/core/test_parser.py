"""
Unit tests for Cercalia response parsing helpers
"""

import pytest

from cercalia.core.models import Coordinate
from cercalia.core.parser import (
    asList,
    asText,
    attrAt,
    extractFirst,
    firstElement,
    getAdminPairs,
    getCercaliaAttr,
    getCercaliaValue,
    getCodeNamePair,
    getPath,
    matching,
    parseCoordinate,
    parseCoordNode,
    parseFloatOrNone,
    parseIntOrNone,
    valueAt,
)


def test_as_text():
    assert asText(True) == "true"
    assert asText(False) == "false"
    assert asText(12) == "12"
    assert asText("x") == "x"
    assert asText({"a": 1}) is None
    assert asText(None) is None


def test_get_cercalia_attr():
    assert getCercaliaAttr({"@id": "08019"}, "id") == "08019"
    assert getCercaliaAttr({"id": 8019}, "id") == "8019"
    assert getCercaliaAttr({"@id": "a", "id": "b"}, "id") == "a"
    assert getCercaliaAttr({"id": {"value": "nested"}}, "id") is None
    assert getCercaliaAttr("plain", "id") is None


def test_get_cercalia_value():
    assert getCercaliaValue("Barcelona") == "Barcelona"
    assert getCercaliaValue({"value": "Barcelona"}) == "Barcelona"
    assert getCercaliaValue({"$valor": "Legacy", "value": "New"}) == "Legacy"
    assert getCercaliaValue({"@value": 3}) == "3"
    assert getCercaliaValue({"@id": "1"}) is None
    assert getCercaliaValue([1, 2]) is None


def test_get_path_and_lists():
    node = {"a": {"b": {"c": 1}}}
    assert getPath(node, "a", "b", "c") == 1
    assert getPath(node, "a", "x", "c") is None
    assert getPath({"a": "text"}, "a", "b") is None

    assert asList(None) == []
    assert asList({"x": 1}) == [{"x": 1}]
    assert asList([1, None, 2]) == [1, 2]
    assert firstElement([]) is None
    assert firstElement({"x": 1}) == {"x": 1}
    assert firstElement([3, 4]) == 3


def test_numbers():
    assert parseCoordinate(" 2.5 ", "longitude") == 2.5
    with pytest.raises(ValueError, match="latitude"):
        parseCoordinate("", "latitude")
    with pytest.raises(ValueError, match="Invalid longitude"):
        parseCoordinate("east", "longitude")

    assert parseFloatOrNone("1.5") == 1.5
    assert parseFloatOrNone("nope") is None
    assert parseFloatOrNone(None) is None
    assert parseIntOrNone("42") == 42
    assert parseIntOrNone("4.2") is None
    assert parseIntOrNone(" ") is None


def test_extract_first_strategies():
    candidate = {"@desc": "Description", "ge": {"name": {"value": ""}, "@id": "17079"}}

    assert extractFirst(candidate, valueAt("ge", "name"), attrAt("desc")) == "Description"
    assert extractFirst(candidate, attrAt("ge", "id")) == "17079"
    assert extractFirst(candidate, attrAt("missing"), default="Unknown") == "Unknown"
    assert extractFirst(candidate, matching(attrAt("desc"), lambda v: v.isdigit()), attrAt("ge", "id")) == "17079"


def test_code_name_pairs():
    ge = {
        "city": {"@id": "1707900000", "value": "Girona"},
        "country": {"@id": "ESP", "value": "Spain"},
    }

    assert getCodeNamePair(ge, "city") == ("Girona", "1707900000")
    assert getCodeNamePair(ge, "region") == (None, None)

    pairs = getAdminPairs(ge)
    assert pairs["locality"] == "Girona"
    assert pairs["localityCode"] == "1707900000"
    assert pairs["countryCode"] == "ESP"
    assert pairs["region"] is None
    assert pairs["regionCode"] is None


def test_parse_coord_node():
    assert parseCoordNode({"@x": "2.1734", "@y": "41.3851"}) == Coordinate(lat=41.3851, lng=2.1734)
    assert parseCoordNode({"x": 2, "y": 41}) == Coordinate(lat=41.0, lng=2.0)

    with pytest.raises(ValueError):
        parseCoordNode(None)
    with pytest.raises(ValueError):
        parseCoordNode({"@x": "2.1"})
