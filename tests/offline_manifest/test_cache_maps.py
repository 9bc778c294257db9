import re

import pytest

from offline_manifest.cache_maps import CacheMapRule, JsFunction, serialize_cache_maps
from offline_manifest.errors import ValidationError


def test_empty_rules_serialize_to_empty_list() -> None:
    assert serialize_cache_maps(None) == []
    assert serialize_cache_maps([]) == []


def test_rules_serialize_in_order() -> None:
    rules = [
        {"match": "^/app/", "to": "/index.html", "requestTypes": ["navigate"]},
        {"match": re.compile(r"^/api/", re.IGNORECASE), "to": JsFunction("function (url) { return url; }")},
        CacheMapRule(match="^/blank/", to=""),
    ]
    assert serialize_cache_maps(rules) == [
        {"match": "^/app/", "to": '"/index.html"', "requestTypes": ["navigate"]},
        {"match": "/^/api//i", "to": "function (url) { return url; }", "requestTypes": None},
        {"match": "^/blank/", "to": None, "requestTypes": None},
    ]


def test_snake_case_request_types_are_accepted() -> None:
    serialized = serialize_cache_maps([{"match": "x", "request_types": ["same-origin", "cross-origin"]}])
    assert serialized[0]["requestTypes"] == ["same-origin", "cross-origin"]


def test_invalid_to_is_rejected() -> None:
    with pytest.raises(ValidationError) as excinfo:
        serialize_cache_maps([{"match": "x", "to": 42}])
    assert excinfo.value.code == "CACHE_MAP_TO_INVALID"


def test_python_callable_to_is_rejected() -> None:
    with pytest.raises(ValidationError):
        serialize_cache_maps([{"match": "x", "to": lambda url: url}])


def test_invalid_request_types_are_rejected() -> None:
    with pytest.raises(ValidationError) as excinfo:
        serialize_cache_maps([{"match": "x", "requestTypes": ["navigate", "prefetch"]}])
    assert excinfo.value.code == "CACHE_MAP_REQUEST_TYPES_INVALID"
    with pytest.raises(ValidationError):
        serialize_cache_maps([{"match": "x", "requestTypes": "navigate"}])


def test_rule_without_match_is_rejected() -> None:
    with pytest.raises(ValidationError):
        serialize_cache_maps([{"to": "/index.html"}])
