import re

import pytest

from offline_manifest.errors import ConfigurationError
from offline_manifest.keys import EXTERNALS_KEYWORD, REST_KEYWORD
from offline_manifest.partition import filter_excludes, partition_assets
from offline_manifest.paths import PathNormalizer, build_rewrite

DEFAULT_EXCLUDES = ["**/.*", "**/*.map"]


def _normalizer() -> PathNormalizer:
    return PathNormalizer(build_rewrite(None), relative_paths=True, public_path=None)


def test_rest_keyword_collects_unclaimed_assets() -> None:
    result = partition_assets(
        ["app.js", "a.css", "b.css", "c.js"],
        DEFAULT_EXCLUDES,
        {"main": ["app.js", "*.css"], "additional": [REST_KEYWORD]},
        [],
        _normalizer(),
        safe_to_use_optional_caches=True,
    )
    assert result.sections.main == ["app.js", "a.css", "b.css"]
    assert result.sections.additional == ["c.js"]
    assert result.sections.optional == []
    assert result.assets == ["app.js", "a.css", "b.css", "c.js"]
    assert result.warnings == []


def test_all_mode_loses_nothing_but_excludes() -> None:
    discovered = ["app.js", "app.js.map", ".htaccess", "css/site.css", "img/logo.png"]
    result = partition_assets(discovered, DEFAULT_EXCLUDES, "all", [], _normalizer())
    excluded = [asset for asset in discovered if asset not in filter_excludes(discovered, DEFAULT_EXCLUDES)]
    assert excluded == ["app.js.map", ".htaccess"]
    assert sorted(result.sections.main + excluded) == sorted(discovered)
    assert len(set(result.sections.main)) == len(result.sections.main)
    assert result.sections.additional == [] and result.sections.optional == []


def test_all_mode_appends_externals() -> None:
    result = partition_assets(["app.js"], [], "all", ["https://cdn.example.com/lib.js"], _normalizer())
    assert result.sections.main == ["app.js", "https://cdn.example.com/lib.js"]
    assert result.externals == ["https://cdn.example.com/lib.js"]


def test_glob_then_literal_keeps_pool_order() -> None:
    result = partition_assets(
        ["a.js", "d.txt", "b.js", "c.js", "e.txt"],
        [],
        {"main": ["*.js", "d.txt"], "optional": [REST_KEYWORD]},
        [],
        _normalizer(),
        safe_to_use_optional_caches=True,
    )
    assert result.sections.main == ["a.js", "b.js", "c.js", "d.txt"]
    assert result.sections.optional == ["e.txt"]
    assert result.sections.additional == []


def test_earlier_section_claims_first() -> None:
    result = partition_assets(
        ["a.js", "b.js"],
        [],
        {"main": ["a.js"], "additional": ["*.js"]},
        [],
        _normalizer(),
        safe_to_use_optional_caches=True,
    )
    assert result.sections.main == ["a.js"]
    assert result.sections.additional == ["b.js"]


@pytest.mark.parametrize(
    "caches, code",
    [
        ({"main": [REST_KEYWORD], "optional": [REST_KEYWORD]}, "REST_KEYWORD_REPEATED"),
        ({"main": [REST_KEYWORD, REST_KEYWORD]}, "REST_KEYWORD_REPEATED"),
        ({"additional": [EXTERNALS_KEYWORD], "optional": [EXTERNALS_KEYWORD]}, "EXTERNALS_KEYWORD_REPEATED"),
    ],
)
def test_reserved_keyword_only_once(caches, code) -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        partition_assets(["a.js"], [], caches, [], _normalizer(), safe_to_use_optional_caches=True)
    assert excinfo.value.code == code


def test_literal_key_claims_external() -> None:
    externals = ["https://cdn.example.com/lib.js", "https://cdn.example.com/font.woff"]
    result = partition_assets(
        ["app.js"],
        [],
        {"main": ["app.js", "https://cdn.example.com/lib.js"], "additional": [EXTERNALS_KEYWORD]},
        externals,
        _normalizer(),
        safe_to_use_optional_caches=True,
    )
    assert result.sections.main == ["app.js", "https://cdn.example.com/lib.js"]
    assert result.sections.additional == ["https://cdn.example.com/font.woff"]
    assert result.warnings == []
    assert externals == ["https://cdn.example.com/lib.js", "https://cdn.example.com/font.woff"]


def test_missing_literal_and_empty_pattern_warn() -> None:
    result = partition_assets(["app.js"], [], {"main": ["missing.js", "*.css", "app.js"]}, [], _normalizer())
    assert result.sections.main == ["app.js"]
    assert len(result.warnings) == 2
    assert "[missing.js]" in result.warnings[0]
    assert "[*.css] did not match any assets" in result.warnings[1]


def test_non_string_keys_are_ignored_and_regex_keys_match() -> None:
    result = partition_assets(
        ["app.js", "img/a.png", "img/b.png"],
        [],
        {"main": [42, None, re.compile(r"\.png$"), "app.js"]},
        [],
        _normalizer(),
    )
    assert result.sections.main == ["img/a.png", "img/b.png", "app.js"]
    assert result.warnings == []


def test_optional_sections_warn_without_acknowledgement() -> None:
    result = partition_assets(["a.js", "b.js"], [], {"main": ["a.js"], "optional": ["b.js"]}, [], _normalizer())
    assert result.sections.optional == ["b.js"]
    assert any("`additional` and `optional`" in warning for warning in result.warnings)


def test_sections_are_normalized_under_public_path() -> None:
    normalizer = PathNormalizer(build_rewrite(None), relative_paths=False, public_path="/static/")
    result = partition_assets(
        ["index.html", "app.js", "c.js"],
        [],
        {"main": ["index.html", "app.js"], "additional": [REST_KEYWORD]},
        [],
        normalizer,
        safe_to_use_optional_caches=True,
    )
    assert result.sections.main == ["/static/", "/static/app.js"]
    assert result.sections.additional == ["/static/c.js"]


def test_invalid_caches_value_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        partition_assets(["a.js"], [], "some", [], _normalizer())
