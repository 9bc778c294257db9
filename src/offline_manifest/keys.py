"""Cache key variants for cache section lists."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Union

from .globs import compile_glob, has_magic
from .paths import is_absolute_url

REST_KEYWORD = ":rest:"
EXTERNALS_KEYWORD = ":externals:"


@dataclass(frozen=True)
class LiteralKey:
    path: str


@dataclass(frozen=True)
class PatternKey:
    """Glob string or compiled regular expression matched against asset names."""

    source: str | re.Pattern[str]

    def matches(self, asset: str) -> bool:
        if isinstance(self.source, re.Pattern):
            return self.source.search(asset) is not None
        return compile_glob(self.source).match(asset) is not None

    def __str__(self) -> str:
        if isinstance(self.source, re.Pattern):
            return f"/{self.source.pattern}/"
        return self.source


@dataclass(frozen=True)
class RestMarker:
    def __str__(self) -> str:
        return REST_KEYWORD


@dataclass(frozen=True)
class ExternalsMarker:
    def __str__(self) -> str:
        return EXTERNALS_KEYWORD


CacheKey = Union[LiteralKey, PatternKey, RestMarker, ExternalsMarker]


def parse_cache_key(raw: Any) -> CacheKey | None:
    """Turn a configured key into its variant; unsupported values give None."""
    if isinstance(raw, (LiteralKey, PatternKey, RestMarker, ExternalsMarker)):
        return raw
    if isinstance(raw, re.Pattern):
        return PatternKey(raw)
    if not isinstance(raw, str):
        return None
    if raw == REST_KEYWORD:
        return RestMarker()
    if raw == EXTERNALS_KEYWORD:
        return ExternalsMarker()
    if (
        not is_absolute_url(raw)
        and not raw.startswith("/")
        and not raw.startswith("./")
        and has_magic(raw)
    ):
        return PatternKey(raw)
    return LiteralKey(raw)


def parse_cache_keys(raw_keys: Any) -> list[CacheKey]:
    if not isinstance(raw_keys, (list, tuple)):
        return []
    keys: list[CacheKey] = []
    for raw in raw_keys:
        key = parse_cache_key(raw)
        if key is not None:
            keys.append(key)
    return keys
