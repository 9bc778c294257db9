"""Cache map rule validation and serialization for the runtime."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from .errors import ValidationError

REQUEST_TYPES = ("navigate", "same-origin", "cross-origin")

_REGEX_FLAGS = ((re.IGNORECASE, "i"), (re.MULTILINE, "m"), (re.DOTALL, "s"))


@dataclass(frozen=True)
class JsFunction:
    """JavaScript function source passed through to the runtime verbatim."""

    source: str

    def __str__(self) -> str:
        return self.source


@dataclass(frozen=True)
class CacheMapRule:
    match: str | re.Pattern[str]
    to: str | JsFunction | None = None
    request_types: list[str] | None = None


def serialize_cache_maps(rules: Iterable[CacheMapRule | Mapping[str, Any]] | None) -> list[dict[str, Any]]:
    if not rules:
        return []
    return [_serialize_rule(_coerce_rule(rule)) for rule in rules]


def _coerce_rule(rule: CacheMapRule | Mapping[str, Any]) -> CacheMapRule:
    if isinstance(rule, CacheMapRule):
        return rule
    if not isinstance(rule, Mapping):
        raise ValidationError("CACHE_MAP_INVALID", f"rule must be a mapping, got {type(rule).__name__}")
    if "match" not in rule:
        raise ValidationError("CACHE_MAP_INVALID", "rule requires a `match` property")
    request_types = rule.get("requestTypes", rule.get("request_types"))
    return CacheMapRule(match=rule["match"], to=rule.get("to"), request_types=request_types)


def _serialize_rule(rule: CacheMapRule) -> dict[str, Any]:
    if rule.to is not None and not isinstance(rule.to, (str, JsFunction)):
        raise ValidationError(
            "CACHE_MAP_TO_INVALID",
            "cacheMaps `to` property must be a string, a JsFunction or null",
        )
    if rule.request_types is not None:
        if not isinstance(rule.request_types, (list, tuple)):
            raise ValidationError(
                "CACHE_MAP_REQUEST_TYPES_INVALID",
                "cacheMaps `requestTypes` property must be a list or null",
            )
        unknown = [item for item in rule.request_types if item not in REQUEST_TYPES]
        if unknown:
            raise ValidationError(
                "CACHE_MAP_REQUEST_TYPES_INVALID",
                f"cacheMaps `requestTypes` values must be drawn from {list(REQUEST_TYPES)}",
            )
    if isinstance(rule.to, JsFunction):
        to = rule.to.source
    else:
        to = json.dumps(rule.to, ensure_ascii=True) if rule.to else None
    return {
        "match": _match_literal(rule.match),
        "to": to,
        "requestTypes": list(rule.request_types) if rule.request_types is not None else None,
    }


def _match_literal(match: str | re.Pattern[str]) -> str:
    if isinstance(match, re.Pattern):
        flags = "".join(letter for flag, letter in _REGEX_FLAGS if match.flags & flag)
        return f"/{match.pattern}/{flags}"
    return str(match)
