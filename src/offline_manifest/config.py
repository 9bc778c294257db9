"""Option models and YAML loader for offline manifest builds."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Callable

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .cache_maps import JsFunction
from .errors import ConfigurationError
from .partition import ALL_MODE, SECTIONS
from .schema import OptionsSchema

_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

DEFAULT_EXCLUDES = ["**/.*", "**/*.map"]


class PrefetchRequest(BaseModel):
    credentials: str = "omit"
    headers: dict[str, str] | None = None
    mode: str = "cors"
    cache: str | None = None


class ServiceWorkerOptions(BaseModel):
    output: str = "sw.js"
    entry: str | None = None
    scope: str | None = None
    events: bool = False
    public_path: str | None = None
    cache_name: str = ""
    prefetch_request: PrefetchRequest = Field(default_factory=PrefetchRequest)
    navigate_fallback_url: str | None = None
    navigate_fallback_for_redirects: bool = True


class AppCacheOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    directory: str = "appcache/"
    name: str = "manifest"
    caches: list[str] = ["main"]
    network: str | None = Field("*", alias="NETWORK")
    fallback: dict[str, str] | None = Field(None, alias="FALLBACK")
    events: bool = False
    disable_install: bool = False
    include_cross_origin: bool = False
    public_path: str | None = None

    @field_validator("caches")
    @classmethod
    def _check_caches(cls, value: list[str]) -> list[str]:
        unknown = sorted(set(value) - set(SECTIONS))
        if unknown:
            raise ValueError(f"unknown cache sections: {', '.join(unknown)}")
        return value


class OfflineOptions(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    caches: str | dict[str, list[Any]] = ALL_MODE
    public_path: str | None = None
    update_strategy: str = "changed"
    response_strategy: str = "cache-first"
    externals: list[str] = []
    excludes: list[str] = list(DEFAULT_EXCLUDES)
    relative_paths: bool | None = None
    version: str | Callable[..., str] | None = None
    auto_update: bool | int = False
    rewrites: dict[str, str] | Callable[[str], str] | None = None
    cache_maps: list[Any] | None = None
    safe_to_use_optional_caches: bool = False
    service_worker: ServiceWorkerOptions | None = Field(default_factory=ServiceWorkerOptions)
    app_cache: AppCacheOptions | None = Field(default_factory=AppCacheOptions)

    @field_validator("caches")
    @classmethod
    def _check_caches(cls, value: str | dict[str, list[Any]]) -> str | dict[str, list[Any]]:
        if isinstance(value, str):
            if value != ALL_MODE:
                raise ValueError(f"caches must be '{ALL_MODE}' or a mapping of sections")
            return value
        unknown = sorted(set(value) - set(SECTIONS))
        if unknown:
            raise ValueError(f"unknown cache sections: {', '.join(unknown)}")
        return value

    @field_validator("service_worker", "app_cache", mode="before")
    @classmethod
    def _tool_toggle(cls, value: Any) -> Any:
        if value is False:
            return None
        if value is True:
            return {}
        return value


def _expand_str(value: str) -> str:
    def replacer(match: re.Match[str]) -> str:
        token = match.group(1)
        if ":-" in token:
            key, default = token.split(":-", 1)
            actual = os.getenv(key, "")
            return actual if actual.strip() else default
        actual = os.getenv(token, "")
        if not actual.strip():
            raise ConfigurationError("ENV_VAR_MISSING", token)
        return actual

    return _VAR_PATTERN.sub(replacer, value)


def _expand_payload(value: Any) -> Any:
    if isinstance(value, str):
        return _expand_str(value)
    if isinstance(value, list):
        return [_expand_payload(item) for item in value]
    if isinstance(value, dict):
        return {str(key): _expand_payload(item) for key, item in value.items()}
    return value


def _coerce_cache_maps(rules: list[Any] | None) -> list[Any] | None:
    """YAML spells function targets as ``to: {js: "..."}``."""
    if not rules:
        return rules
    coerced: list[Any] = []
    for rule in rules:
        if isinstance(rule, dict) and isinstance(rule.get("to"), dict) and "js" in rule["to"]:
            rule = {**rule, "to": JsFunction(str(rule["to"]["js"]))}
        coerced.append(rule)
    return coerced


def build_options(data: dict[str, Any] | None) -> OfflineOptions:
    try:
        return OfflineOptions(**(data or {}))
    except PydanticValidationError as exc:
        raise ConfigurationError("OPTIONS_INVALID", str(exc)) from exc


def load_options(path: Path, schema: OptionsSchema | None = None) -> OfflineOptions:
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    expanded = _expand_payload(data)
    (schema or OptionsSchema()).validate(expanded)
    expanded["cache_maps"] = _coerce_cache_maps(expanded.get("cache_maps"))
    return build_options(expanded)
