"""Cache section partitioning over the discovered build assets.

Sections are filled in the fixed order ``main``, ``additional``, ``optional``
from shared working pools: an asset claimed by an earlier section is not
available to a later one, so no asset is ever assigned twice. The rest and
externals markers name the section that receives whatever is left once all
three sections have been processed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Sequence

from .errors import ConfigurationError
from .globs import match_any
from .keys import (
    EXTERNALS_KEYWORD,
    REST_KEYWORD,
    ExternalsMarker,
    LiteralKey,
    PatternKey,
    RestMarker,
    parse_cache_keys,
)
from .paths import PathNormalizer

logger = logging.getLogger(__name__)

SECTIONS = ("main", "additional", "optional")
ALL_MODE = "all"


@dataclass
class CacheSections:
    main: list[str] = field(default_factory=list)
    additional: list[str] = field(default_factory=list)
    optional: list[str] = field(default_factory=list)

    def get(self, name: str) -> list[str]:
        if name not in SECTIONS:
            raise KeyError(f"Unknown cache section: {name}")
        return getattr(self, name)

    def assets(self) -> list[str]:
        return [*self.main, *self.additional, *self.optional]

    def as_dict(self) -> dict[str, list[str]]:
        return {name: list(self.get(name)) for name in SECTIONS}


@dataclass(frozen=True)
class PartitionResult:
    sections: CacheSections
    assets: list[str]
    externals: list[str]
    warnings: list[str]


def filter_excludes(assets: Iterable[str], excludes: Sequence[str] | None) -> list[str]:
    if not excludes:
        return list(assets)
    return [asset for asset in assets if not match_any(asset, excludes)]


def partition_assets(
    discovered: Iterable[str],
    excludes: Sequence[str] | None,
    caches: str | Mapping[str, Sequence[Any]],
    externals: Sequence[str],
    normalizer: PathNormalizer,
    *,
    safe_to_use_optional_caches: bool = False,
) -> PartitionResult:
    warnings: list[str] = []
    assets_pool = filter_excludes(discovered, excludes)
    normalized_externals = normalizer.normalize(externals)

    if caches == ALL_MODE:
        everything = normalizer.normalize(assets_pool) + normalized_externals
        sections = CacheSections(main=list(everything))
        return PartitionResult(
            sections=sections,
            assets=everything,
            externals=normalized_externals,
            warnings=warnings,
        )
    if not isinstance(caches, Mapping):
        raise ConfigurationError("CACHES_INVALID", f"expected '{ALL_MODE}' or a mapping of sections")

    if not safe_to_use_optional_caches and (caches.get("additional") or caches.get("optional")):
        warnings.append(
            "Cache sections `additional` and `optional` could be used only when each asset "
            "passed to it has unique name (e.g. hash or version in it) and is permanently "
            "available for given URL. If you think that it's your case, set "
            "`safe_to_use_optional_caches` option to `true`, to remove this warning."
        )

    externals_pool = list(externals)
    sections = CacheSections()
    rest_section: str | None = None
    externals_section: str | None = None

    for section in SECTIONS:
        claimed: list[str] = []
        for key in parse_cache_keys(caches.get(section)):
            if isinstance(key, RestMarker):
                if rest_section is not None:
                    raise ConfigurationError(
                        "REST_KEYWORD_REPEATED",
                        f"The {REST_KEYWORD} keyword can be used only once",
                    )
                rest_section = section
            elif isinstance(key, ExternalsMarker):
                if externals_section is not None:
                    raise ConfigurationError(
                        "EXTERNALS_KEYWORD_REPEATED",
                        f"The {EXTERNALS_KEYWORD} keyword can be used only once",
                    )
                externals_section = section
            elif isinstance(key, PatternKey):
                matched = [asset for asset in assets_pool if key.matches(asset)]
                if not matched:
                    warnings.append(f"Cache pattern [{key}] did not match any assets")
                    continue
                assets_pool = [asset for asset in assets_pool if not key.matches(asset)]
                claimed.extend(matched)
            elif isinstance(key, LiteralKey):
                if key.path in assets_pool:
                    assets_pool.remove(key.path)
                    claimed.append(key.path)
                elif key.path in externals_pool:
                    externals_pool.remove(key.path)
                    claimed.append(key.path)
                else:
                    warnings.append(
                        f"Cache asset [{key.path}] is not found in the output assets, "
                        "if it's an external asset, put it to the externals option "
                        "to remove this warning"
                    )
        sections.get(section).extend(normalizer.normalize(claimed))

    if rest_section is not None and assets_pool:
        sections.get(rest_section).extend(normalizer.normalize(assets_pool))
    if externals_section is not None and externals_pool:
        sections.get(externals_section).extend(normalizer.normalize(externals_pool))

    logger.debug(
        "Partitioned assets main=%d additional=%d optional=%d",
        len(sections.main),
        len(sections.additional),
        len(sections.optional),
    )
    return PartitionResult(
        sections=sections,
        assets=sections.assets(),
        externals=normalized_externals,
        warnings=warnings,
    )
