"""Content hashing and version token resolution."""

from __future__ import annotations

import hashlib
from datetime import datetime
from typing import Any, Callable, Iterable, Mapping, Union

from .paths import PathNormalizer

VersionOption = Union[str, Callable[[Any], str], None]


def hash_content(data: bytes | str) -> str:
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha1(data).hexdigest()


def compute_hashes_map(
    asset_contents: Mapping[str, bytes],
    final_assets: Iterable[str],
    normalizer: PathNormalizer,
) -> dict[str, str]:
    """Map content hash to served path for every asset that made the final list.

    Insertion follows ``asset_contents`` order, which the bundle hash depends on.
    """
    wanted = set(final_assets)
    hashes: dict[str, str] = {}
    for name, content in asset_contents.items():
        path = normalizer.normalize_one(name)
        if path is None or path not in wanted:
            continue
        hashes[hash_content(content)] = path
    return hashes


def compute_bundle_hash(hashes_map: Mapping[str, str]) -> str:
    return hash_content("".join(hashes_map.keys()))


def resolve_version(option: VersionOption, bundle_hash: str | None, context: Any = None) -> str:
    if option is None:
        # Not reproducible; meant for manual builds only.
        return datetime.now().strftime("%x, %X")
    if callable(option):
        return str(option(context))
    token = bundle_hash or ""
    return str(option).replace("{hash}", token).replace("[hash]", token)
