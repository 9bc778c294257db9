"""Asset path rewriting and normalization into served URLs."""

from __future__ import annotations

import re
from typing import Callable, Iterable, Mapping, Union

ENTRY_PREFIX = "__offline_"

_ABSOLUTE_URL = re.compile(r"^[a-z][a-z\d+\-.]*://", re.IGNORECASE)
_INDEX_PAGE = re.compile(r"^([\s\S]*?)index.htm(l?)$")

RewriteRule = Union[Callable[[str], str], Mapping[str, str]]


def is_absolute_url(value: str) -> bool:
    return bool(_ABSOLUTE_URL.match(value))


def default_rewrite(asset: str) -> str:
    """Serve `dir/index.html` as `dir/` and a root index page as `./`."""

    def replacer(match: re.Match[str]) -> str:
        if is_absolute_url(match.group(0)):
            return match.group(0)
        return match.group(1) or "./"

    return _INDEX_PAGE.sub(replacer, asset)


def build_rewrite(rule: RewriteRule | None) -> Callable[[str], str]:
    """Wrap a rewrite rule so bootstrap entry assets always rewrite to empty."""
    rule = rule if rule is not None else default_rewrite

    if callable(rule):
        transform = rule

        def rewrite(asset: str) -> str:
            if asset.startswith(ENTRY_PREFIX):
                return ""
            return transform(asset)

        return rewrite

    table = dict(rule)

    def substitute(asset: str) -> str:
        if asset.startswith(ENTRY_PREFIX):
            return ""
        return table.get(asset, asset)

    return substitute


def join_base(base_path: str, asset: str) -> str:
    if asset.startswith("./"):
        asset = asset[2:]
    elif asset.startswith("/"):
        asset = asset[1:]
    return base_path.rstrip("/") + "/" + asset


class PathNormalizer:
    """Canonicalizes asset identifiers for one build configuration.

    ``relative_paths`` selects host-relative output; otherwise every
    non-absolute path is joined onto ``public_path``.
    """

    def __init__(
        self,
        rewrite: Callable[[str], str],
        *,
        relative_paths: bool,
        public_path: str | None,
    ) -> None:
        if not relative_paths and not public_path:
            raise ValueError("public_path is required when relative_paths is disabled")
        self.rewrite = rewrite
        self.relative_paths = relative_paths
        self.public_path = public_path

    def normalize_one(self, asset: str) -> str | None:
        rewritten = self.rewrite(asset)
        if not isinstance(rewritten, str):
            raise TypeError(
                f"rewrite returned {type(rewritten).__name__} for {asset!r}; expected str"
            )
        if not rewritten:
            return None
        if is_absolute_url(rewritten):
            return rewritten
        if self.relative_paths:
            # The root page itself stays addressable as "./".
            if rewritten.startswith("./"):
                return rewritten[2:] or "./"
            return rewritten
        if rewritten.startswith("/"):
            return rewritten
        return join_base(self.public_path or "/", rewritten)

    def normalize(self, assets: Iterable[str]) -> list[str]:
        normalized: list[str] = []
        for asset in assets:
            value = self.normalize_one(asset)
            if value is not None:
                normalized.append(value)
        return normalized
