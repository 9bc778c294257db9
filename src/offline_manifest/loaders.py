"""Loader prefix extraction for externals declared as `name:path`."""

from __future__ import annotations

import re
from typing import Iterable

_LOADER_PREFIX = re.compile(r"^(\S+?):(//)?")


def extract_loaders(paths: Iterable[str]) -> tuple[list[str], dict[str, list[str]]]:
    cleaned: list[str] = []
    loaders: dict[str, list[str]] = {}
    for path in paths:
        match = _LOADER_PREFIX.match(path)
        if match and not match.group(2):
            path = path[match.end() :]
            loaders.setdefault(match.group(1), []).append(path)
        cleaned.append(path)
    return cleaned, loaders
