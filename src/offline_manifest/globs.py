"""Minimatch-style glob matching for exclude patterns and cache keys."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable

_RANGE_PATTERN = re.compile(r"^(-?\d+)\.\.(-?\d+)$")
_EXTGLOB_PREFIXES = "@!?*+"

# `**` as a segment: zero or more non-dot directories.
_GLOBSTAR = r"(?:(?!\.)[^/]*/)*"
_GLOBSTAR_TAIL = r"(?:(?!\.)[^/]*(?:/(?!\.)[^/]*)*)?"


def expand_braces(pattern: str) -> list[str]:
    """Expand `{a,b}` alternatives and `{1..3}` ranges, left to right."""
    index = 0
    length = len(pattern)
    while index < length:
        char = pattern[index]
        if char == "\\":
            index += 2
            continue
        if char == "{":
            close, parts = _split_brace(pattern, index)
            if close is not None:
                prefix = pattern[:index]
                suffix = pattern[close + 1 :]
                expanded: list[str] = []
                for part in parts:
                    for tail in expand_braces(part + suffix):
                        expanded.append(prefix + tail)
                return expanded
        index += 1
    return [pattern]


def _split_brace(pattern: str, start: int) -> tuple[int | None, list[str]]:
    depth = 0
    commas: list[int] = []
    index = start + 1
    while index < len(pattern):
        char = pattern[index]
        if char == "\\":
            index += 2
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            if depth == 0:
                body = pattern[start + 1 : index]
                if commas:
                    bounds = [start] + commas + [index]
                    return index, [pattern[a + 1 : b] for a, b in zip(bounds, bounds[1:])]
                match = _RANGE_PATTERN.match(body)
                if match:
                    first, last = int(match.group(1)), int(match.group(2))
                    step = 1 if last >= first else -1
                    return index, [str(value) for value in range(first, last + step, step)]
                return None, []
            depth -= 1
        elif char == "," and depth == 0:
            commas.append(index)
        index += 1
    return None, []


def has_magic(pattern: str) -> bool:
    if len(expand_braces(pattern)) > 1:
        return True
    index = 0
    while index < len(pattern):
        char = pattern[index]
        if char == "\\":
            index += 2
            continue
        if char in "*?":
            return True
        if char == "[" and _class_end(pattern, index) is not None:
            return True
        if char in _EXTGLOB_PREFIXES and pattern[index + 1 : index + 2] == "(":
            return True
        index += 1
    return False


@lru_cache(maxsize=1024)
def compile_glob(pattern: str) -> re.Pattern[str]:
    body = "|".join(_translate(alternative) for alternative in expand_braces(pattern))
    return re.compile(f"^(?:{body})$")


def match_glob(path: str, pattern: str) -> bool:
    return compile_glob(pattern).match(path) is not None


def match_any(path: str, patterns: Iterable[str]) -> bool:
    return any(match_glob(path, pattern) for pattern in patterns)


def _translate(pattern: str) -> str:
    segments = pattern.split("/")
    last = len(segments) - 1
    parts: list[str] = []
    for index, segment in enumerate(segments):
        if segment == "**":
            parts.append(_GLOBSTAR_TAIL if index == last else _GLOBSTAR)
            continue
        parts.append(_translate_segment(segment, dot_guard=True))
        if index != last:
            parts.append("/")
    return "".join(parts)


def _translate_segment(segment: str, *, dot_guard: bool) -> str:
    out: list[str] = []
    if dot_guard and not (segment.startswith(".") or segment.startswith("\\.")):
        out.append(r"(?!\.)")
    index = 0
    length = len(segment)
    while index < length:
        char = segment[index]
        if char == "\\" and index + 1 < length:
            out.append(re.escape(segment[index + 1]))
            index += 2
            continue
        if char in _EXTGLOB_PREFIXES and segment[index + 1 : index + 2] == "(":
            close = _group_end(segment, index + 1)
            if close is not None:
                out.append(_translate_extglob(char, segment[index + 2 : close]))
                index = close + 1
                continue
        if char == "*":
            out.append("[^/]*")
        elif char == "?":
            out.append("[^/]")
        elif char == "[":
            close = _class_end(segment, index)
            if close is None:
                out.append(re.escape(char))
            else:
                out.append(_translate_class(segment[index + 1 : close]))
                index = close
        else:
            out.append(re.escape(char))
        index += 1
    return "".join(out)


def _translate_extglob(kind: str, body: str) -> str:
    alternatives = "|".join(
        _translate_segment(option, dot_guard=False) for option in _split_top_level(body)
    )
    if kind == "!":
        return f"(?:(?!(?:{alternatives})(?:/|$))[^/]*)"
    suffix = {"@": "", "?": "?", "*": "*", "+": "+"}[kind]
    return f"(?:{alternatives}){suffix}"


def _translate_class(body: str) -> str:
    negate = body[:1] in ("!", "^")
    if negate:
        body = body[1:]
    escaped = "".join("\\" + char if char in "\\[" else char for char in body)
    if negate:
        return f"[^/{escaped}]"
    return f"[{escaped}]"


def _class_end(pattern: str, start: int) -> int | None:
    index = start + 1
    if pattern[index : index + 1] in ("!", "^"):
        index += 1
    if pattern[index : index + 1] == "]":
        index += 1
    while index < len(pattern):
        if pattern[index] == "]":
            return index
        if pattern[index] == "/":
            return None
        index += 1
    return None


def _group_end(pattern: str, start: int) -> int | None:
    depth = 0
    index = start
    while index < len(pattern):
        char = pattern[index]
        if char == "\\":
            index += 2
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return index
        index += 1
    return None


def _split_top_level(body: str) -> list[str]:
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    index = 0
    while index < len(body):
        char = body[index]
        if char == "\\":
            current.append(body[index : index + 2])
            index += 2
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if char == "|" and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
        index += 1
    parts.append("".join(current))
    return parts
