"""Cache tool capability interface and URL resolution."""

from __future__ import annotations

import os
import posixpath
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable
from urllib.parse import urlsplit, urlunsplit

from ..errors import ConfigurationError
from ..paths import is_absolute_url

if TYPE_CHECKING:
    from ..compilation import Compilation
    from ..plugin import OfflinePlugin


def _identity(path: str) -> str:
    return path


class CacheTool(ABC):
    """One runtime cache consumer fed with the resolved sections."""

    key: str = ""

    def __init__(self, output: str, public_path: str | None = None) -> None:
        self.output = output
        self.public_path = public_path
        self.base_path: str | None = None
        self.location: str | None = None
        self.path_rewrite: Callable[[str], str] = _identity

    @abstractmethod
    def get_config(self, plugin: "OfflinePlugin") -> dict[str, Any]:
        """Return the JSON-safe runtime config for this tool."""

    def emitted_names(self) -> list[str]:
        """Output names this tool writes into the build directory."""
        return [self.output]

    def add_entry(self, plugin: "OfflinePlugin", compilation: "Compilation") -> None:
        return None

    @abstractmethod
    def apply(self, plugin: "OfflinePlugin", compilation: "Compilation") -> None:
        """Emit this tool's artifacts into the compilation."""


def join_relative(base_path: str, path: str) -> str:
    joined = posixpath.normpath(posixpath.join(base_path, path))
    if joined == ".":
        return "./"
    if path.endswith("/") and not joined.endswith("/"):
        joined += "/"
    return joined


def relative_base(output_root: Path, tool_output: str) -> str:
    """Route from the tool's output location back to the build output root."""
    root = os.path.abspath(output_root)
    absolute_output = os.path.normpath(os.path.join(root, tool_output))
    start = absolute_output if tool_output.endswith("/") else os.path.dirname(absolute_output)
    route = os.path.relpath(root, start).replace(os.sep, "/")
    if route == ".":
        route = ""
    route = route.rstrip("/")
    if route:
        route += "/"
    return route if route.startswith(".") else "./" + route


def resolve_tool_paths(
    tool: CacheTool,
    *,
    relative_paths: bool,
    public_path: str | None,
    output_root: Path,
) -> None:
    if not relative_paths and not public_path:
        raise ConfigurationError("BASE_PATH_UNRESOLVED", f"Cannot generate base path for {tool.key}")

    if relative_paths:
        base_path = relative_base(output_root, tool.output)
        tool.base_path = base_path
        tool.location = tool.output

        def rewrite(path: str) -> str:
            if is_absolute_url(path) or path.startswith("/"):
                return path
            return join_relative(base_path, path)

        tool.path_rewrite = rewrite
        return

    public_path = str(public_path)
    tool.base_path = public_path.rstrip("/") + "/"
    tool.location = tool.public_path or _location_under(public_path, tool)
    tool.path_rewrite = _identity


def _location_under(public_path: str, tool: CacheTool) -> str:
    parts = urlsplit(public_path)
    base_dir = posixpath.normpath(parts.path or "/").rstrip("/") + "/"
    joined = posixpath.normpath(posixpath.join(base_dir, tool.output))
    if tool.output.endswith("/"):
        joined = joined.rstrip("/") + "/"
    if not joined.startswith(base_dir):
        raise ConfigurationError(
            "LOCATION_OUTSIDE_PUBLIC_PATH",
            f"Wrong {tool.key}.output value. Final {tool.key}.location URL path "
            "bounds are outside of public_path",
        )
    return urlunsplit(parts._replace(path=joined))
