"""Offline manifest plugin: option handling, base path resolution and the build pass."""

from __future__ import annotations

import logging
import posixpath
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping

from . import __version__
from .cache_maps import serialize_cache_maps
from .compilation import Compilation
from .config import OfflineOptions, build_options
from .errors import ConfigurationError, ToolError
from .loaders import extract_loaders
from .partition import CacheSections, partition_assets
from .paths import PathNormalizer, build_rewrite
from .tools import AppCacheTool, CacheTool, ServiceWorkerTool, resolve_tool_paths
from .versioning import compute_bundle_hash, compute_hashes_map, resolve_version

logger = logging.getLogger(__name__)

AUTO_UPDATE_INTERVAL = 3600000
UPDATE_STRATEGIES = ("all", "hash", "changed")
RESPONSE_STRATEGIES = ("cache-first", "network-first")


@dataclass(frozen=True)
class BuildResult:
    sections: CacheSections
    assets: list[str]
    externals: list[str]
    loaders: dict[str, list[str]]
    hashes_map: dict[str, str]
    hash: str
    version: str
    emitted: list[str]


class OfflinePlugin:
    def __init__(self, options: OfflineOptions | Mapping[str, Any] | None = None) -> None:
        if not isinstance(options, OfflineOptions):
            options = build_options(dict(options or {}))
        self.options = options
        self.plugin_version = __version__
        self.warnings: list[str] = []
        self.public_path = options.public_path or None
        self.relative_paths = options.relative_paths
        self.strategy = options.update_strategy
        self.response_strategy = options.response_strategy
        self.version_option = options.version
        self.auto_update = _auto_update_interval(options.auto_update)

        self.external_paths: list[str] = list(options.externals)
        self.loaders: dict[str, list[str]] = {}
        self._raw_loaders: dict[str, list[str]] = {}
        self._normalizer: PathNormalizer | None = None

        self.sections = CacheSections()
        self.assets: list[str] = []
        self.externals: list[str] = []
        self.hashes_map: dict[str, str] = {}
        self.hash: str | None = None
        self.resolved_version: str | None = None

        if self.response_strategy not in RESPONSE_STRATEGIES:
            raise ConfigurationError(
                "RESPONSE_STRATEGY_UNKNOWN",
                f"response_strategy must be one of {list(RESPONSE_STRATEGIES)}",
            )
        if self.strategy not in UPDATE_STRATEGIES:
            raise ConfigurationError(
                "UPDATE_STRATEGY_UNKNOWN",
                f"update_strategy must be one of {list(UPDATE_STRATEGIES)}",
            )
        if self.strategy == "hash":
            self.warnings.append(
                "`hash` update strategy is deprecated, use `all` strategy and "
                '{ version: "{hash}" } instead'
            )
            self.strategy = "all"
            self.version_option = "{hash}"

        self.rewrite = build_rewrite(options.rewrites)
        self.cache_maps = serialize_cache_maps(options.cache_maps)

        self.tools: dict[str, CacheTool] = {}
        if options.service_worker is not None:
            self.tools[ServiceWorkerTool.key] = ServiceWorkerTool(options.service_worker)
        if options.app_cache is not None:
            self.tools[AppCacheTool.key] = AppCacheTool(options.app_cache)
        if not self.tools:
            raise ConfigurationError("NO_CACHE_TOOL", "You should have at least one cache service to be specified")

    @property
    def version(self) -> str:
        return resolve_version(self.version_option, self.hash, self)

    @property
    def normalizer(self) -> PathNormalizer:
        if self._normalizer is None:
            raise ConfigurationError("NOT_CONFIGURED", "configure() must run before paths are normalized")
        return self._normalizer

    def configure(self, output_path: Path, host_public_path: str | None = None) -> None:
        """Resolve base paths for the host output and every tool."""
        self.external_paths, self._raw_loaders = extract_loaders(self.options.externals)

        relative = self.options.relative_paths
        public_path = self.options.public_path or None
        if relative is True and public_path:
            message = (
                "`public_path` is used in conjunction with `relative_paths`, choose one of it; "
                "relative paths are disabled"
            )
            if message not in self.warnings:
                self.warnings.append(message)
            relative = False
        if public_path is None and host_public_path and relative is not True:
            public_path = host_public_path
            relative = False
        if public_path:
            public_path = public_path.rstrip("/") + "/"
        if relative is None:
            relative = not public_path

        self.public_path = public_path
        self.relative_paths = relative
        for tool in self.tools.values():
            resolve_tool_paths(
                tool,
                relative_paths=relative,
                public_path=public_path,
                output_root=Path(output_path),
            )
        self._normalizer = PathNormalizer(self.rewrite, relative_paths=relative, public_path=public_path)
        logger.info(
            "Offline manifest configured relative_paths=%s public_path=%s tools=%s",
            relative,
            public_path,
            ",".join(self.tools),
        )

    def runtime_config(self) -> dict[str, Any]:
        data: dict[str, Any] = {"autoUpdate": self.auto_update}
        for key, tool in self.tools.items():
            data[key] = tool.get_config(self)
        return data

    def build(self, compilation: Compilation) -> BuildResult:
        if self._normalizer is None:
            self.configure(compilation.output_path, compilation.public_path)
        for message in self.warnings:
            self._report_warning(compilation, message)

        self.use_tools(lambda tool: tool.add_entry(self, compilation))

        tool_outputs = {
            posixpath.normpath(name) for tool in self.tools.values() for name in tool.emitted_names()
        }
        build_assets = {name: content for name, content in compilation.assets.items() if name not in tool_outputs}
        result = partition_assets(
            build_assets.keys(),
            self.options.excludes,
            self.options.caches,
            self.external_paths,
            self.normalizer,
            safe_to_use_optional_caches=self.options.safe_to_use_optional_caches,
        )
        for message in result.warnings:
            self._report_warning(compilation, message)
        self.sections = result.sections
        self.assets = result.assets
        self.externals = result.externals
        self.loaders = {name: self.normalizer.normalize(paths) for name, paths in self._raw_loaders.items()}

        self.hashes_map = compute_hashes_map(build_assets, self.assets, self.normalizer)
        self.hash = compute_bundle_hash(self.hashes_map)
        self.resolved_version = self.version

        self.use_tools(lambda tool: tool.apply(self, compilation))
        logger.info(
            "Offline manifest built assets=%d hash=%s version=%s",
            len(self.assets),
            self.hash,
            self.resolved_version,
        )
        return BuildResult(
            sections=self.sections,
            assets=list(self.assets),
            externals=list(self.externals),
            loaders={name: list(paths) for name, paths in self.loaders.items()},
            hashes_map=dict(self.hashes_map),
            hash=self.hash,
            version=self.resolved_version,
            emitted=list(compilation.emitted),
        )

    def use_tools(self, fn: Callable[[CacheTool], Any]) -> dict[str, Any]:
        """Run ``fn`` for every tool concurrently; any failure fails the whole step."""
        results: dict[str, Any] = {}
        failures: dict[str, Exception] = {}
        with ThreadPoolExecutor(max_workers=len(self.tools)) as executor:
            futures = {executor.submit(fn, tool): key for key, tool in self.tools.items()}
            for future in as_completed(futures):
                key = futures[future]
                try:
                    results[key] = future.result()
                except Exception as exc:
                    failures[key] = exc
        if failures:
            failed = [key for key in self.tools if key in failures]
            logger.error("Offline manifest tools failed: %s", ", ".join(failed))
            raise ToolError("TOOL_FAILED", ", ".join(failed)) from failures[failed[0]]
        return {key: results[key] for key in self.tools}

    def _report_warning(self, compilation: Compilation, message: str) -> None:
        logger.warning(message)
        compilation.warnings.append(message)


def _auto_update_interval(value: bool | int) -> int | None:
    if value is True:
        return AUTO_UPDATE_INTERVAL
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    return None
