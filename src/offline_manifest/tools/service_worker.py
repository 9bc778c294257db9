"""Service worker script generator."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..config import ServiceWorkerOptions
from ..partition import SECTIONS
from .base import CacheTool

if TYPE_CHECKING:
    from ..compilation import Compilation
    from ..plugin import OfflinePlugin

logger = logging.getLogger(__name__)

DEFAULT_CACHE_NAME = "offline-manifest"


class ServiceWorkerTool(CacheTool):
    key = "ServiceWorker"

    def __init__(self, options: ServiceWorkerOptions) -> None:
        super().__init__(options.output, options.public_path)
        self.options = options
        self.entry_source = ""

    def get_config(self, plugin: "OfflinePlugin") -> dict[str, Any]:
        return {
            "output": self.output,
            "location": self.location,
            "scope": self.options.scope,
            "events": bool(self.options.events),
        }

    def add_entry(self, plugin: "OfflinePlugin", compilation: "Compilation") -> None:
        if not self.options.entry:
            self.entry_source = ""
            return
        self.entry_source = Path(self.options.entry).read_text(encoding="utf-8")

    def apply(self, plugin: "OfflinePlugin", compilation: "Compilation") -> None:
        data = self.runtime_data(plugin)
        payload = json.dumps(data, indent=2, ensure_ascii=False)
        content = f"var __wpo = {payload};\n\n{self.entry_source}"
        compilation.emit(self.output, content.encode("utf-8"))
        logger.info("ServiceWorker emitted output=%s version=%s", self.output, data["version"])

    def runtime_data(self, plugin: "OfflinePlugin") -> dict[str, Any]:
        rewrite = self.path_rewrite
        fallback = self.options.navigate_fallback_url
        return {
            "assets": {name: [rewrite(path) for path in plugin.sections.get(name)] for name in SECTIONS},
            "externals": [rewrite(path) for path in plugin.externals],
            "hashesMap": {digest: rewrite(path) for digest, path in plugin.hashes_map.items()},
            "loaders": {name: [rewrite(path) for path in paths] for name, paths in plugin.loaders.items()},
            "strategy": plugin.strategy,
            "responseStrategy": plugin.response_strategy,
            "version": plugin.resolved_version,
            "name": self.options.cache_name or DEFAULT_CACHE_NAME,
            "pluginVersion": plugin.plugin_version,
            "relativePaths": plugin.relative_paths,
            "prefetchRequest": self.options.prefetch_request.model_dump(exclude_none=True),
            "navigateFallbackURL": rewrite(fallback) if fallback else None,
            "navigateFallbackForRedirects": self.options.navigate_fallback_for_redirects,
            "cacheMaps": plugin.cache_maps,
        }
