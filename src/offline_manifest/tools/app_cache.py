"""Legacy application cache manifest generator."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit

from ..config import AppCacheOptions
from ..paths import is_absolute_url
from .base import CacheTool

if TYPE_CHECKING:
    from ..compilation import Compilation
    from ..plugin import OfflinePlugin

logger = logging.getLogger(__name__)


class AppCacheTool(CacheTool):
    key = "AppCache"

    def __init__(self, options: AppCacheOptions) -> None:
        super().__init__(options.directory.rstrip("/") + "/", options.public_path)
        self.options = options

    @property
    def manifest_name(self) -> str:
        return f"{self.options.name}.appcache"

    @property
    def install_page_name(self) -> str:
        return f"{self.output}{self.options.name}.html"

    def emitted_names(self) -> list[str]:
        return [self.output + self.manifest_name, self.install_page_name]

    def get_config(self, plugin: "OfflinePlugin") -> dict[str, Any]:
        return {
            "location": self.location,
            "name": self.options.name,
            "events": bool(self.options.events),
            "disableInstall": bool(self.options.disable_install),
        }

    def apply(self, plugin: "OfflinePlugin", compilation: "Compilation") -> None:
        compilation.emit(self.output + self.manifest_name, self.render_manifest(plugin).encode("utf-8"))
        if not self.options.disable_install:
            page = f'<!doctype html>\n<html manifest="{self.manifest_name}"></html>\n'
            compilation.emit(self.install_page_name, page.encode("utf-8"))
        logger.info("AppCache emitted directory=%s version=%s", self.output, plugin.resolved_version)

    def render_manifest(self, plugin: "OfflinePlugin") -> str:
        lines = [
            "CACHE MANIFEST",
            f"#ver:{plugin.resolved_version}",
            f"#plugin:{plugin.plugin_version}",
            "",
            "CACHE:",
        ]
        for section in self.options.caches:
            for asset in plugin.sections.get(section):
                if not self.options.include_cross_origin and _is_cross_origin(asset, plugin.public_path):
                    continue
                lines.append(self.path_rewrite(asset))
        if self.options.network:
            lines.extend(["", "NETWORK:", self.options.network])
        if self.options.fallback:
            lines.extend(["", "FALLBACK:"])
            for source, target in self.options.fallback.items():
                lines.append(f"{self.path_rewrite(source)} {self.path_rewrite(target)}")
        return "\n".join(lines) + "\n"


def _is_cross_origin(asset: str, public_path: str | None) -> bool:
    if not is_absolute_url(asset):
        return False
    if not public_path or not is_absolute_url(public_path):
        return True
    asset_parts = urlsplit(asset)
    public_parts = urlsplit(public_path)
    return (asset_parts.scheme, asset_parts.netloc) != (public_parts.scheme, public_parts.netloc)
