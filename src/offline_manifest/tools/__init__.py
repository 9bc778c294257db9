"""Runtime cache consumers fed by the resolved manifest."""

from .app_cache import AppCacheTool
from .base import CacheTool, resolve_tool_paths
from .service_worker import ServiceWorkerTool

__all__ = ["AppCacheTool", "CacheTool", "ServiceWorkerTool", "resolve_tool_paths"]
