"""Offline cache manifest resolution for build outputs."""

__version__ = "0.1.0"

from .cache_maps import CacheMapRule, JsFunction, serialize_cache_maps
from .compilation import Compilation
from .config import OfflineOptions, load_options
from .errors import ConfigurationError, OfflineManifestError, ToolError, ValidationError
from .keys import EXTERNALS_KEYWORD, REST_KEYWORD
from .plugin import BuildResult, OfflinePlugin

__all__ = [
    "BuildResult",
    "CacheMapRule",
    "Compilation",
    "ConfigurationError",
    "EXTERNALS_KEYWORD",
    "JsFunction",
    "OfflineManifestError",
    "OfflineOptions",
    "OfflinePlugin",
    "REST_KEYWORD",
    "ToolError",
    "ValidationError",
    "load_options",
    "serialize_cache_maps",
]
