"""CLI for running the offline manifest pass over a build output directory."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from .compilation import Compilation
from .config import load_options
from .errors import OfflineManifestError, reason_code
from .logging_utils import configure_logging
from .plugin import OfflinePlugin

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Offline manifest builder")
    parser.add_argument("--config", required=True, help="Path to offline options YAML")
    parser.add_argument("--output-dir", required=True, help="Build output directory to scan")
    parser.add_argument("--public-path", default=None, help="Public path the host serves the output under")
    parser.add_argument("--dry-run", action="store_true", help="Resolve and report without writing files")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    parser.add_argument("--log-file", action="append", default=None, help="Additional log file path")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(level=getattr(logging, str(args.log_level).upper(), logging.INFO), log_paths=args.log_file)
    output_dir = Path(args.output_dir)
    if not output_dir.is_dir():
        raise SystemExit(f"Output directory not found: {output_dir}")

    compilation = Compilation.from_directory(output_dir, public_path=args.public_path)
    summary: dict[str, object] = {}
    try:
        plugin = OfflinePlugin(load_options(Path(args.config)))
        result = plugin.build(compilation)
    except OfflineManifestError as exc:
        logger.error("Offline manifest failed: %s", exc)
        compilation.errors.append(str(exc))
        summary["reason_code"] = reason_code(exc)
    else:
        if not args.dry_run:
            for path in compilation.write_emitted():
                logger.info("Wrote %s", path)
        summary.update(
            {
                "version": result.version,
                "hash": result.hash,
                "sections": {name: len(paths) for name, paths in result.sections.as_dict().items()},
                "emitted": result.emitted,
            }
        )
    summary["warnings"] = compilation.warnings
    summary["errors"] = compilation.errors
    print(json.dumps(summary, ensure_ascii=True, indent=2))
    return 1 if compilation.errors else 0


if __name__ == "__main__":
    raise SystemExit(main())
