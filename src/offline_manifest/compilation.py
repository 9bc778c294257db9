"""In-memory view of one build's output as seen by the manifest pass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class Compilation:
    output_path: Path
    assets: dict[str, bytes]
    public_path: str | None = None
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    emitted: dict[str, bytes] = field(default_factory=dict)

    @classmethod
    def from_directory(cls, output_path: Path, public_path: str | None = None) -> "Compilation":
        """Discover every file under ``output_path`` as a build asset."""
        root = Path(output_path)
        files = sorted(path for path in root.rglob("*") if path.is_file())
        assets = {path.relative_to(root).as_posix(): path.read_bytes() for path in files}
        return cls(output_path=root, assets=assets, public_path=public_path)

    def emit(self, name: str, content: bytes) -> None:
        self.emitted[name] = content

    def write_emitted(self) -> list[Path]:
        written: list[Path] = []
        for name, content in self.emitted.items():
            target = self.output_path / name
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
            written.append(target)
        return written
