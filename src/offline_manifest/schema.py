"""JSON Schema validation of raw option documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator

from .errors import ConfigurationError

DEFAULT_SCHEMA_PATH = Path(__file__).with_name("schemas") / "offline_options.schema.yaml"


@dataclass
class OptionsSchema:
    path: Path = DEFAULT_SCHEMA_PATH
    _schema: dict[str, Any] | None = field(default=None, init=False, repr=False)

    def load(self) -> dict[str, Any]:
        if self._schema is None:
            self._schema = yaml.safe_load(self.path.read_text(encoding="utf-8"))
        return self._schema

    def validate(self, payload: dict[str, Any]) -> None:
        validator = Draft202012Validator(self.load())
        errors = sorted(validator.iter_errors(payload), key=lambda error: error.json_path)
        if errors:
            messages = "; ".join(f"{error.json_path}: {error.message}" for error in errors)
            raise ConfigurationError("OPTIONS_SCHEMA_INVALID", messages)
