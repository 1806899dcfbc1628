# src/rulecheck/dataloader/config_loader.py
from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import TypeAdapter, ValidationError

from rulecheck.errors import ConfigError
from rulecheck.schemas.models import Config, ValidationRule

_YAML_SUFFIXES = {".yaml", ".yml"}
_RULE_SUFFIXES = _YAML_SUFFIXES | {".json"}

_RULES_ADAPTER = TypeAdapter(list[ValidationRule])


class ConfigLoader:
    """
    @brief
    Loader for runtime configuration and rule sets.

    @details
    Reads YAML (or JSON for rule files) from disk, checks the top-level
    structure, and validates it against the pydantic schemas. Every failure
    mode surfaces as a structured `ConfigError`; the engine itself never
    sees malformed rule definitions.
    """

    def load(self, path: Path) -> Config:
        """
        @brief
        Load and validate configuration from a YAML file.

        @params
            path : Path
                Filesystem path to configuration file (.yaml or .yml).

        @returns
            Validated Config instance with defaults applied.

        @raises
            ConfigError
                Raised if file is missing, malformed, or fails schema validation.
        """
        data = self._read(path, allowed=_YAML_SUFFIXES)
        if not isinstance(data, Mapping):
            raise ConfigError(
                message="Configuration root must be a mapping (key: value pairs).",
                source="ConfigLoader.load",
                suggested_action="Ensure top-level YAML structure uses key: value mappings.",
            )

        try:
            return Config.model_validate(dict(data))
        except ValidationError as e:
            raise ConfigError(
                message=f"Invalid configuration structure: {e}",
                source="ConfigLoader.load",
                suggested_action=(
                    "Check field names, types and rule definitions in config.yaml. "
                    "Remove unknown keys (extra fields are forbidden)."
                ),
            ) from e

    def load_rules(self, path: Path) -> list[ValidationRule]:
        """
        @brief
        Load a standalone rule set.

        @details
        Accepts YAML or JSON holding either a list of rules or a mapping with
        a `rules` key. Rule fields may use snake_case or camelCase names.

        @raises
            ConfigError
                Raised on I/O, syntax, structure or schema problems.
        """
        data = self._read(path, allowed=_RULE_SUFFIXES)
        if isinstance(data, Mapping):
            data = data.get("rules")
        if not isinstance(data, list):
            raise ConfigError(
                message="Rule file must contain a list of rules or a mapping with 'rules'.",
                source="ConfigLoader.load_rules",
                suggested_action="Wrap rule definitions in a top-level list or 'rules:' key.",
            )

        try:
            return _RULES_ADAPTER.validate_python(data)
        except ValidationError as e:
            raise ConfigError(
                message=f"Invalid rule definition: {e}",
                source="ConfigLoader.load_rules",
                suggested_action="Every rule needs id, name and condition.type.",
            ) from e

    def _read(self, path: Path, allowed: set[str]) -> Any:
        """
        @brief
        Read a YAML/JSON file into Python objects with strict checks.

        @details
        Validates path type, existence, extension, readability, syntax and
        non-empty content.

        @raises
            ConfigError
                Raised on any structural or I/O problem.
        """
        # (1) Validate path type and existence
        if not isinstance(path, Path):
            raise ConfigError(
                message=f"Invalid path type: expected pathlib.Path, got {type(path).__name__}",
                source="ConfigLoader._read",
                suggested_action="Pass a pathlib.Path object.",
            )

        if not path.exists():
            raise ConfigError(
                message=f"Configuration file not found: {path}",
                source="ConfigLoader._read",
                suggested_action="Ensure the file exists and the path is correct.",
            )

        # (2) Enforce supported file extension
        suffix = path.suffix.lower()
        if suffix not in allowed:
            raise ConfigError(
                message=f"Invalid configuration file extension: {path.suffix}",
                source="ConfigLoader._read",
                suggested_action=f"Use one of: {', '.join(sorted(allowed))}.",
            )

        # (3) Read and parse content
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f) if suffix == ".json" else yaml.safe_load(f)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigError(
                message=f"Parsing failed for {path.name}: {e}",
                source="ConfigLoader._read",
                suggested_action="Fix syntax/indentation of the file.",
            ) from e
        except OSError as e:
            raise ConfigError(
                message=f"Unable to read configuration file: {e}",
                source="ConfigLoader._read",
                suggested_action="Check file permissions and path accessibility.",
            ) from e

        # (4) Reject empty documents
        if data is None:
            raise ConfigError(
                message="Configuration file is empty.",
                source="ConfigLoader._read",
                suggested_action="Populate the file with configuration or rules.",
            )
        return data


__all__ = ["ConfigLoader"]
