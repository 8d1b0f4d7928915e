"""Runtime configuration for the plan commenter."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml


class ConfigError(RuntimeError):
    """Raised when configuration files or values cannot be used."""


@dataclass(frozen=True, slots=True)
class CommenterConfig:
    """Options controlling plan discovery, report layout and comment cleanup."""

    tf_plan_lookup_dir: str = "."
    tf_plan_lookup_name: str = "tfplan.json"
    tf_plan_lookup_depth: int = 10
    expand_comment: bool = False
    heading_plan_variable_name: str = ""
    comment_header: str = "Terraform Plan"
    remove_previous_comments: bool = False
    hide_previous_comments: bool = False
    create_multiple_comments: bool = False
    quiet: bool = False

    def merged(self, overrides: Mapping[str, Any]) -> "CommenterConfig":
        """Return a copy with ``overrides`` applied; ``None`` values are ignored."""

        known = {item.name: item for item in fields(self)}
        changes: Dict[str, Any] = {}
        for raw_key, value in overrides.items():
            if value is None:
                continue
            key = str(raw_key).replace("-", "_")
            if key not in known:
                raise ConfigError(f"Unknown configuration option: {raw_key}")
            changes[key] = _coerce(key, value, getattr(self, key))
        return replace(self, **changes)


def _coerce(key: str, value: Any, default: Any) -> Any:
    if isinstance(default, bool):
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in {"true", "false"}:
            return value.strip().lower() == "true"
        raise ConfigError(f"Option '{key}' must be a boolean, got {value!r}")

    if isinstance(default, int):
        if isinstance(value, bool):
            raise ConfigError(f"Option '{key}' must be an integer, got {value!r}")
        try:
            number = int(value)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Option '{key}' must be an integer, got {value!r}") from exc
        if number < 0:
            raise ConfigError(f"Option '{key}' must not be negative")
        return number

    if not isinstance(value, str):
        raise ConfigError(f"Option '{key}' must be a string, got {value!r}")
    return value


def load_config_file(path: Path) -> Dict[str, Any]:
    """Read a YAML mapping of configuration options."""

    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:  # pragma: no cover - filesystem errors surfaced to caller
        raise ConfigError(f"Failed to read configuration file {path}") from exc

    try:
        data = yaml.safe_load(content) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in configuration file {path}") from exc

    if not isinstance(data, Mapping):
        raise ConfigError(f"Configuration file must contain a mapping: {path}")

    return dict(data)


def build_config(
    config_file: Path | None = None, overrides: Mapping[str, Any] | None = None
) -> CommenterConfig:
    """Layer defaults, an optional YAML file and explicit overrides."""

    config = CommenterConfig()
    if config_file is not None:
        config = config.merged(load_config_file(config_file))
    if overrides:
        config = config.merged(overrides)
    return config


__all__ = ["CommenterConfig", "ConfigError", "build_config", "load_config_file"]
