"""Configuration loading for dtsbundle (.dtsbundle.yml and CLI overrides)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .logging import LEVELS, get_logger
from .models import ShakePolicy

CONFIG_FILENAME = ".dtsbundle.yml"

_SHAKE_ALIASES = {
    "off": ShakePolicy.OFF,
    "exportonly": ShakePolicy.EXPORT_ONLY,
    "export-only": ShakePolicy.EXPORT_ONLY,
    "allimports": ShakePolicy.ALL_IMPORTS,
    "all-imports": ShakePolicy.ALL_IMPORTS,
    "referencedonly": ShakePolicy.ALL_IMPORTS,
}


class ConfigError(RuntimeError):
    """Raised when the configuration is missing required values or cannot be parsed."""


@dataclass
class BundleConfig:
    """Settings for one declaration bundling run."""

    root: Path = field(default_factory=Path.cwd)
    entry: Optional[str] = "index.ts"
    tmp: Optional[Path] = None
    tsc: str = ""
    log_level: str = "info"
    log_file: Optional[Path] = None
    output: str = "index.d.ts"
    no_alias: bool = False
    custom_alias: Optional[str] = None
    template: Optional[str] = None
    force: bool = False
    shake: str = "off"
    test_mode: bool = False

    def __post_init__(self) -> None:
        self.root = Path(self.root).expanduser().resolve()
        if self.tmp is not None:
            self.tmp = Path(self.tmp).expanduser().resolve()
        if self.log_file is not None:
            self.log_file = Path(self.log_file).expanduser().resolve()

    @property
    def output_path(self) -> Path:
        return (self.root / self.output).resolve()

    def shake_policy(self, logger: logging.Logger | None = None) -> ShakePolicy:
        return parse_shake(self.shake, logger)


def parse_shake(value: Optional[str], logger: logging.Logger | None = None) -> ShakePolicy:
    """Return the shake policy for ``value``; unknown values degrade to OFF."""
    if value is None:
        return ShakePolicy.OFF
    policy = _SHAKE_ALIASES.get(str(value).strip().lower())
    if policy is None:
        (logger or get_logger("config")).warning(
            'Unknown value for shake "%s"; tree-shaking is disabled', value
        )
        return ShakePolicy.OFF
    return policy


def load_config(root: Path, overrides: Mapping[str, Any] | None = None) -> BundleConfig:
    """Load ``.dtsbundle.yml`` from ``root`` and apply non-None ``overrides`` on top."""
    root_path = Path(root).expanduser().resolve()
    config_file = root_path / CONFIG_FILENAME

    values: Dict[str, Any] = {}
    if config_file.exists():
        values.update(_coerce(_read_config(config_file), root_path))

    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value

    values.setdefault("root", root_path)
    return BundleConfig(**values)


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _coerce(data: Mapping[str, Any], root: Path) -> Dict[str, Any]:
    known = {item.name for item in fields(BundleConfig)}
    result: Dict[str, Any] = {}
    for raw_key, value in data.items():
        key = str(raw_key).replace("-", "_")
        key = _KEY_ALIASES.get(key, key)
        if key not in known:
            raise ConfigError(f"Unknown option '{raw_key}' in {CONFIG_FILENAME}")
        if key in _BOOL_KEYS:
            coerced = _as_bool(value)
            if coerced is None:
                raise ConfigError(f"Option '{raw_key}' must be a boolean")
            result[key] = coerced
        elif key == "shake" and value is False:
            # YAML 1.1 reads a bare `off` as a boolean.
            result[key] = "off"
        elif key == "root":
            result[key] = (root / str(value)).resolve()
        elif key in ("tmp", "log_file"):
            result[key] = (root / str(value)).resolve() if value else None
        elif key == "log_level":
            level = _as_str(value)
            if level is None or level.lower() not in LEVELS:
                raise ConfigError(f"Unknown log level '{value}'")
            result[key] = level.lower()
        else:
            result[key] = _as_str(value)
    return result


_KEY_ALIASES = {
    "testMode": "test_mode",
    "logLevel": "log_level",
    "logFile": "log_file",
    "noAlias": "no_alias",
    "customAlias": "custom_alias",
}

_BOOL_KEYS = {"no_alias", "force", "test_mode"}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


__all__ = [
    "BundleConfig",
    "CONFIG_FILENAME",
    "ConfigError",
    "load_config",
    "parse_shake",
]
