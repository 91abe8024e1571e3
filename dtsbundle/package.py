"""package.json loading for the bundled package."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from .logging import VERBOSE, get_logger
from .models import PackageDescriptor


class PackageError(RuntimeError):
    """Raised when package.json is unreadable or lacks a package name."""


def read_package(root: Path, *, logger: logging.Logger | None = None) -> PackageDescriptor:
    """Return the descriptor parsed from ``<root>/package.json``."""
    log = logger or get_logger("package")
    package_json = Path(root) / "package.json"
    log.log(VERBOSE, "Loading package.json...")

    try:
        data = json.loads(package_json.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        log.error('Failed to read package.json at "%s"', package_json)
        log.debug("Error: %s", exc)
        raise PackageError(f"Failed to read {package_json}: {exc}") from exc

    if not isinstance(data, dict):
        raise PackageError(f"{package_json} must contain a JSON object")

    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise PackageError(f'{package_json} does not declare a package "name"')

    version = data.get("version")
    log.log(VERBOSE, "package.json information has been loaded!")
    return PackageDescriptor(
        name=name.strip(),
        version=version if isinstance(version, str) else None,
        raw=data,
    )


__all__ = ["PackageError", "read_package"]
