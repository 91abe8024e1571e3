"""Tests for dtsbundle.package."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from dtsbundle.package import PackageError, read_package


def test_read_package_returns_descriptor(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text(
        json.dumps({"name": "@scope/demo", "version": "2.1.0", "main": "index.js"}),
        encoding="utf-8",
    )

    package = read_package(tmp_path)

    assert package.name == "@scope/demo"
    assert package.version == "2.1.0"
    assert package.raw["main"] == "index.js"


def test_read_package_fails_when_missing(tmp_path: Path) -> None:
    with pytest.raises(PackageError):
        read_package(tmp_path)


def test_read_package_fails_on_invalid_json(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(PackageError):
        read_package(tmp_path)


def test_read_package_requires_name(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text(json.dumps({"version": "1.0.0"}), encoding="utf-8")

    with pytest.raises(PackageError):
        read_package(tmp_path)
