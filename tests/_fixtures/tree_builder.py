"""Helper utilities for constructing declaration trees in tests."""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import Mapping

from dtsbundle.naming import ModuleNamer


class DeclarationTreeBuilder:
    """Writes a throwaway package root plus a scratch tree of ``.d.ts`` files."""

    def __init__(self, tmp_path: Path, package_name: str = "demo") -> None:
        self.base = tmp_path
        self.package_name = package_name
        self.root = tmp_path / "package"
        self.scratch = tmp_path / "scratch"
        self.root.mkdir()
        self.scratch.mkdir()
        (self.root / "package.json").write_text(
            json.dumps({"name": package_name, "version": "1.0.0"}), encoding="utf-8"
        )

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the scratch tree."""
        for relative, content in files.items():
            path = self.scratch / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def namer(self) -> ModuleNamer:
        """Return a namer whose working directory is the test's tmp_path."""
        return ModuleNamer(
            self.package_name, self.root, self.scratch, cwd=lambda: str(self.base)
        )


__all__ = ["DeclarationTreeBuilder"]
