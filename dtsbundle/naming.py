"""Conversion of filesystem paths into bundled module identifiers."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Callable

from .models import BasePolicy

_EXTENSION_RE = re.compile(r"\.[^./]+$")
_DECLARATION_SUFFIX_RE = re.compile(r"\.d$")


class ModuleNamer:
    """Builds ``<package>/<relative/path>`` module ids for declaration files.

    ``root`` is the package root, ``scratch`` the directory the compiler wrote
    its per-file declarations to. Paths handled under :attr:`BasePolicy.CWD`
    are made relative to the process working directory at call time.
    """

    def __init__(
        self,
        package_name: str,
        root: Path | str,
        scratch: Path | str,
        *,
        cwd: Callable[[], str] = os.getcwd,
    ) -> None:
        self.package_name = package_name
        self.root = os.path.abspath(str(root))
        self.scratch = os.path.abspath(str(scratch))
        self._cwd = cwd

    def name(
        self,
        path: Path | str,
        *,
        base: BasePolicy = BasePolicy.SCRATCH,
        no_prefix: bool = False,
        no_extension_removal: bool = False,
        no_existence_check: bool = False,
    ) -> str:
        """Return the module id for ``path``.

        The extension (and a trailing ``.d``) is only removed when ``path`` is
        an existing regular file, or when ``no_existence_check`` says to assume
        so. Synthetic paths built from other module ids pass
        ``no_existence_check`` or ``no_extension_removal`` explicitly.
        """
        raw = str(path)
        file_existed = no_existence_check or (
            not no_extension_removal and os.path.isfile(raw)
        )

        name = os.path.relpath(os.path.abspath(raw), self._base_dir(base))

        if not no_prefix:
            name = f"{self.package_name}/{name}"

        name = name.replace("\\", "/")

        if file_existed and not no_extension_removal:
            name = _EXTENSION_RE.sub("", name)
            name = _DECLARATION_SUFFIX_RE.sub("", name)

        return name

    def working_directory(self) -> str:
        return self._cwd()

    def _base_dir(self, base: BasePolicy) -> str:
        if base is BasePolicy.CWD:
            return self.working_directory()
        if base is BasePolicy.ROOT:
            return self.root
        return self.scratch


__all__ = ["ModuleNamer"]
