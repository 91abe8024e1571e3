"""Rewriting of relative import specifiers into bundled module ids."""

from __future__ import annotations

import logging
import os
import re
from typing import Iterable, List, Pattern, Set

from .logging import get_logger
from .models import BasePolicy
from .naming import ModuleNamer

STATIC_IMPORT_RE = re.compile(r"""(from ['"])([^'"]+)(['"])""")
DYNAMIC_IMPORT_RE = re.compile(r"""(import\(['"])([^'"]+)(['"]\))""")

_INDEX_SUFFIX = "/index"


def split_lines(source: str) -> List[str]:
    """Normalise CRLF, LFCR and CR line endings and split on LF."""
    source = source.replace("\r\n", "\n")
    source = source.replace("\n\r", "\n")
    source = source.replace("\r", "\n")
    return source.split("\n")


class ImportResolver:
    """Replaces ``./`` and ``../`` specifiers with ids of known modules.

    Module ids are package relative rather than file relative, so a specifier
    is resolved against the parent of the owner's id. A target that is not a
    known module is assumed to be a directory and gets ``/index`` appended,
    whether or not that module exists.
    """

    def __init__(
        self,
        namer: ModuleNamer,
        known_modules: Iterable[str],
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self.namer = namer
        self.known_modules: Set[str] = set(known_modules)
        self.logger = logger or get_logger("resolver")

    def resolve(self, source: str, owner: str) -> str:
        """Return ``source`` with every relative specifier rewritten for ``owner``."""
        lines = [
            self._resolve_line(
                DYNAMIC_IMPORT_RE,
                self._resolve_line(STATIC_IMPORT_RE, line, owner),
                owner,
            )
            for line in split_lines(source)
        ]
        return "\n".join(lines)

    def resolve_specifier(self, specifier: str, owner: str) -> str:
        """Return the module id a relative ``specifier`` inside ``owner`` points at."""
        synthetic = os.path.join(self.namer.working_directory(), owner, "..", specifier)
        resolved = self.namer.name(
            synthetic,
            base=BasePolicy.CWD,
            no_prefix=True,
            no_extension_removal=True,
        )
        if resolved not in self.known_modules:
            resolved += _INDEX_SUFFIX
        return resolved

    def _resolve_line(self, pattern: Pattern[str], line: str, owner: str) -> str:
        match = pattern.search(line)
        if match is None or not match.group(2).startswith("."):
            return line

        resolved = self.resolve_specifier(match.group(2), owner)
        self.logger.debug('"%s": "%s" -> "%s"', owner, match.group(2), resolved)
        return pattern.sub(
            lambda m: f"{m.group(1)}{resolved}{m.group(3)}", line, count=1
        )


__all__ = ["DYNAMIC_IMPORT_RE", "ImportResolver", "STATIC_IMPORT_RE", "split_lines"]
