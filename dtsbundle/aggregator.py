"""Combination of per-file declarations into a single bundle."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from .config import ConfigError
from .logging import VERBOSE, get_logger
from .models import BasePolicy, DeclarationFile, DeclarationMap, ShakePolicy
from .naming import ModuleNamer
from .resolver import ImportResolver
from .scratch import ScratchDirectory
from .shaker import reachable_from

_DECLARE_TOKEN = "declare "
_LINE_START_RE = re.compile(r"^(?=.)", re.MULTILINE)

ALIAS_TEMPLATE = (
    "declare module '{package-name}' {\n"
    "  import main = require('{main-module}');\n"
    "  export = main;\n"
    "}"
)


@dataclass
class AggregateOptions:
    """What to add around the module blocks of a bundle."""

    entry: Optional[str] = "index.ts"
    shake: ShakePolicy = ShakePolicy.OFF
    alias: bool = True
    custom_alias: Optional[str] = None
    template: Optional[str] = None


def render_alias(template: str, package_name: str, main_module: str) -> str:
    """Substitute ``{package-name}`` and ``{main-module}`` in an alias template."""
    return template.replace("{package-name}", package_name).replace(
        "{main-module}", main_module
    )


def render_template(template: str, main_module: str) -> str:
    """Substitute the first ``{0}`` with the main module id."""
    return template.replace("{0}", main_module, 1)


def module_block(module: str, source: str) -> str:
    """Wrap ``source`` in a ``declare module`` block, indenting non-empty lines."""
    body = _LINE_START_RE.sub("  ", source)
    return f"declare module '{module}' {{\n{body}\n}}"


class Aggregator:
    """Loads a declaration tree and serialises it as one ambient module graph."""

    def __init__(
        self,
        namer: ModuleNamer,
        options: AggregateOptions | None = None,
        *,
        scratch: ScratchDirectory | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.namer = namer
        self.options = options or AggregateOptions()
        self.scratch = scratch
        self.logger = logger or get_logger("aggregator")

    @property
    def package_name(self) -> str:
        return self.namer.package_name

    def aggregate(self, scratch_root: Path | str) -> str:
        """Return the bundle text for the declarations under ``scratch_root``."""
        main_module = self.main_module()
        declarations = self.load_declarations(scratch_root)
        if self.scratch is not None:
            self.scratch.clear()

        declarations = self.combine(declarations)
        source = self.serialize(self.shake(declarations, main_module))

        if main_module not in declarations and self._appends_alias():
            self.logger.warning(
                'Entry module "%s" was not generated; the alias will not resolve', main_module
            )
        source = self.add_alias(source, main_module)
        source = self.add_template(source, main_module)
        return source

    def list_files(self, scratch_root: Path | str) -> List[Path]:
        """Return every file under ``scratch_root``, directories expanded."""
        root = Path(scratch_root)
        self.logger.log(VERBOSE, "Loading list of generated typing files...")
        files: List[Path] = []
        try:
            pending = sorted(root.iterdir(), reverse=True)
            while pending:
                path = pending.pop()
                if path.is_dir():
                    pending.extend(sorted(path.iterdir(), reverse=True))
                else:
                    files.append(path)
        except OSError as exc:
            self.logger.error("Failed to load list of generated typing files...")
            self.logger.debug("Error: %s", exc)
            raise
        self.logger.log(VERBOSE, "Successfully loaded list of generated typing files!")
        return files

    def load_files(self, scratch_root: Path | str) -> List[DeclarationFile]:
        loaded: List[DeclarationFile] = []
        for path in self.list_files(scratch_root):
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                self.logger.error("Could not load declaration file '%s'!", path)
                self.logger.debug("Error: %s", exc)
                raise
            loaded.append(DeclarationFile(path=str(path), content=content))
        return loaded

    def load_declarations(self, scratch_root: Path | str) -> DeclarationMap:
        """Map module ids to raw declaration text, in listing order."""
        files = self.load_files(scratch_root)
        self.logger.log(VERBOSE, "Loading declaration files and mapping to modules...")
        declarations: Dict[str, str] = {}
        for item in files:
            declarations[self.namer.name(item.path, base=BasePolicy.SCRATCH)] = item.content
        self.logger.log(VERBOSE, "Loaded declaration files and mapped to modules!")
        return declarations

    def combine(self, declarations: DeclarationMap) -> DeclarationMap:
        """Strip ambient ``declare`` markers and resolve relative imports."""
        self.logger.log(VERBOSE, "Combining typings into single file...")
        resolver = ImportResolver(self.namer, declarations.keys(), logger=self.logger)
        combined: Dict[str, str] = {}
        for module, source in declarations.items():
            source = source.replace(_DECLARE_TOKEN, "")
            combined[module] = resolver.resolve(source, module)
        return combined

    def shake(self, declarations: DeclarationMap, main_module: str) -> DeclarationMap:
        policy = self.options.shake
        if policy is ShakePolicy.OFF:
            return declarations
        self.logger.log(VERBOSE, "Shaking typings using the %s strategy.", policy.value)
        reachable = reachable_from(declarations, main_module, policy, logger=self.logger)
        dropped = len(declarations) - len(reachable)
        if dropped:
            self.logger.debug("Dropped %d unreferenced module(s)", dropped)
        return {module: declarations[module] for module in reachable}

    def serialize(self, declarations: DeclarationMap) -> str:
        source = "\n".join(
            module_block(module, body) for module, body in declarations.items()
        )
        self.logger.log(VERBOSE, "Combined typings into a single file!")
        return source

    def main_module(self) -> str:
        """Return the module id of the configured entry file."""
        entry = self.options.entry
        if not entry:
            self.logger.error("No entry file is available!")
            raise ConfigError("No entry file is available!")
        return self.namer.name(
            os.path.join(self.namer.root, entry),
            base=BasePolicy.ROOT,
            no_existence_check=True,
        )

    def add_alias(self, source: str, main_module: str) -> str:
        """Append the package alias block, or the custom alias when configured."""
        if self.options.custom_alias:
            self.logger.log(VERBOSE, "Adding custom alias for main file of the package...")
            return f"{source}\n{render_alias(self.options.custom_alias, self.package_name, main_module)}"
        if not self.options.alias:
            return source
        self.logger.log(VERBOSE, "Adding alias for main file of the package...")
        alias = render_alias(ALIAS_TEMPLATE, self.package_name, main_module)
        self.logger.log(VERBOSE, "Successfully created alias for main file!")
        return f"{source}\n{alias}"

    def add_template(self, source: str, main_module: str) -> str:
        """Append the free-form template with ``{0}`` replaced by the main module."""
        template = self.options.template
        if not template:
            return source
        self.logger.log(VERBOSE, "Adding template")
        return f"{source}\n{render_template(template, main_module)}\n"

    def _appends_alias(self) -> bool:
        return bool(self.options.custom_alias) or self.options.alias


__all__ = [
    "ALIAS_TEMPLATE",
    "AggregateOptions",
    "Aggregator",
    "module_block",
    "render_alias",
    "render_template",
]
