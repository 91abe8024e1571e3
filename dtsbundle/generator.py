"""End-to-end generation of a bundled declaration file."""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Callable, List, Optional

from .aggregator import AggregateOptions, Aggregator
from .compiler import CompilerError, TscCompiler
from .config import BundleConfig
from .logging import VERBOSE, get_logger, resolve_level
from .models import PackageDescriptor
from .naming import ModuleNamer
from .package import read_package
from .scratch import ScratchDirectory

_SCRATCH_NAME = "dtsbundle"


class Generator:
    """Runs the compiler, aggregates its output and stores the bundle.

    With ``throw_errors`` the first fatal error is re-raised after cleanup;
    otherwise it is logged and :meth:`generate` returns ``None``.
    """

    def __init__(
        self,
        config: BundleConfig,
        *,
        compiler: TscCompiler | None = None,
        throw_errors: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config
        self.logger = logger or get_logger("generator")
        self.compiler = compiler or TscCompiler(logger=self.logger.getChild("tsc"))
        self.throw_errors = throw_errors
        self._package: Optional[PackageDescriptor] = None
        self._scratch: Optional[ScratchDirectory] = None

    @property
    def package(self) -> PackageDescriptor:
        if self._package is None:
            self._package = read_package(self.config.root, logger=self.logger)
        return self._package

    def generate(self) -> Optional[Path]:
        """Generate the bundle; return the written path, or None on failure."""
        self.logger.info('Generating declarations for "%s"...', self.config.root)
        cleanup_tasks: List[Callable[[], None]] = []
        exception: Optional[BaseException] = None
        output: Optional[Path] = None

        try:
            scratch_path = self._scratch_path(cleanup_tasks)
            self._scratch = ScratchDirectory(scratch_path, logger=self.logger)
            output = self._generate(self._scratch)
        except Exception as exc:
            exception = exc
            self._report_failure(exc)
            if self._scratch is not None and not self._scratch.emptied:
                try:
                    self._scratch.clear()
                except Exception as cleanup_exc:  # pragma: no cover - defensive guard
                    self.logger.debug("Error: %s", cleanup_exc)
        finally:
            for task in cleanup_tasks:
                task()

        if exception is None:
            self.logger.info("Generation is completed!")
            return output

        self.logger.error("Generation failed!")
        if self.throw_errors:
            raise exception
        return None

    def _generate(self, scratch: ScratchDirectory) -> Path:
        self.generate_typings(scratch)
        source = self.aggregator(scratch).aggregate(scratch.path)
        return self.store_result(source)

    def generate_typings(self, scratch: ScratchDirectory) -> None:
        """Reset the scratch directory and emit per-file declarations into it."""
        scratch.reset()
        try:
            self.compiler.compile(self.compiler_cwd(), scratch.path, self.config.tsc)
        except CompilerError as exc:
            if not self.config.force:
                self.logger.error("TSC exited with errors!")
                raise
            self.logger.warning("TSC exited with errors!")
            self.logger.warning('Suppressing errors due to "force" flag!')
            self._show_debug_error(exc)
            self.logger.warning("Generated declaration files might not be valid!")

    def aggregator(self, scratch: ScratchDirectory) -> Aggregator:
        namer = ModuleNamer(self.package.name, self.config.root, scratch.path)
        options = AggregateOptions(
            entry=self.config.entry,
            shake=self.config.shake_policy(self.logger),
            alias=not self.config.no_alias,
            custom_alias=self.config.custom_alias,
            template=self.config.template,
        )
        return Aggregator(namer, options, scratch=scratch, logger=self.logger)

    def compiler_cwd(self) -> Path:
        """Directory the compiler runs in; the tool's own tree in self-test mode."""
        if self.config.test_mode:
            return Path(__file__).resolve().parent.parent
        return self.config.root

    def store_result(self, source: str) -> Path:
        """Write ``source`` to the configured output, creating parent directories."""
        target = self.config.output_path
        self.logger.log(VERBOSE, "Ensuring that output folder exists...")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError:
            self.logger.error('Failed to create "%s"!', target.parent)
            raise
        self.logger.log(VERBOSE, "Storing typings into %s file...", self.config.output)
        try:
            target.write_text(source, encoding="utf-8")
        except OSError:
            self.logger.error("Failed to create %s!", self.config.output)
            raise
        self.logger.log(VERBOSE, "Successfully created %s file!", self.config.output)
        return target

    def _scratch_path(self, cleanup_tasks: List[Callable[[], None]]) -> Path:
        if self.config.tmp is not None:
            return self.config.tmp
        self.logger.log(VERBOSE, "Locating OS Temporary Directory...")
        os_tmp = Path(tempfile.mkdtemp(prefix="dtsbundle-"))

        def _remove() -> None:
            self.logger.log(VERBOSE, "Deleting OS Temporary Directory...")
            shutil.rmtree(os_tmp, ignore_errors=True)

        cleanup_tasks.append(_remove)
        return os_tmp / _SCRATCH_NAME

    def _report_failure(self, exc: BaseException) -> None:
        self.logger.error("Generation of %s has failed!", self.config.output)
        self._show_debug_error(exc)
        if self.config.force:
            return
        if resolve_level(self.config.log_level) <= logging.DEBUG:
            self.logger.info(
                "If issue is not severe, you can try forcing execution using force flag."
            )
            self.logger.info('In case of command line usage, add "-f" as the first parameter.')
        else:
            self.logger.info("You should try running dtsbundle with debug level logging.")
            self.logger.info('In case of command line, debug mode is enabled using "-L debug".')

    def _show_debug_error(self, exc: BaseException) -> None:
        output = getattr(exc, "output", None)
        if output:
            self.logger.debug("Error: \n%s", output)
        else:
            self.logger.debug("Error: \n%r", exc)


__all__ = ["Generator"]
