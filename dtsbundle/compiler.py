"""Invocation of the TypeScript compiler for per-file declarations."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Sequence

from .logging import VERBOSE, get_logger

Runner = Callable[..., "CompileResult"]


@dataclass(frozen=True)
class CompileResult:
    """Outcome of one compiler run."""

    returncode: int
    output: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


class CompilerError(RuntimeError):
    """Raised when the compiler exits with errors."""

    def __init__(self, message: str, output: str = "") -> None:
        super().__init__(message)
        self.output = output


class TscCompiler:
    """Runs ``tsc`` to emit declaration files into a directory."""

    def __init__(
        self,
        runner: Runner | None = None,
        *,
        executable: str = "tsc",
        logger: logging.Logger | None = None,
    ) -> None:
        self._runner = runner or self._default_runner
        self.executable = executable
        self.logger = logger or get_logger("compiler")

    def build_command(self, declaration_dir: Path, options: str = "") -> List[str]:
        command = [
            self.executable,
            "--declaration",
            "--emitDeclarationOnly",
            "--declarationDir",
            str(declaration_dir),
        ]
        if options.strip():
            command.extend(shlex.split(options))
        return command

    def compile(self, cwd: Path, declaration_dir: Path, options: str = "") -> CompileResult:
        """Emit declarations for the project in ``cwd``; raise on non-zero exit."""
        command = self.build_command(declaration_dir, options)
        self.logger.log(VERBOSE, "Generating per-file typings using TSC...")
        self.logger.debug(shlex.join(command))

        result = self._runner(command, cwd=Path(cwd), env=self._environment(Path(cwd)))
        if not result.success:
            raise CompilerError(
                f"TSC exited with code {result.returncode}", output=result.output
            )
        if result.output.strip():
            self.logger.info(result.output.rstrip())
        self.logger.log(VERBOSE, "Per-file typings have been generated using TSC!")
        return result

    @staticmethod
    def _environment(cwd: Path) -> Dict[str, str]:
        env = os.environ.copy()
        local_bin = cwd / "node_modules" / ".bin"
        env["PATH"] = os.pathsep.join(
            part for part in (str(local_bin), env.get("PATH", "")) if part
        )
        return env

    @staticmethod
    def _default_runner(
        args: Sequence[str],
        *,
        cwd: Path,
        env: Dict[str, str] | None = None,
    ) -> CompileResult:
        try:
            completed = subprocess.run(
                list(args),
                cwd=str(cwd),
                env=env,
                text=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                check=False,
            )
        except FileNotFoundError as exc:
            raise CompilerError(f"Could not launch {args[0]}: {exc}") from exc
        return CompileResult(returncode=completed.returncode, output=completed.stdout or "")


__all__ = ["CompileResult", "CompilerError", "TscCompiler"]
