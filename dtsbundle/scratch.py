"""Lifecycle of the scratch directory the compiler writes declarations into."""

from __future__ import annotations

import logging
import shutil
import time
from pathlib import Path
from typing import Callable

from .logging import VERBOSE, get_logger

MKDIR_RETRIES = 5
RETRY_DELAY = 0.1


class ScratchDirError(RuntimeError):
    """Raised when the scratch directory cannot be created or removed."""


class ScratchDirectory:
    """Creates and removes the per-run scratch directory."""

    def __init__(
        self,
        path: Path | str,
        *,
        retries: int = MKDIR_RETRIES,
        delay: float = RETRY_DELAY,
        sleep: Callable[[float], None] = time.sleep,
        logger: logging.Logger | None = None,
    ) -> None:
        self.path = Path(path)
        self.retries = retries
        self.delay = delay
        self._sleep = sleep
        self.logger = logger or get_logger("scratch")
        self.emptied = True

    def make(self) -> Path:
        """Create the directory, retrying a bounded number of times."""
        self.logger.log(VERBOSE, 'Preparing "tmp" directory...')
        attempts_left = self.retries
        while True:
            try:
                self.path.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                self.logger.error('Failed to create "%s"!', self.path)
                self.logger.debug("Error: %s", exc)
                if attempts_left <= 0:
                    self.logger.error("Stopped trying after %d retries!", self.retries)
                    raise ScratchDirError(f"Could not create {self.path}") from exc
                attempts_left -= 1
                self.logger.log(VERBOSE, "Will retry in %dms...", int(self.delay * 1000))
                self._sleep(self.delay)
                continue
            self.emptied = False
            self.logger.log(VERBOSE, '"tmp" directory was prepared!')
            return self.path

    def clear(self) -> None:
        """Remove the directory and everything under it."""
        self.logger.log(VERBOSE, 'Cleaning up "tmp" directory...')
        try:
            shutil.rmtree(self.path)
        except FileNotFoundError:
            pass
        except OSError as exc:
            self.logger.error('Could not clean up "tmp" directory at "%s"!', self.path)
            self.logger.debug("Error: %s", exc)
            raise ScratchDirError(f"Could not remove {self.path}") from exc
        self.emptied = True
        self.logger.log(VERBOSE, '"tmp" directory was cleaned!')

    def reset(self) -> Path:
        """Re-create the directory empty."""
        self.logger.log(VERBOSE, 'Will now reset "tmp" directory...')
        self.clear()
        return self.make()


__all__ = ["MKDIR_RETRIES", "RETRY_DELAY", "ScratchDirError", "ScratchDirectory"]
