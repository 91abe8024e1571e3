"""Tests for dtsbundle.logging."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from dtsbundle.logging import VERBOSE, configure_logging, get_logger, resolve_level


def test_get_logger_nests_under_package_logger() -> None:
    assert get_logger("aggregator").name == "dtsbundle.aggregator"
    assert get_logger().name == "dtsbundle"


def test_resolve_level_maps_cli_names() -> None:
    assert resolve_level("warn") == logging.WARNING
    assert resolve_level("verbose") == VERBOSE
    assert resolve_level("silly") == logging.DEBUG
    assert resolve_level("nonsense") == logging.INFO
    assert resolve_level(None) == logging.INFO


def test_verbose_sits_between_debug_and_info() -> None:
    assert logging.DEBUG < VERBOSE < logging.INFO
    assert logging.getLevelName(VERBOSE) == "VERBOSE"


def test_configure_logging_replaces_handlers() -> None:
    configure_logging(level="debug")
    logger = configure_logging(level="error")

    assert logger.level == logging.ERROR
    assert len(logger.handlers) == 1
    assert logger.propagate is False


def test_log_file_receives_records(tmp_path: Path) -> None:
    log_file = tmp_path / "dtsbundle.log"
    logger = configure_logging(level="verbose", log_file=log_file)
    try:
        get_logger("generator").log(VERBOSE, "Locating OS Temporary Directory...")
        get_logger("compiler").debug("tsc --declaration")
        get_logger("generator").warning("TSC exited with errors!")
    finally:
        configure_logging(level="info")

    lines = log_file.read_text(encoding="utf-8").splitlines()

    assert len(lines) == 2
    assert re.match(
        r"^\d{4}-\d{2}-\d{2} [\d:,]+ VERBOSE dtsbundle\.generator: Locating OS Temporary Directory\.\.\.$",
        lines[0],
    )
    assert lines[1].endswith("WARNING dtsbundle.generator: TSC exited with errors!")
    assert len(logger.handlers) == 1
