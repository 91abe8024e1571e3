"""CLI entrypoint for dtsbundle."""

from __future__ import annotations

import argparse
import sys
from importlib import metadata
from pathlib import Path
from typing import Any, Dict

from .config import ConfigError, load_config
from .generator import Generator
from .logging import LEVELS, configure_logging, get_logger


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dtsbundle",
        description="Bundle per-file TypeScript declarations into a single .d.ts for an npm package.",
        epilog="Example: dtsbundle -r . generate",
    )
    parser.add_argument(
        "-e",
        "--entry",
        help="Entry/main package file before bundling, relative to project root.",
    )
    parser.add_argument(
        "-r",
        "--root",
        default=".",
        help="npm package directory containing package.json (defaults to current directory).",
    )
    parser.add_argument(
        "-t",
        "--tmp",
        help="Directory for storing temporary information (defaults to an OS temp dir).",
    )
    parser.add_argument(
        "-c",
        "--tsc",
        help="Passed through non-validated additional TSC options.",
    )
    parser.add_argument(
        "-L",
        "--log-level",
        choices=sorted(LEVELS),
        help="Log level (error, warn, info, verbose, debug, silly).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Shorthand for --log-level debug.",
    )
    parser.add_argument(
        "--log-file",
        help="Also write log records to this file.",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Overrides the output file path, relative to root (default index.d.ts).",
    )
    parser.add_argument(
        "-a",
        "--no-alias",
        action="store_true",
        default=None,
        help="Do not add an alias for the main package module.",
    )
    parser.add_argument(
        "--custom-alias",
        help="Alias template used instead of the default one; "
        "supports {package-name} and {main-module} placeholders.",
    )
    parser.add_argument(
        "--template",
        help="Template appended to the bundle where {0} is the main module id.",
    )
    parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        default=None,
        help="Ignore non-critical errors and attempt generation anyway.",
    )
    parser.add_argument(
        "-s",
        "--shake",
        help="Tree-shaking strategy: off, exportOnly or allImports.",
    )
    parser.add_argument(
        "-m",
        "--test-mode",
        action="store_true",
        default=None,
        help="Configures dtsbundle for self-test.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("generate", help="Start generation.")
    return parser


def _overrides(args: argparse.Namespace) -> Dict[str, Any]:
    log_level = "debug" if args.verbose else args.log_level
    return {
        "entry": args.entry,
        "tmp": Path(args.tmp) if args.tmp else None,
        "tsc": args.tsc,
        "log_level": log_level,
        "log_file": Path(args.log_file) if args.log_file else None,
        "output": args.output,
        "no_alias": args.no_alias,
        "custom_alias": args.custom_alias,
        "template": args.template,
        "force": args.force,
        "shake": args.shake,
        "test_mode": args.test_mode,
    }


def _version() -> str:
    try:
        return metadata.version("dtsbundle")
    except metadata.PackageNotFoundError:
        return "unknown"


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for dtsbundle."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(Path(args.root), _overrides(args))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    configure_logging(level=config.log_level, log_file=config.log_file)
    get_logger().info("dtsbundle v%s", _version())

    if args.command == "generate":
        result = Generator(config).generate()
        if result is None:
            parser.exit(1, "dtsbundle generate failed.\nRun with -L debug for more details.\n")
        print(f"Declarations written to {_relativize(result)}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
