"""
Main CLI interface for ts-doctest.

Generates ``.doctest`` test files from the doctests in the documentation
comments of the given source files, optionally regenerating them on change.
"""

import argparse
import sys
import uuid
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .core.config import Config, VALID_LOG_LEVELS, VALID_MARKER_POLICIES
from .core.exceptions import ConfigurationError, DoctestError
from .core.logging_config import get_logger, setup_logging
from .core.watcher import SourceWatcher
from .extraction.script import ExtraMarkerPolicy
from .generation.creator import DoctestFile, is_doctest_file
from .generation.dialects import DIALECTS
from .reporting.models import FileResult, FileStatus, RunSummary

logger = get_logger("tsdoctest.cli")

SKIPPED_DIRECTORIES = {"node_modules", ".git"}


def select_dialect(args: argparse.Namespace, default: Optional[str] = None) -> str:
    """The single dialect chosen on the command line, else ``default``."""
    chosen = [name for name in DIALECTS if getattr(args, name, False)]
    if not chosen and default:
        return default
    if not chosen:
        flags = " ".join(f"--{name}" for name in DIALECTS)
        raise ConfigurationError(f"Choose an output from {flags}", setting="dialect")
    if len(chosen) > 1:
        raise ConfigurationError(
            f"Cannot output both {chosen[0]} and {chosen[1]}",
            setting="dialect",
            violations=chosen,
        )
    return chosen[0]


def build_config(args: argparse.Namespace) -> Config:
    """Configuration for this run from parsed arguments and environment."""
    config = Config.from_env()
    config.dialect = select_dialect(args, default=config.dialect)
    config.watch = args.watch
    if args.log_file:
        config.log_file = Path(args.log_file)
    if args.log_level:
        config.log_level = args.log_level
    if args.marker_policy:
        config.extra_marker_policy = args.marker_policy
    config.validate()
    return config


def discover_sources(
    paths: Iterable[str], extensions: Tuple[str, ...]
) -> Tuple[List[Path], List[Path]]:
    """Expand files and directories into source files.

    Returns:
        The source files, and the paths that do not exist
    """
    sources: List[Path] = []
    missing: List[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            for candidate in sorted(path.rglob("*")):
                if (
                    candidate.is_file()
                    and candidate.suffix in extensions
                    and not is_doctest_file(candidate)
                    and not SKIPPED_DIRECTORIES.intersection(candidate.parts)
                ):
                    sources.append(candidate)
        elif path.is_file():
            if is_doctest_file(path):
                logger.debug(f"Skipping generated doctest file {path}")
                continue
            sources.append(path)
        else:
            missing.append(path)
    return list(dict.fromkeys(sources)), missing


def process_file(path: Path, config: Config) -> FileResult:
    """Generate the doctest file of one source file."""
    if is_doctest_file(path):
        return FileResult(file_path=str(path), status=FileStatus.SKIPPED)

    try:
        doctest_file = DoctestFile(
            path, config.dialect, ExtraMarkerPolicy(config.extra_marker_policy)
        )
        count = doctest_file.create_test()
    except DoctestError as e:
        logger.error(f"{path}: {e.message}", extra={"metadata": e.to_dict()})
        return FileResult(file_path=str(path), status=FileStatus.FAILED, error=e.message)

    if count == 0:
        return FileResult(file_path=str(path), status=FileStatus.NO_TESTS)
    return FileResult(
        file_path=str(path),
        output_path=str(doctest_file.output_path),
        status=FileStatus.WRITTEN,
        test_count=count,
    )


def cmd_watch(sources: List[Path], config: Config) -> None:
    """Regenerate doctest files whenever their source changes."""

    def regenerate(path: Path) -> None:
        result = process_file(path, config)
        if result.status == FileStatus.WRITTEN:
            print(result.output_path, flush=True)

    SourceWatcher(sources, regenerate, debounce=config.watch_debounce).run_forever()


def create_main_parser() -> argparse.ArgumentParser:
    """Create main CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="ts-doctest",
        description="Generate test files from the doctests in documentation comments",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ts-doctest --mocha src/
  ts-doctest --jest --watch src/math.ts src/strings.ts
  ts-doctest --tape --json lib/
        """,
    )

    dialects = parser.add_argument_group("output dialect (choose exactly one)")
    for name in DIALECTS:
        dialects.add_argument(
            f"--{name}", action="store_true", help=f"Generate {name} tests"
        )

    parser.add_argument(
        "-w", "--watch",
        action="store_true",
        help="Regenerate doctest files when their sources change",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print a JSON summary of the run",
    )
    parser.add_argument(
        "--log-level",
        choices=VALID_LOG_LEVELS,
        help="Logging level (default: INFO)",
    )
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument(
        "--marker-policy",
        choices=VALID_MARKER_POLICIES,
        help="Handling of a second assertion marker after one expression",
    )
    parser.add_argument("paths", nargs="*", help="Source files or directories")

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_main_parser()
    parsed_args = parser.parse_args(args)

    try:
        config = build_config(parsed_args)
    except ConfigurationError as e:
        parser.print_usage(sys.stderr)
        print(f"error: {e.message}", file=sys.stderr)
        return 2

    if not parsed_args.paths:
        parser.print_usage(sys.stderr)
        print("error: No files specified!", file=sys.stderr)
        return 2

    setup_logging(config, run_id=uuid.uuid4().hex)

    try:
        sources, missing = discover_sources(parsed_args.paths, config.extensions)
        summary = RunSummary(dialect=config.dialect)
        for path in missing:
            logger.error(f"No such file or directory: {path}")
            summary.add(
                FileResult(
                    file_path=str(path),
                    status=FileStatus.FAILED,
                    error="No such file or directory",
                )
            )
        for path in sources:
            summary.add(process_file(path, config))

        if parsed_args.json:
            print(summary.to_json())
        else:
            logger.info(summary.describe())

        if config.watch:
            cmd_watch(sources, config)
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return 1

    return 1 if summary.has_failures else 0


if __name__ == "__main__":
    sys.exit(main())
