"""
Command-line interface for gradle-coords.
"""

import argparse
import io
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from gradle_coords import __version__
from gradle_coords.completion import PATH_METAVAR, SHELLS, generate_completion
from gradle_coords.exceptions import ConfigurationError, ParseError
from gradle_coords.output import OutputFormat, get_formatter
from gradle_coords.parser import DependencyTreeParser

PROG = "gradle-coords"

FORMAT_ENV = "GRADLE_COORDS_FORMAT"
LOG_FILE_ENV = "GRADLE_COORDS_LOG_FILE"

EXIT_FAILURE = 1
EXIT_CONFIGURATION_ERROR = 2


def _log_to_file(message: str, log_file: Path) -> None:
    """
    Write a message to the log file.

    Args:
        message: Message to log
        log_file: Path to log file
    """
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    log_message = f"[{timestamp}] {message}"
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        with open(log_file, "a", encoding="utf-8") as log:
            log.write(log_message + "\n")
    except OSError as exc:
        print(f"Warning: Failed to write to log file {log_file}: {exc}", file=sys.stderr)


def _log(message: str, log_file: Optional[Path], verbose: bool) -> None:
    """Log to the log file if configured, and to stderr when verbose."""
    if log_file:
        _log_to_file(message, log_file)
    if verbose:
        print(message, file=sys.stderr)


def _use_utf8(stream) -> None:
    """Switch a standard stream to UTF-8 before it is read or written."""
    if isinstance(stream, io.TextIOWrapper):
        stream.reconfigure(encoding="utf-8")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Extract Maven coordinates from `gradle dependencies` output read on stdin.",
        epilog="example: ./gradlew -q app:dependencies --configuration releaseRuntimeClasspath "
        f"| {PROG} > dependencies.csv",
    )

    parser.add_argument(
        "-f",
        "--format",
        type=str.lower,
        default=os.environ.get(FORMAT_ENV, OutputFormat.CSV.value),
        choices=[fmt.value for fmt in OutputFormat],
        help=f"Output format. Default: csv, or ${FORMAT_ENV}",
    )

    parser.add_argument(
        "--skip-pretty",
        action="store_true",
        help="Parse stdin as manually formatted Gradle output. Every non-blank line must be a coordinate",
    )

    parser.add_argument(
        "--completion",
        type=str,
        choices=SHELLS,
        default=None,
        help="Generate a shell completion script and exit",
    )

    parser.add_argument(
        "-o",
        "--output",
        type=str,
        metavar=PATH_METAVAR,
        default=None,
        help="Output file path. Default: stdout",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output on stderr",
    )

    parser.add_argument(
        "--log-file",
        type=str,
        metavar=PATH_METAVAR,
        default=os.environ.get(LOG_FILE_ENV),
        help=f"Append log messages to this file. Default: ${LOG_FILE_ENV}",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.completion:
        sys.stdout.write(generate_completion(parser, args.completion, PROG))
        return

    log_file = Path(args.log_file) if args.log_file else None
    _log(f"Starting {PROG} v{__version__}", log_file, args.verbose)
    _log(f"Command: {' '.join(sys.argv)}", log_file, False)

    try:
        formatter = get_formatter(args.format)
    except ConfigurationError as exc:
        error_msg = f"Error: {exc}"
        _log(error_msg, log_file, False)
        print(error_msg, file=sys.stderr)
        sys.exit(EXIT_CONFIGURATION_ERROR)

    mode = "skip-pretty" if args.skip_pretty else "standard"
    _log(f"Reading dependency report from stdin ({mode} mode, {args.format} output)", log_file, args.verbose)

    _use_utf8(sys.stdin)
    _use_utf8(sys.stdout)
    tree_parser = DependencyTreeParser(skip_pretty=args.skip_pretty)
    try:
        records = tree_parser.parse(sys.stdin)
    except ParseError as exc:
        error_msg = f"Error: {exc}"
        _log(error_msg, log_file, False)
        print(error_msg, file=sys.stderr)
        sys.exit(EXIT_FAILURE)
    except UnicodeDecodeError as exc:
        error_msg = f"Error: Input is not valid UTF-8: {exc}"
        _log(error_msg, log_file, False)
        print(error_msg, file=sys.stderr)
        sys.exit(EXIT_FAILURE)

    statistics = tree_parser.get_graph().get_statistics()
    _log(
        f"Parsed {tree_parser.tree_lines} tree lines into {len(records)} artifacts "
        f"({tree_parser.version_updates} version updates)",
        log_file,
        args.verbose,
    )
    if tree_parser.ignored_trees:
        _log(
            f"Warning: ignored {tree_parser.ignored_trees} additional dependency tree(s). "
            "Please specify `--configuration` option. e.g: `--configuration releaseRuntimeClasspath`",
            log_file,
            True,
        )

    content = formatter.format(records, statistics)
    if args.output:
        output_path = Path(args.output)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(content, encoding="utf-8")
        except OSError as exc:
            error_msg = f"Error: Failed to write output file {output_path}: {exc}"
            _log(error_msg, log_file, False)
            print(error_msg, file=sys.stderr)
            sys.exit(EXIT_FAILURE)
        _log(f"Output written to: {output_path}", log_file, args.verbose)
    else:
        sys.stdout.write(content)

    _log("Processing completed successfully", log_file, args.verbose)


if __name__ == "__main__":
    main()
