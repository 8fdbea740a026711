"""
Command-line interface for cargo-duplicates.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .analyzer import DuplicateAnalyzer
from .config import AnalyzerConfig
from .exceptions import LockfileNotFoundError, LockfileParseError
from .lockfile import DEFAULT_LOCKFILE
from .reporting import (
    export_duplicates_csv,
    format_json,
    format_text,
    print_summary,
    save_results_json,
)


logger = logging.getLogger(__name__)


def setup_logging(verbosity: int = 0, log_level: Optional[str] = None) -> None:
    """Configure logging based on verbosity flags."""
    if log_level:
        level = getattr(logging, log_level.upper(), logging.WARNING)
    elif verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(message)s',
        stream=sys.stderr,
    )


def use_color(choice: str, stream=None) -> bool:
    """Decide once whether output should be colorized."""
    if choice == "always":
        return True
    if choice == "never":
        return False
    if os.environ.get("NO_COLOR") is not None:
        return False
    stream = stream or sys.stdout
    return hasattr(stream, "isatty") and stream.isatty()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cargo-duplicates",
        description="Report crates pinned at more than one version in a Cargo.lock",
    )

    parser.add_argument(
        "--lockfile",
        default=DEFAULT_LOCKFILE,
        help=f"Path to the lock file. Default: ./{DEFAULT_LOCKFILE}"
    )

    parser.add_argument(
        "--color",
        choices=["auto", "always", "never"],
        default="auto",
        help="Colorize text output. Default: auto (only when stdout is a terminal)"
    )

    parser.add_argument(
        "--offline",
        action="store_true",
        help="Do not query the registry; compare against the highest version in the lock file"
    )

    parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format. Default: text"
    )

    parser.add_argument(
        "--output-dir",
        default=None,
        help="Also write JSON and CSV reports to this directory"
    )

    parser.add_argument(
        "--registry-url",
        default=None,
        help="Base URL of the crates API. Default: crates.io"
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Timeout in seconds for each registry request"
    )

    parser.add_argument(
        "--jobs",
        type=int,
        default=None,
        help="Maximum number of concurrent registry requests"
    )

    parser.add_argument(
        "--stable",
        action="store_true",
        help="Compare against the newest stable release instead of the newest version"
    )

    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Hide the progress bar while querying the registry"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug)"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Explicit log level; overrides --verbose"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.jobs is not None and args.jobs < 1:
        parser.error("--jobs must be at least 1")
    if args.timeout is not None and args.timeout <= 0:
        parser.error("--timeout must be positive")

    setup_logging(args.verbose, args.log_level)
    color = use_color(args.color)

    config = AnalyzerConfig.from_env().with_overrides(
        offline=args.offline or None,
        registry_url=args.registry_url,
        timeout=args.timeout,
        max_workers=args.jobs,
        use_newest_version=False if args.stable else None,
        show_progress=False if args.no_progress or not sys.stderr.isatty() else None,
    )

    analyzer = DuplicateAnalyzer(config)
    try:
        result = analyzer.analyze_lockfile(args.lockfile)
    except LockfileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except LockfileParseError as e:
        print(f"Error: failed to parse {args.lockfile}: {e}", file=sys.stderr)
        return 1
    finally:
        close = getattr(analyzer.resolver, "close", None)
        if close is not None:
            close()

    print_summary(result)

    if args.format == "json":
        sys.stdout.write(format_json(result) + "\n")
    else:
        sys.stdout.write(format_text(result, color=color))

    if args.output_dir:
        output_dir = Path(args.output_dir)
        stem = Path(args.lockfile).stem.lower()
        results_file = save_results_json(result, output_dir, stem)
        print(f"Results saved to: {results_file}", file=sys.stderr)
        csv_file = export_duplicates_csv(result, output_dir, stem)
        if csv_file is not None:
            print(f"CSV report saved to: {csv_file}", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
