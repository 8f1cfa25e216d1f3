# src/catls/cli.py
import argparse
import logging
import os
import sys
from typing import List, Optional, Sequence

from catls.config import DEFAULT_FORMAT, DEFAULT_IGNORE_DIRS, SUPPORTED_FORMATS, PipelineConfig
from catls.core.pipeline import Pipeline
from catls.errors import CatlsError, ConfigError

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = False) -> None:
    """Sends log records to stderr; stdout is reserved for the rendered files."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s: %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


def create_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="catls",
        description="List files and their contents as XML, JSON or Markdown.",
    )
    parser.add_argument("directory", nargs="?", default=".", help="Directory to scan (default: .)")
    parser.add_argument("files", nargs="*", help="Only include these files or glob patterns")

    parser.add_argument("-a", "--all", dest="show_all", action="store_true", help="Include hidden files")
    parser.add_argument("-r", "--recursive", action="store_true", help="Recursively list files in subdirectories")
    parser.add_argument(
        "--ignore-dir",
        action="append",
        default=None,
        metavar="DIR",
        help=f"Ignore directory DIR, repeatable or comma-separated (default: {','.join(DEFAULT_IGNORE_DIRS)})",
    )
    parser.add_argument("--globs", action="append", default=None, help="Only include files matching glob pattern")
    parser.add_argument("--ignore-globs", action="append", default=None, help="Ignore files matching glob pattern")
    parser.add_argument("--pattern", default="", help="Only show lines matching glob PATTERN")
    parser.add_argument("-n", "--line-numbers", action="store_true", help="Show line numbers")
    parser.add_argument("--debug", action="store_true", help="Enable debug output")
    parser.add_argument("--omit-bins", action="store_true", help="Skip binary files in output")
    parser.add_argument(
        "-f", "--format",
        default=DEFAULT_FORMAT,
        help=f"Output format: {', '.join(SUPPORTED_FORMATS)}",
    )
    parser.add_argument(
        "--relative-to",
        default=None,
        help="Display paths relative to this directory (default: scan directory)",
    )
    return parser


def split_values(values: Optional[List[str]]) -> List[str]:
    """Flattens repeated and comma-separated option values."""
    result = []
    for value in values or []:
        result.extend(v.strip() for v in value.split(",") if v.strip())
    return result


def build_config(args: argparse.Namespace) -> PipelineConfig:
    if args.format not in SUPPORTED_FORMATS:
        raise ConfigError(
            f"unsupported output format: {args.format} (supported: {', '.join(SUPPORTED_FORMATS)})"
        )

    ignore_dirs = split_values(args.ignore_dir) if args.ignore_dir is not None else list(DEFAULT_IGNORE_DIRS)

    return PipelineConfig(
        directory=args.directory,
        files=tuple(args.files),
        show_all=args.show_all,
        recursive=args.recursive,
        debug=args.debug,
        ignore_dirs=tuple(ignore_dirs),
        globs=tuple(split_values(args.globs)),
        ignore_globs=tuple(split_values(args.ignore_globs)),
        content_pattern=args.pattern,
        show_line_numbers=args.line_numbers,
        omit_bins=args.omit_bins,
        output_format=args.format,
        relative_to=args.relative_to,
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    try:
        # 1. Setup
        parser = create_arg_parser()
        args = parser.parse_args(argv)
        config = build_config(args)
        setup_logging(config.debug)
        logger.debug("Scanning %s", os.path.abspath(config.directory))

        # 2. Scan, filter, render
        Pipeline(config).run()

    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        sys.exit(1)

    except CatlsError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
