#!/usr/bin/env python3
"""
assetglob: Resolve extended glob patterns into matching files and directories

Common usage:
  assetglob '**/*.py'
  assetglob 'src/**/*.{js,css}' '!src/vendor/**'
  assetglob --relative --files-only 'assets/**'
  assetglob --show-matchers '{a,b}.txt'

Patterns are applied in order. A pattern starting with `!` removes the paths
matched so far; it does not affect paths added by later patterns. With no
patterns on the command line, `patterns` from the config file are used.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

from assetglob.config import find_config_file, load_config, merge_cli_with_config
from assetglob.errors import GlobError
from assetglob.resolver import DEFAULT_WORKERS, FileAsset, GlobResolver, Matcher, ResolverConfig


@dataclass
class Options:
    """Command-line options for the assetglob tool."""

    patterns: list[str]
    workers: int = DEFAULT_WORKERS
    exclude: list[str] = field(default_factory=list)
    respect_gitignore: bool = False
    relative: bool = False
    files_only: bool = False
    show_matchers: bool = False
    null: bool = False
    verbose: int = 0
    version: bool = False


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns `(options, explicit_flags)`, where `explicit_flags` names the
    options the user actually passed (for config merge precedence).
    """
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="assetglob",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "patterns",
        nargs="*",
        type=str,
        default=[],
        metavar="PATTERN",
        help="Glob patterns, applied in order (prefix with '!' to remove matches)",
    )
    # Defaults of None mark options the user did not pass.
    parser.add_argument(
        "-w",
        "--workers",
        type=int,
        default=None,
        metavar="N",
        help=f"Threads used to walk each pattern root (default: {DEFAULT_WORKERS})",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Gitignore-style pattern to prune while walking. Can be repeated",
    )
    parser.add_argument(
        "--respect-gitignore",
        action="store_true",
        default=None,
        dest="respect_gitignore",
        help="Also prune entries ignored by the .gitignore in each pattern root",
    )
    parser.add_argument(
        "--relative",
        action="store_true",
        help="Print paths relative to the root of the pattern that matched them",
    )
    parser.add_argument(
        "--files-only",
        action="store_true",
        dest="files_only",
        help="Do not print directories",
    )
    parser.add_argument(
        "--show-matchers",
        action="store_true",
        dest="show_matchers",
        help="Print the compiled regular expression of each pattern after the matches",
    )
    parser.add_argument(
        "-0",
        "--null",
        action="store_true",
        help="Separate output paths with NUL instead of newline",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (repeat for debug output)",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    opts = parser.parse_args(args)

    explicit_flags: set[str] = set()
    if opts.patterns:
        explicit_flags.add("patterns")
    for name in ("workers", "exclude", "respect_gitignore"):
        if getattr(opts, name) is not None:
            explicit_flags.add(name)

    return (
        Options(
            patterns=opts.patterns,
            workers=opts.workers if opts.workers is not None else DEFAULT_WORKERS,
            exclude=opts.exclude if opts.exclude is not None else [],
            respect_gitignore=bool(opts.respect_gitignore),
            relative=opts.relative,
            files_only=opts.files_only,
            show_matchers=opts.show_matchers,
            null=opts.null,
            verbose=opts.verbose,
            version=opts.version,
        ),
        explicit_flags,
    )


def _configure_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)


def _format_asset(asset: FileAsset, relative: bool) -> str:
    return asset.relative_path if relative else asset.path


def _format_matcher(matcher: Matcher) -> str:
    return ("!" if matcher.negate else "") + str(matcher)


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the assetglob CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    options, explicit_flags = _parse_args(args)

    if options.version:
        try:
            version = importlib.metadata.version("assetglob")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    _configure_logging(options.verbose)
    log = logging.getLogger(__name__)

    config_path = find_config_file(Path.cwd())
    if config_path:
        log.info("Using config file %s", config_path)
        merge_cli_with_config(options, load_config(config_path), explicit_flags)

    if not options.patterns:
        print(
            "Error: No patterns specified. Pass glob patterns or set `patterns` in a config"
            " file. Use --help for more options.",
            file=sys.stderr,
        )
        return 1

    resolver = GlobResolver(
        ResolverConfig(
            workers=options.workers,
            exclude=options.exclude,
            respect_gitignore=options.respect_gitignore,
        )
    )
    try:
        assets, matchers = resolver.resolve(options.patterns)
    except GlobError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if options.files_only:
        assets = [a for a in assets if not a.is_dir]
    log.info("Resolved %d paths from %d patterns", len(assets), len(matchers))

    end = "\0" if options.null else "\n"
    for line in sorted(_format_asset(a, options.relative) for a in assets):
        print(line, end=end)
    if options.show_matchers:
        for matcher in matchers:
            print(_format_matcher(matcher), end=end)

    return 0


if __name__ == "__main__":
    sys.exit(main())
