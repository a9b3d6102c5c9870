#!/usr/bin/env python3
"""
flatlines: Flatten line-oriented text files with include directives

Prints the meaningful lines of each file: blank lines and comments
(`!`, `;`, `#`, `//`, `--`) are dropped, and `include FILE`, `require FILE`
and `divert FILE` lines are replaced by the lines of the file they name.

Common usage:
  flatlines world.conf
  flatlines --with-source world.conf
  flatlines --root-dir data/ -o flat.txt data/scripts/main.txt
  flatlines --list-files conf/
"""

from __future__ import annotations

import argparse
import importlib.metadata
import logging
import sys
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from strif import atomic_output_file

from flatlines.config import find_config_file, load_config, merge_cli_with_config
from flatlines.discovery import DEFAULT_INCLUDES, DiscoveryConfig, FileDiscovery
from flatlines.reader import FlatlinesError, LineRecord, ReaderConfig, read_lines
from flatlines.reader.defaults import DEFAULT_ENCODING

log = logging.getLogger(__name__)

LOG_FORMAT = "[%(levelname)s] %(message)s"


@dataclass
class Options:
    """Command-line options for the flatlines tool."""

    files: list[str]
    output: str
    with_source: bool
    root_dir: str | None
    encoding: str
    max_depth: int | None
    list_files: bool
    verbose: bool
    version: bool
    # File discovery options
    extend_include: list[str]
    exclude: list[str] | None
    extend_exclude: list[str]
    respect_gitignore: bool
    include: list[str] = field(default_factory=lambda: list(DEFAULT_INCLUDES))


def _build_parser() -> argparse.ArgumentParser:
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    parser = argparse.ArgumentParser(
        description=doc_parts[0],
        epilog="\n\n".join(doc_parts[1:]),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "files",
        nargs="*",
        type=str,
        default=[],
        help="Input files, directories or glob patterns",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default="-",
        help="Output file (use '-' for stdout)",
    )
    parser.add_argument(
        "--with-source",
        action="store_true",
        dest="with_source",
        help="Prefix each line with the file and line number it was read from",
    )
    parser.add_argument(
        "--root-dir",
        type=str,
        default=None,
        dest="root_dir",
        metavar="DIR",
        help="Directory that rooted targets (starting with '/') resolve against "
        "(default: current directory)",
    )
    parser.add_argument(
        "--encoding",
        type=str,
        default=DEFAULT_ENCODING,
        help="Text encoding of input files (default: %(default)s)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        dest="max_depth",
        metavar="N",
        help="Fail when includes nest deeper than N files (default: no limit)",
    )
    parser.add_argument(
        "--extend-include",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Additional file patterns to read from directories (e.g., '*.ini'). Can be repeated",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Replace all default exclusion patterns. Can be repeated",
    )
    parser.add_argument(
        "--extend-exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Add to default exclusion patterns (e.g., 'backup/'). Can be repeated",
    )
    parser.add_argument(
        "--no-respect-gitignore",
        action="store_true",
        dest="no_respect_gitignore",
        help="Disable .gitignore integration",
    )
    parser.add_argument(
        "--list-files",
        action="store_true",
        dest="list_files",
        help="Print resolved root files without reading them",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug details (opened files, skipped includes) to stderr",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    return parser


# argparse dest name -> Options field name, for flags a config file may also set.
_TRACKED_FLAGS: dict[str, str] = {
    "with_source": "with_source",
    "root_dir": "root_dir",
    "encoding": "encoding",
    "max_depth": "max_depth",
    "extend_include": "extend_include",
    "exclude": "exclude",
    "extend_exclude": "extend_exclude",
    "no_respect_gitignore": "respect_gitignore",
}


def _explicit_flags(args: list[str] | None) -> set[str]:
    """
    Names of the tracked options the user actually passed. Re-parses with
    sentinel defaults, since comparing against defaults fails when the user
    passes the default value.
    """
    sentinel = object()
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument("--with-source", dest="with_source", action="store_true", default=sentinel)
    parser.add_argument("--root-dir", dest="root_dir", default=sentinel)
    parser.add_argument("--encoding", default=sentinel)
    parser.add_argument("--max-depth", dest="max_depth", default=sentinel)
    # append actions need a list or None default; None means not supplied.
    parser.add_argument("--extend-include", dest="extend_include", action="append", default=None)
    parser.add_argument("--exclude", action="append", default=None)
    parser.add_argument("--extend-exclude", dest="extend_exclude", action="append", default=None)
    parser.add_argument(
        "--no-respect-gitignore",
        dest="no_respect_gitignore",
        action="store_true",
        default=sentinel,
    )
    opts, _ = parser.parse_known_args(args if args is not None else sys.argv[1:])
    return {
        field_name
        for dest_name, field_name in _TRACKED_FLAGS.items()
        if getattr(opts, dest_name, None) not in (None, sentinel)
    }


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments. Returns the options and the set of options
    explicitly given on the command line (for config merge precedence).
    """
    opts = _build_parser().parse_args(args)
    return (
        Options(
            files=opts.files,
            output=opts.output,
            with_source=opts.with_source,
            root_dir=opts.root_dir,
            encoding=opts.encoding,
            max_depth=opts.max_depth,
            list_files=opts.list_files,
            verbose=opts.verbose,
            version=opts.version,
            extend_include=opts.extend_include,
            exclude=opts.exclude,
            extend_exclude=opts.extend_exclude,
            respect_gitignore=not opts.no_respect_gitignore,
        ),
        _explicit_flags(args),
    )


def _resolve_files(options: Options) -> list[Path]:
    config = DiscoveryConfig(
        include=options.include,
        extend_include=options.extend_include,
        exclude=options.exclude,
        extend_exclude=options.extend_exclude,
        respect_gitignore=options.respect_gitignore,
    )
    return FileDiscovery(config).resolve(options.files)


def format_record(record: LineRecord, with_source: bool = False) -> str:
    if with_source:
        return f"{record.source_file}:{record.line_number}: {record.text}"
    return record.text


def _write_records(
    files: Iterable[Path], reader_config: ReaderConfig, out: TextIO, with_source: bool
) -> None:
    for path in files:
        for record in read_lines(path, reader_config):
            out.write(format_record(record, with_source) + "\n")


def flatten_files(
    files: list[Path],
    output: str = "-",
    reader_config: ReaderConfig | None = None,
    with_source: bool = False,
) -> None:
    """
    Write the flattened lines of each file, in order, to `output` ('-' for
    stdout). Output files are written atomically, so a failed read leaves any
    previous output untouched.
    """
    reader_config = reader_config or ReaderConfig()
    if output == "-":
        _write_records(files, reader_config, sys.stdout, with_source)
        return
    with atomic_output_file(output, make_parents=True) as tmp_path:
        with open(tmp_path, "w", encoding="utf-8") as out:
            _write_records(files, reader_config, out, with_source)


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the flatlines CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, 1 for usage errors, 2 for read errors)
    """
    options, explicit_flags = _parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )

    if options.version:
        try:
            version = importlib.metadata.version("flatlines")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    if not options.files:
        print(
            "Error: No input specified. Provide files, directories or glob patterns."
            " Use --help for more options.",
            file=sys.stderr,
        )
        return 1

    config_path = find_config_file(Path.cwd())
    if config_path:
        log.debug("Using config file %s", config_path)
        try:
            config = load_config(config_path)
        except ValueError as e:
            print(f"Error: {config_path}: {e}", file=sys.stderr)
            return 1
        merge_cli_with_config(options, config, explicit_flags)

    try:
        resolved_files = _resolve_files(options)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if options.list_files:
        for f in resolved_files:
            print(f)
        return 0

    reader_config = ReaderConfig(
        root_dir=Path(options.root_dir) if options.root_dir else None,
        encoding=options.encoding,
        max_depth=options.max_depth,
    )
    try:
        flatten_files(resolved_files, options.output, reader_config, options.with_source)
    except (FlatlinesError, OSError, UnicodeError, LookupError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
