"""
DirectiveLineStream: the directive-resolving line reader.

Reads a file line by line, drops blank, short and comment lines, and splices in
the content of `include`, `require` and `divert` targets, yielding a flat
sequence of `LineRecord`s tagged with the file each line was read from.
"""

from __future__ import annotations

import logging
from collections.abc import Generator, Iterator
from dataclasses import replace
from pathlib import Path
from typing import TextIO

from flatlines.reader.directives import (
    DirectiveLine,
    is_ignored,
    normalize_path,
    parse_directive,
)
from flatlines.reader.errors import (
    IncludeDepthError,
    RequiredFileNotFoundError,
    StreamStateError,
)
from flatlines.reader.types import Directive, LineRecord, ReaderConfig, StreamState

log = logging.getLogger(__name__)


class DirectiveLineStream:
    """
    Lazy, single-pass reader over one file with includes flattened in place.

    The file is opened on construction and read only as records are requested.
    Each directive target is read by a nested stream that owns its own handle,
    so every file is closed as soon as its lines are exhausted, the consumer
    stops iterating, or an error propagates out.

    Usage::

        with DirectiveLineStream("server.conf") as stream:
            for record in stream:
                handle(record.text, record.source_file)

    Only a direct self-reference (`include` of the file itself) is ignored.
    Longer cycles (a includes b includes a) are not detected and recurse until
    the process runs out of resources, unless `ReaderConfig.max_depth` is set.
    """

    def __init__(
        self,
        file_path: str | Path,
        config: ReaderConfig | None = None,
        *,
        depth: int = 0,
    ) -> None:
        self.state: StreamState = StreamState.unopened
        if not Path(file_path).is_file():
            raise FileNotFoundError(f"File not found: {file_path}")

        config = config or ReaderConfig()
        # Nested streams inherit the resolved root directory through the config.
        root_dir = normalize_path(config.root_dir if config.root_dir is not None else Path.cwd())
        self.config: ReaderConfig = replace(config, root_dir=root_dir)

        self.file_path: Path = normalize_path(file_path)
        self.base_dir: Path = self.file_path.parent
        self.root_dir: Path = root_dir
        self.depth: int = depth
        self.current_line: int = 0
        """Physical lines consumed so far from this file, comments and directives included."""

        self._handle: TextIO = self.file_path.open(encoding=config.encoding)
        self._lines: Generator[LineRecord, None, None] | None = None
        self.state = StreamState.open
        log.debug("Opened %s (depth %d)", self.file_path, depth)

    def __enter__(self) -> DirectiveLineStream:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __iter__(self) -> Iterator[LineRecord]:
        if self.state is not StreamState.open:
            raise StreamStateError(
                f"Cannot iterate a stream that is {self.state.value}: {self.file_path}"
            )
        self.state = StreamState.reading
        self._lines = self._read()
        return self._lines

    def close(self) -> None:
        """
        Release the read handle, abandoning any iteration in progress (and the
        nested streams under it). Safe to call more than once.
        """
        lines, self._lines = self._lines, None
        if lines is not None:
            lines.close()
        self._release()

    def _release(self) -> None:
        if self.state is StreamState.closed:
            return
        self._handle.close()
        self.state = StreamState.closed
        log.debug("Closed %s after %d lines", self.file_path, self.current_line)

    def _read(self) -> Generator[LineRecord, None, None]:
        try:
            for raw_line in self._handle:
                self.current_line += 1
                line = raw_line.strip()
                if is_ignored(line):
                    continue

                parsed = parse_directive(line)
                if parsed is None:
                    yield LineRecord(line, self.file_path, self.current_line)
                    continue

                diverted = yield from self._splice(parsed)
                if diverted:
                    log.debug(
                        "%s:%d: diverted, skipping rest of file", self.file_path, self.current_line
                    )
                    return
        finally:
            self._release()

    def _splice(self, parsed: DirectiveLine) -> Generator[LineRecord, None, bool]:
        """
        Yield the records of a directive's target. Returns whether reading of the
        current file should stop (a successful `divert`).
        """
        target = parsed.resolve(self.base_dir, self.root_dir)

        if target == self.file_path:
            log.debug("%s:%d: ignoring self-reference", self.file_path, self.current_line)
            return False

        if not target.is_file():
            if parsed.directive is Directive.require:
                raise RequiredFileNotFoundError(target, self.file_path, self.current_line)
            log.debug(
                "%s:%d: skipping %s of missing file %s",
                self.file_path,
                self.current_line,
                parsed.directive.value,
                target,
            )
            return False

        max_depth = self.config.max_depth
        if max_depth is not None and self.depth >= max_depth:
            raise IncludeDepthError(target, max_depth)

        with DirectiveLineStream(target, self.config, depth=self.depth + 1) as nested:
            yield from nested

        return parsed.directive is Directive.divert


def read_lines(file_path: str | Path, config: ReaderConfig | None = None) -> Iterator[LineRecord]:
    """
    Yield the flattened records of `file_path`, closing every file when done.

    As this is a generator, a missing root file raises `FileNotFoundError` on the
    first `next()` rather than at the call.
    """
    with DirectiveLineStream(file_path, config) as stream:
        yield from stream
