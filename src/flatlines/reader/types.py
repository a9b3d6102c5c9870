"""Value types for directive-resolving line streams."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from flatlines.reader.defaults import DEFAULT_ENCODING


class Directive(str, Enum):
    """
    Directives that splice another file into the line stream.
    """

    include = "include"
    """Splice the target in place; a missing target is skipped."""

    require = "require"
    """Like `include`, but a missing target fails the whole iteration."""

    divert = "divert"
    """Splice the target, then stop reading the current file. A missing target is skipped."""

    @property
    def prefix(self) -> str:
        return f"{self.value} "


class StreamState(str, Enum):
    unopened = "unopened"
    open = "open"
    reading = "reading"
    closed = "closed"


@dataclass(frozen=True)
class LineRecord:
    """
    One content line, trimmed, tagged with the file it was physically read from
    (not the root file, when it came from an include).
    """

    text: str
    source_file: Path
    line_number: int = 0

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class ReaderConfig:
    """
    Options shared by a root stream and every stream nested under it.

    `root_dir=None` means rooted targets (`include /sub/file.txt`) resolve against
    the working directory at the time the root stream is opened.
    `max_depth=None` disables the nesting limit, so include cycles longer than a
    direct self-reference recurse until the process runs out of resources.
    """

    root_dir: Path | None = None
    encoding: str = DEFAULT_ENCODING
    max_depth: int | None = None
