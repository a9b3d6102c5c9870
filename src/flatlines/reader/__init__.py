"""
Self-contained directive-resolving line reader.

Reads a text file as a flat stream of meaningful lines: blank lines, one-character
lines and comments (`!`, `;`, `#`, `//`, `--`) are dropped, and `include`,
`require` and `divert` directives are replaced by the lines of the file they name.
No imports from `flatlines` outside this package.

Usage::

    from flatlines.reader import DirectiveLineStream

    with DirectiveLineStream("etc/world.conf") as stream:
        for record in stream:
            print(record.source_file, record.text)
"""

from flatlines.reader.errors import (
    FlatlinesError,
    IncludeDepthError,
    RequiredFileNotFoundError,
    StreamStateError,
)
from flatlines.reader.stream import DirectiveLineStream, read_lines
from flatlines.reader.types import Directive, LineRecord, ReaderConfig, StreamState

__all__ = [
    "Directive",
    "DirectiveLineStream",
    "FlatlinesError",
    "IncludeDepthError",
    "LineRecord",
    "ReaderConfig",
    "RequiredFileNotFoundError",
    "StreamState",
    "StreamStateError",
    "read_lines",
]
