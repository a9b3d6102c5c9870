"""
flatlines: read line-oriented text files as a flat stream of meaningful lines,
with `include`, `require` and `divert` directives resolved in place.
"""

from flatlines.reader import (
    Directive,
    DirectiveLineStream,
    FlatlinesError,
    IncludeDepthError,
    LineRecord,
    ReaderConfig,
    RequiredFileNotFoundError,
    StreamState,
    StreamStateError,
    read_lines,
)

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
