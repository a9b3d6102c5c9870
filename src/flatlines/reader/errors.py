"""Errors raised while reading directive-resolving line streams."""

from __future__ import annotations

from pathlib import Path


class FlatlinesError(Exception):
    """Base class for errors raised by flatlines readers."""


class RequiredFileNotFoundError(FlatlinesError, FileNotFoundError):
    """
    A `require` directive named a file that does not exist. Raised from
    iteration and propagated through every enclosing stream.
    """

    def __init__(self, path: Path, including_file: Path | None = None, line_number: int = 0):
        self.path: Path = path
        self.including_file: Path | None = including_file
        self.line_number: int = line_number
        location = f" (required at {including_file}:{line_number})" if including_file else ""
        super().__init__(f"Required file not found: {path}{location}")


class IncludeDepthError(FlatlinesError):
    """Nesting of included files went deeper than the configured `max_depth`."""

    def __init__(self, path: Path, max_depth: int):
        self.path: Path = path
        self.max_depth: int = max_depth
        super().__init__(f"Include depth limit of {max_depth} exceeded at: {path}")


class StreamStateError(FlatlinesError, ValueError):
    """A stream was iterated after it was already consumed or closed."""
