"""
Line classification and directive target resolution.

These are pure functions over a single trimmed line; file access is limited to
path normalization, so they can be tested without touching the disk.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from flatlines.reader.defaults import (
    COMMENT_PREFIXES,
    MIN_LINE_LENGTH,
    ROOTED_PREFIX,
    TARGET_STRIP_CHARS,
)
from flatlines.reader.types import Directive


@dataclass(frozen=True)
class DirectiveLine:
    """A parsed directive: the keyword and its raw (unresolved) target reference."""

    directive: Directive
    target: str

    @property
    def is_rooted(self) -> bool:
        return self.target.startswith(ROOTED_PREFIX)

    def resolve(self, base_dir: Path, root_dir: Path) -> Path:
        """
        Absolute path of the target. Rooted targets resolve against `root_dir`
        with every leading slash removed; others against `base_dir`.
        """
        if self.is_rooted:
            return normalize_path(root_dir / self.target.lstrip(ROOTED_PREFIX))
        return normalize_path(base_dir / self.target)


def is_ignored(line: str) -> bool:
    """
    True if a trimmed line produces nothing: blank, too short, or a comment.
    """
    if not line:
        return True
    if len(line) < MIN_LINE_LENGTH:
        return True
    return line.startswith(COMMENT_PREFIXES)


def parse_directive(line: str) -> DirectiveLine | None:
    """
    Parse a trimmed line as a directive, or return `None` for a content line.

    The target is everything after the first space, with surrounding whitespace
    and double quotes removed, e.g. `include  "sub/a.txt" ` -> `sub/a.txt`.
    """
    for directive in Directive:
        if line.startswith(directive.prefix):
            target = line[line.index(" ") :].strip(TARGET_STRIP_CHARS)
            return DirectiveLine(directive, target)
    return None


def normalize_path(path: str | Path) -> Path:
    """Absolute, normalized path. Symlinks are left alone."""
    return Path(os.path.abspath(path))

