"""
Default line-classification rules for directive-resolving readers.

Comment prefixes and directive keywords are matched case-sensitively against
the trimmed line.
"""

from __future__ import annotations

# Lines shorter than this are dropped before any other test.
MIN_LINE_LENGTH: int = 2

COMMENT_PREFIXES: tuple[str, ...] = ("!", ";", "#", "//", "--")

# Directive keywords, in match priority order. The trailing space is part of the prefix.
DIRECTIVE_PREFIXES: tuple[str, ...] = ("include ", "require ", "divert ")

# A target starting with this is resolved against the root directory.
ROOTED_PREFIX: str = "/"

# Stripped from both ends of a directive target, in any mix.
TARGET_STRIP_CHARS: str = ' \t"'

# Decodes plain UTF-8 too; a leading byte-order mark is dropped instead of sticking to line 1.
DEFAULT_ENCODING: str = "utf-8-sig"
