"""
Root file discovery for the command line.

Expands a mix of files, directories and glob patterns into a sorted,
deduplicated list of files to read. Directories are walked with
gitignore-syntax include and exclude patterns (via `pathspec`), honoring
`.gitignore` files along the way. Files named explicitly are always kept.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import pathspec

DEFAULT_INCLUDES: list[str] = ["*.txt", "*.cfg", "*.conf"]

# Pruned during directory walks, never entered.
DEFAULT_EXCLUDES: list[str] = [
    ".git/",
    ".hg/",
    ".svn/",
    ".venv/",
    "venv/",
    "__pycache__/",
    ".tox/",
    ".nox/",
    ".pytest_cache/",
    "*.egg-info/",
    "build/",
    "dist/",
    "node_modules/",
]

_GLOB_CHARS = frozenset("*?[")


@dataclass
class DiscoveryConfig:
    """
    File discovery settings. `exclude=None` means `DEFAULT_EXCLUDES`; a list
    replaces them entirely.
    """

    include: list[str] = field(default_factory=lambda: list(DEFAULT_INCLUDES))
    extend_include: list[str] = field(default_factory=list)
    exclude: list[str] | None = None
    extend_exclude: list[str] = field(default_factory=list)
    respect_gitignore: bool = True

    @property
    def effective_include(self) -> list[str]:
        return self.include + self.extend_include

    @property
    def effective_exclude(self) -> list[str]:
        base = self.exclude if self.exclude is not None else list(DEFAULT_EXCLUDES)
        return base + self.extend_exclude


def load_gitignore(directory: Path) -> pathspec.PathSpec | None:
    """Compiled `.gitignore` of `directory`, or `None` if absent or empty."""
    gitignore = directory / ".gitignore"
    if not gitignore.is_file():
        return None
    lines = [
        line
        for line in gitignore.read_text().splitlines()
        if line.strip() and not line.strip().startswith("#")
    ]
    if not lines:
        return None
    return pathspec.GitIgnoreSpec.from_lines(lines)


class FileDiscovery:
    """Resolves command-line inputs to the root files to flatten."""

    def __init__(self, config: DiscoveryConfig | None = None) -> None:
        self._config: DiscoveryConfig = config or DiscoveryConfig()
        self._include_spec: pathspec.PathSpec = pathspec.GitIgnoreSpec.from_lines(
            self._config.effective_include
        )
        self._exclude_spec: pathspec.PathSpec = pathspec.GitIgnoreSpec.from_lines(
            self._config.effective_exclude
        )

    def resolve(self, paths: Sequence[str | Path]) -> list[Path]:
        """
        Resolve inputs to absolute files:
        - Existing file → kept as is
        - Existing directory → walked, filtered by include/exclude/gitignore
        - Contains glob characters → expanded, filtered by include patterns
        - Otherwise → `FileNotFoundError`
        """
        seen: set[Path] = set()
        result: list[Path] = []

        for raw_path in paths:
            p = Path(raw_path)
            if p.is_file():
                found: Iterable[Path] = [p]
            elif p.is_dir():
                found = self._walk_directory(p)
            elif any(c in str(raw_path) for c in _GLOB_CHARS):
                found = self._expand_glob(str(raw_path))
            else:
                raise FileNotFoundError(f"Path not found: {raw_path}")

            for path in found:
                absolute = Path(os.path.abspath(path))
                if absolute not in seen:
                    seen.add(absolute)
                    result.append(absolute)

        result.sort()
        return result

    def _walk_directory(self, root: Path) -> Iterable[Path]:
        # Loaded .gitignore specs by directory; only ancestors of the current directory apply.
        ignores: dict[Path, pathspec.PathSpec | None] = {}

        for dirpath, dirnames, filenames in os.walk(root):
            current = Path(dirpath)
            if self._config.respect_gitignore:
                ignores[current] = load_gitignore(current)
            active = [
                (directory, spec)
                for directory, spec in ignores.items()
                if spec is not None and (directory == current or directory in current.parents)
            ]

            dirnames[:] = sorted(
                d
                for d in dirnames
                if not self._is_excluded(current / d, root, active, is_dir=True)
            )

            for filename in sorted(filenames):
                filepath = current / filename
                if not self._include_spec.match_file(filename):
                    continue
                if self._is_excluded(filepath, root, active, is_dir=False):
                    continue
                yield filepath

    def _is_excluded(
        self,
        path: Path,
        root: Path,
        gitignores: list[tuple[Path, pathspec.PathSpec]],
        is_dir: bool,
    ) -> bool:
        suffix = "/" if is_dir else ""
        if self._exclude_spec.match_file(path.name + suffix):
            return True
        if self._exclude_spec.match_file(path.relative_to(root).as_posix() + suffix):
            return True
        return any(
            spec.match_file(path.relative_to(directory).as_posix() + suffix)
            for directory, spec in gitignores
        )

    def _expand_glob(self, pattern: str) -> Iterable[Path]:
        parts = Path(pattern).parts
        root = Path(".")
        glob_part = pattern
        for i, part in enumerate(parts):
            if any(c in part for c in _GLOB_CHARS):
                root = Path(*parts[:i]) if i > 0 else Path(".")
                glob_part = str(Path(*parts[i:]))
                break

        for path in sorted(root.glob(glob_part)):
            if path.is_file() and self._include_spec.match_file(path.name):
                yield path
