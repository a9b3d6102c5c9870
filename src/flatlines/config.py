"""
TOML-based config file loading for flatlines.

Searches for `.flatlines.toml`, `flatlines.toml`, or `pyproject.toml [tool.flatlines]`
walking up from the current directory. Config values are merged with CLI flags
using three-way precedence: explicit CLI flags > config file > built-in defaults.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]


@dataclass
class FlatlinesConfig:
    """
    Parsed config from a TOML file. `None` means "not set in the config", so the
    merge can tell it apart from a value that happens to equal the default.
    """

    # Reader
    root_dir: str | None = None
    encoding: str | None = None
    max_depth: int | None = None
    with_source: bool | None = None
    # File discovery
    include: list[str] | None = None
    extend_include: list[str] | None = None
    exclude: list[str] | None = None
    extend_exclude: list[str] | None = None
    respect_gitignore: bool | None = None


# Search order within each directory level; first match wins.
_CONFIG_FILENAMES = [".flatlines.toml", "flatlines.toml", "pyproject.toml"]

_VALID_FIELDS = {f.name for f in fields(FlatlinesConfig)}

# Expected TOML value type per field; `list` means a list of strings.
_FIELD_TYPES: dict[str, type] = {
    "root_dir": str,
    "encoding": str,
    "max_depth": int,
    "with_source": bool,
    "include": list,
    "extend_include": list,
    "exclude": list,
    "extend_exclude": list,
    "respect_gitignore": bool,
}


class ConfigError(ValueError):
    """A config file value has the wrong type or is out of range."""


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a config file. Returns the first
    found, or `None`. A `pyproject.toml` only counts if it has `[tool.flatlines]`.
    """
    current = start_dir.resolve()
    while True:
        for filename in _CONFIG_FILENAMES:
            candidate = current / filename
            if not candidate.is_file():
                continue
            if filename != "pyproject.toml" or _pyproject_has_flatlines_section(candidate):
                return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


def _pyproject_has_flatlines_section(path: Path) -> bool:
    try:
        data = tomllib.loads(path.read_text())
        return "flatlines" in data.get("tool", {})
    except (tomllib.TOMLDecodeError, OSError):
        return False


def load_config(config_path: Path) -> FlatlinesConfig:
    """
    Load a `FlatlinesConfig` from a TOML file, either standalone or the
    `[tool.flatlines]` table of a `pyproject.toml`. Keys are kebab-case and may
    be grouped in sections such as `[reader]` and `[file-discovery]`. Unknown
    keys are ignored; a known key with a value of the wrong type raises `ConfigError`.

    A relative `root-dir` is taken relative to the config file's directory.
    """
    data = tomllib.loads(config_path.read_text())

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("flatlines", {})

    config = _parse_config_data(data)
    if config.root_dir is not None:
        config.root_dir = str(config_path.parent.resolve() / config.root_dir)
    return config


def _parse_config_data(data: dict[str, Any]) -> FlatlinesConfig:
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            flat.update(cast(dict[str, Any], value))
        else:
            flat[key] = value

    mapped: dict[str, Any] = {}
    for key, value in flat.items():
        snake_key = key.replace("-", "_")
        if snake_key in _VALID_FIELDS:
            _check_value(key, snake_key, value)
            mapped[snake_key] = value

    return FlatlinesConfig(**mapped)


def _check_value(key: str, field_name: str, value: Any) -> None:
    expected = _FIELD_TYPES[field_name]
    if expected is int:
        # bool is an int subclass, but `max-depth = true` is a mistake
        valid = isinstance(value, int) and not isinstance(value, bool) and value >= 0
        description = "a non-negative integer"
    elif expected is list:
        items = cast(list[Any], value) if isinstance(value, list) else None
        valid = items is not None and all(isinstance(item, str) for item in items)
        description = "a list of strings"
    else:
        valid = isinstance(value, expected)
        description = "a boolean" if expected is bool else "a string"
    if not valid:
        raise ConfigError(f"`{key}` must be {description}, got {value!r}")


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: FlatlinesConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Merge CLI options with config file settings, in place.

    Precedence: explicit CLI flags > config file > built-in defaults.
    """
    if config is None:
        return cli_opts

    for cfg_field in fields(FlatlinesConfig):
        cfg_value = getattr(config, cfg_field.name)
        if cfg_value is None:
            continue
        if cfg_field.name in explicit_flags:
            continue
        if hasattr(cli_opts, cfg_field.name):
            setattr(cli_opts, cfg_field.name, cfg_value)

    return cli_opts
