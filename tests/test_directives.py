"""Tests for line classification and directive target resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from flatlines.reader import Directive
from flatlines.reader.directives import (
    DirectiveLine,
    is_ignored,
    parse_directive,
)


@pytest.mark.parametrize(
    "line",
    ["", "x", "#", "# comment", "; comment", "!bang", "// comment", "-- comment", "--", "//"],
)
def test_ignored_lines(line: str):
    assert is_ignored(line)


@pytest.mark.parametrize("line", ["ab", "-x", "/x", "key = value", "include foo.txt"])
def test_kept_lines(line: str):
    assert not is_ignored(line)


def test_parse_content_line():
    assert parse_directive("key = value") is None
    assert parse_directive("included stuff") is None
    assert parse_directive("REQUIRE foo.txt") is None


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("include foo.txt", DirectiveLine(Directive.include, "foo.txt")),
        ("require sub/bar.txt", DirectiveLine(Directive.require, "sub/bar.txt")),
        ("divert /data/next.txt", DirectiveLine(Directive.divert, "/data/next.txt")),
        ('include "with space.txt"', DirectiveLine(Directive.include, "with space.txt")),
        ('include   " padded.txt "', DirectiveLine(Directive.include, "padded.txt")),
        ('include ""', DirectiveLine(Directive.include, "")),
    ],
)
def test_parse_directive(line: str, expected: DirectiveLine):
    assert parse_directive(line) == expected


def test_directive_prefix():
    assert Directive.include.prefix == "include "
    assert [d.value for d in Directive] == ["include", "require", "divert"]


def test_rooted_flag():
    assert DirectiveLine(Directive.include, "/a.txt").is_rooted
    assert not DirectiveLine(Directive.include, "a.txt").is_rooted


def _resolve(target: str, base_dir: Path, root_dir: Path) -> Path:
    return DirectiveLine(Directive.include, target).resolve(base_dir, root_dir)


def test_resolve_relative_target(tmp_path: Path):
    base = tmp_path / "conf"
    assert _resolve("parts/a.txt", base, tmp_path / "root") == base / "parts" / "a.txt"
    assert _resolve("../a.txt", base, tmp_path / "root") == tmp_path / "a.txt"


def test_resolve_rooted_target(tmp_path: Path):
    base = tmp_path / "conf"
    root = tmp_path / "root"
    assert _resolve("/sub/a.txt", base, root) == root / "sub" / "a.txt"
    assert _resolve("///sub/a.txt", base, root) == root / "sub" / "a.txt"


def test_resolve_parsed_directive(tmp_path: Path):
    parsed = parse_directive('require "/shared/common.txt"')
    assert parsed is not None
    assert parsed.is_rooted
    assert parsed.resolve(tmp_path / "conf", tmp_path) == tmp_path / "shared" / "common.txt"
