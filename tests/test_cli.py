"""CLI tests: flattening, output, config and error exit codes."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from flatlines.cli import main


def _render_help(capsys: pytest.CaptureFixture[str]) -> str:
    with pytest.raises(SystemExit) as exc:
        main(["--help"])
    assert exc.value.code == 0
    return capsys.readouterr().out


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A small include tree, with the working directory set to its root."""
    (tmp_path / "main.txt").write_text("# entry point\nfirst\ninclude parts/extra.txt\nlast\n")
    parts = tmp_path / "parts"
    parts.mkdir()
    (parts / "extra.txt").write_text("; extra lines\nextra one\nextra two\n")
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_help_includes_tagline_and_usage(capsys: pytest.CaptureFixture[str]) -> None:
    out = _render_help(capsys)
    assert "flatlines: Flatten line-oriented text files with include directives" in out
    assert "Common usage:" in out
    assert "flatlines --with-source world.conf" in out


def test_prints_flattened_lines(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["main.txt"]) == 0
    assert capsys.readouterr().out == "first\nextra one\nextra two\nlast\n"


def test_with_source(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--with-source", "main.txt"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == f"{project / 'main.txt'}:2: first"
    assert lines[1] == f"{project / 'parts' / 'extra.txt'}:2: extra one"
    assert lines[3] == f"{project / 'main.txt'}:4: last"


def test_output_file(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    out_file = project / "out" / "flat.txt"
    assert main(["-o", str(out_file), "main.txt"]) == 0
    assert out_file.read_text() == "first\nextra one\nextra two\nlast\n"
    assert capsys.readouterr().out == ""


def test_multiple_files_in_sorted_order(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (project / "another.txt").write_text("from another\n")
    assert main(["main.txt", "another.txt"]) == 0
    assert capsys.readouterr().out.splitlines()[0] == "from another"


def test_rooted_include_uses_root_dir_flag(
    project: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    data = project / "data"
    data.mkdir()
    (data / "shared.txt").write_text("shared line\n")
    (project / "parts" / "rooted.txt").write_text("include /shared.txt\n")
    assert main(["--root-dir", "data", "parts/rooted.txt"]) == 0
    assert capsys.readouterr().out == "shared line\n"


def test_list_files(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (project / "notes.md").write_text("# not listed\n")
    assert main(["--list-files", "."]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == [str(project / "main.txt"), str(project / "parts" / "extra.txt")]


def test_config_file_sets_defaults(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (project / "flatlines.toml").write_text("[reader]\nwith-source = true\n")
    assert main(["main.txt"]) == 0
    assert capsys.readouterr().out.startswith(f"{project / 'main.txt'}:2: ")


def test_config_max_depth_overridden_by_flag(
    project: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (project / "flatlines.toml").write_text("max-depth = 0\n")
    assert main(["main.txt"]) == 2
    assert "depth" in capsys.readouterr().err
    assert main(["--max-depth", "5", "main.txt"]) == 0


def test_missing_require_exits_2(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (project / "broken.txt").write_text("ok line\nrequire nowhere.txt\n")
    assert main(["broken.txt"]) == 2
    captured = capsys.readouterr()
    assert "Error: Required file not found" in captured.err
    assert "nowhere.txt" in captured.err


def test_cycle_with_max_depth_exits_2(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (project / "ping.txt").write_text("include pong.txt\n")
    (project / "pong.txt").write_text("include ping.txt\n")
    assert main(["--max-depth", "3", "ping.txt"]) == 2
    assert "Include depth limit of 3 exceeded" in capsys.readouterr().err


def test_no_input_is_an_error(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 1
    assert "No input specified" in capsys.readouterr().err


def test_missing_input_path_is_an_error(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["missing.txt"]) == 1
    assert "Path not found: missing.txt" in capsys.readouterr().err


def test_skipped_includes_are_logged(
    project: Path, caplog: pytest.LogCaptureFixture, capsys: pytest.CaptureFixture[str]
) -> None:
    caplog.set_level(logging.DEBUG, logger="flatlines")
    (project / "optional.txt").write_text("include absent.txt\nkept\n")
    assert main(["--verbose", "optional.txt"]) == 0
    assert capsys.readouterr().out == "kept\n"
    assert "skipping include of missing file" in caplog.text


def test_undecodable_input_exits_2(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (project / "binary.txt").write_bytes(b"ok line\n\xff\xfe bad\n")
    assert main(["binary.txt"]) == 2
    assert "Error:" in capsys.readouterr().err


def test_unknown_encoding_exits_2(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--encoding", "nope", "main.txt"]) == 2
    err = capsys.readouterr().err
    assert err.startswith("Error:")
    assert "unknown encoding" in err


def test_byte_order_mark_is_not_output(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (project / "bom.txt").write_bytes("\ufeffinclude parts/extra.txt\n".encode())
    assert main(["bom.txt"]) == 0
    assert capsys.readouterr().out == "extra one\nextra two\n"


def test_invalid_config_value_exits_1(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (project / "flatlines.toml").write_text('max-depth = "deep"\n')
    assert main(["main.txt"]) == 1
    err = capsys.readouterr().err
    assert "Error:" in err
    assert "max-depth" in err
