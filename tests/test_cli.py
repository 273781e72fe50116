"""End-to-end CLI tests executed directly via :func:`treeglob.cli.main`."""

import argparse
import json
import os
from pathlib import Path

import pytest

from treeglob import cli


def test_cli_text_output(search_tree: Path, capfd: pytest.CaptureFixture[str]) -> None:
    assert cli.main([f"{search_tree}/fruits/p*"]) == 0
    lines = capfd.readouterr().out.splitlines()
    assert lines == [
        str(search_tree / "fruits" / "poire.txt"),
        str(search_tree / "fruits" / "pomme.txt"),
    ]


def test_cli_autorecurse_is_default(search_tree: Path, capfd: pytest.CaptureFixture[str]) -> None:
    cli.main([f"{search_tree}/fruits"])
    assert len(capfd.readouterr().out.splitlines()) == 4

    cli.main(["--no-autorecurse", f"{search_tree}/fruits"])
    assert capfd.readouterr().out.splitlines() == [str(search_tree / "fruits") + os.sep]


def test_cli_json_output(search_tree: Path, capfd: pytest.CaptureFixture[str]) -> None:
    cli.main(["--format", "json", "--no-autorecurse", f"{search_tree}/*", f"{search_tree}/**/*.txt"])
    payload = json.loads(capfd.readouterr().out)
    assert [entry["pattern"] for entry in payload] == [f"{search_tree}/*", f"{search_tree}/**/*.txt"]
    first, second = payload
    assert (first["files"], first["dirs"], first["errors"]) == (2, 3, 0)
    assert {match["type"] for match in first["matches"]} == {"file", "dir"}
    assert second["files"] == 13
    assert second["root"] == f"{search_tree}/"


def test_cli_options(search_tree: Path, capfd: pytest.CaptureFixture[str]) -> None:
    pattern = f"{search_tree}/**/*.txt"
    cli.main(["-f", "légumes", "-f", "我爱你", pattern])
    assert len(capfd.readouterr().out.splitlines()) == 5

    cli.main(["-d", "1", pattern])
    assert len(capfd.readouterr().out.splitlines()) == 1

    cli.main(["-c", f"{search_tree}/*.TXT"])
    assert capfd.readouterr().out == ""


def test_cli_link_mode(link_tree: Path, capfd: pytest.CaptureFixture[str]) -> None:
    cli.main(["-l", "0", str(link_tree)])
    ignored = capfd.readouterr().out.splitlines()
    cli.main(["--link-mode", "follow", str(link_tree)])
    followed = capfd.readouterr().out.splitlines()
    assert len(ignored) == 5
    assert len(followed) == 11


def test_cli_stats_and_out_file(search_tree: Path, tmp_path: Path, capfd: pytest.CaptureFixture[str]) -> None:
    out = tmp_path / "found.txt"
    cli.main(["--stats", "--no-autorecurse", "--out", str(out), f"{search_tree}/*"])
    captured = capfd.readouterr()
    assert captured.out == ""
    assert "2 file(s) found" in captured.err
    assert "3 dir(s) found" in captured.err
    assert len(out.read_text(encoding="utf-8").splitlines()) == 5


def test_cli_errors_go_to_stderr(tmp_path: Path, capfd: pytest.CaptureFixture[str]) -> None:
    assert cli.main([f"{tmp_path}/missing/*.txt"]) == 0
    captured = capfd.readouterr()
    assert captured.out == ""
    assert "missing" in captured.err


def test_cli_invalid_pattern(capfd: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["x/**.d"]) == 1
    err = capfd.readouterr().err
    assert "invalid pattern" in err
    assert "GlobError" in err


def test_cli_syntax(capfd: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["--syntax"]) == 0
    assert "**" in capfd.readouterr().out


def test_cli_requires_pattern(capfd: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as info:
        cli.main([])
    assert info.value.code == 2


def test_treeglob_main_entrypoint(search_tree: Path, capfd: pytest.CaptureFixture[str]) -> None:
    from treeglob import main as treeglob_main

    assert treeglob_main([f"{search_tree}/info"]) == 0
    assert capfd.readouterr().out.strip() == str(search_tree / "info")


def test_parse_argument_errors() -> None:
    from treeglob.cli import _parse_depth, _parse_link_mode

    with pytest.raises(argparse.ArgumentTypeError):
        _parse_link_mode("sideways")
    with pytest.raises(argparse.ArgumentTypeError):
        _parse_depth("-1")
    with pytest.raises(argparse.ArgumentTypeError):
        _parse_depth("deep")
    assert _parse_depth("3") == 3


def test_version() -> None:
    from treeglob import __version__, version

    assert version() == __version__
