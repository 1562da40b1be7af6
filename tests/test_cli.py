import io
from pathlib import Path

import pytest

from fnerror.driver.cli import main

MARKED = '#[fnerror]\nfn load() -> Result<u8> {\n    Err(#[fnerr] Empty("empty"))\n}\n'
NO_SITES = "#[fnerror]\nfn load() -> Result<u8> {\n    Ok(1)\n}\n"
BAD_CAST = '#[fnerror]\nfn load(p: String) -> Result<u8> {\n    Err(#[fnerr] Missing("{}", p))\n}\n'


@pytest.fixture
def source(tmp_path: Path):
    def _source(text: str, name: str = "lib.rs") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _source


def test_expands_to_stdout(source, capsys) -> None:
    path = source(MARKED)

    assert main([str(path)]) == 0

    out = capsys.readouterr().out
    assert "pub enum LoadError {" in out
    assert "Err(LoadError::Empty())" in out
    assert path.read_text(encoding="utf-8") == MARKED


def test_out_file(source, tmp_path: Path, capsys) -> None:
    path = source(MARKED)
    dest = tmp_path / "out.rs"

    assert main([str(path), "-o", str(dest)]) == 0

    assert "pub enum LoadError {" in dest.read_text(encoding="utf-8")
    assert capsys.readouterr().out == ""


def test_in_place(source) -> None:
    path = source(MARKED)

    assert main([str(path), "--in-place"]) == 0

    assert "pub enum LoadError {" in path.read_text(encoding="utf-8")


def test_stdin(monkeypatch, capsys) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(MARKED))

    assert main(["-"]) == 0

    assert "pub enum LoadError {" in capsys.readouterr().out


def test_warning_exit_code(source, capsys) -> None:
    assert main([str(source(NO_SITES))]) == 1

    captured = capsys.readouterr()
    assert "pub enum LoadError {}" in captured.out
    assert "FW1001" in captured.err


def test_error_exit_code_writes_nothing(source, tmp_path: Path, capsys) -> None:
    dest = tmp_path / "out.rs"

    assert main([str(source(BAD_CAST)), "-o", str(dest)]) == 2

    err = capsys.readouterr().err
    assert "FE3003" in err
    assert ":3:" in err
    assert not dest.exists()


def test_syntax_error(source, capsys) -> None:
    assert main([str(source("fn broken( {\n"))]) == 2

    assert "FE0001" in capsys.readouterr().err


def test_verbose(source, capsys) -> None:
    path = source(MARKED)

    assert main([str(path), "--verbose", "-o", str(path.with_suffix(".out.rs"))]) == 0

    assert "expanded ->" in capsys.readouterr().err


def test_dump_ast(source, capsys) -> None:
    assert main([str(source(MARKED)), "--dump-ast"]) == 0

    assert "FnItem(" in capsys.readouterr().out


@pytest.mark.parametrize(
    "argv",
    [
        [],
        ["-", "--in-place"],
        ["x.rs", "--in-place", "-o", "y.rs"],
    ],
)
def test_invalid_arguments(argv: list[str], capsys) -> None:
    assert main(argv) == 2
    assert "error:" in capsys.readouterr().err


def test_missing_file(tmp_path: Path, capsys) -> None:
    assert main([str(tmp_path / "missing.rs")]) == 2
    assert "cannot read" in capsys.readouterr().err


def test_version(capsys) -> None:
    assert main(["--version"]) == 0
    assert "fnerror" in capsys.readouterr().out
