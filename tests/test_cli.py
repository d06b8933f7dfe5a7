import io
import json
import logging

import pytest

from cuteopts import const, isVerbose, main, render, Matches

SCHEMA = """
o/opt#An option
a#An argument:

#Files
:input#The input file
"""


@pytest.fixture
def schema(tmp_path):
    path = tmp_path / "schema.txt"
    path.write_text(SCHEMA)
    return str(path)


def test_cli_lines(schema, capsys):
    code = main(["cuteopts", "-s", schema, "-f", "lines", "--", "prog", "-a", "Test", "in.txt"])
    assert code == 0
    out = capsys.readouterr().out.splitlines()
    assert sorted(out) == ["a=Test", "input=in.txt"]


def test_cli_json(schema, capsys):
    code = main(["cuteopts", "--format", "json", "--schema", schema, "--", "prog", "-o", "x"])
    assert code == 0
    assert json.loads(capsys.readouterr().out) == {"opt": "", "input": "x"}


def test_cli_env(schema, capsys):
    code = main(["cuteopts", "-s", schema, "-f", "env", "--", "prog", "-a", "it's", "x"])
    assert code == 0
    out = capsys.readouterr().out.splitlines()
    assert sorted(out) == ["A='it'\"'\"'s'", "INPUT=x"]


def test_cli_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("v/verbose\n"))
    code = main(["cuteopts", "-s", "-", "-f", "lines", "--", "prog", "--verbose"])
    assert code == 0
    assert capsys.readouterr().out.strip() == "verbose="


def test_cli_rejected(schema, capsys):
    code = main(["cuteopts", "-s", schema, "--", "prog", "-z"])
    assert code == 1
    captured = capsys.readouterr()
    assert "Invalid argument 'z'" in captured.err
    assert "Usage: prog [-o, --opt] [-a <a>] <input>" in captured.err


def test_cli_missing_positional(schema, capsys):
    assert main(["cuteopts", "-s", schema, "--", "prog"]) == 1
    assert "Missing argument for 'input'" in capsys.readouterr().err


def test_cli_missing_schema(capsys):
    assert main(["cuteopts", "--", "prog"]) == 1
    captured = capsys.readouterr()
    assert "Missing argument for 'schema'" in captured.err
    assert f"Usage: {const.ARGV0}" in captured.err


def test_cli_unreadable_schema(tmp_path, capsys):
    assert main(["cuteopts", "-s", str(tmp_path / "nope"), "--", "prog"]) == 1
    assert "Could not read schema" in capsys.readouterr().err


def test_cli_bad_schema(tmp_path, capsys):
    path = tmp_path / "schema.txt"
    path.write_text("ab/opt\n")
    assert main(["cuteopts", "-s", str(path), "--", "prog"]) == 1
    assert "Invalid declaration 'ab/opt'" in capsys.readouterr().err


def test_cli_bad_format(schema, capsys):
    assert main(["cuteopts", "-s", schema, "-f", "xml", "--", "prog", "x"]) == 1
    assert "Invalid argument 'xml'" in capsys.readouterr().err


def test_cli_own_args_rejected(capsys):
    assert main(["cuteopts", "-q"]) == 1
    assert "Invalid argument 'q'" in capsys.readouterr().err


def test_cli_help(capsys):
    assert main(["cuteopts", "-h"]) == 0
    out = capsys.readouterr().out
    assert const.ARGV0 in out
    assert "--schema <schema>" in out


def test_cli_version(capsys):
    assert main(["cuteopts", "-V"]) == 0
    assert const.VERSION_STR in capsys.readouterr().out


def test_cli_schema_help(schema, capsys):
    assert main(["cuteopts", "-H", "-s", schema, "--", "prog"]) == 0
    out = capsys.readouterr().out
    assert "Files" in out
    assert "The input file" in out


def test_render_names():
    res = Matches({"dry-run": "", "out": "a b"})
    assert render(res, "env") == "DRY_RUN=''\nOUT='a b'"
    assert render(res, "lines") == "dry-run=\nout=a b"


def test_cli_format_from_environment(schema, monkeypatch, capsys):
    monkeypatch.setenv(const.FORMAT_ENV, "json")
    assert main(["cuteopts", "-s", schema, "--", "prog", "-o", "x"]) == 0
    assert json.loads(capsys.readouterr().out) == {"opt": "", "input": "x"}


def test_cli_format_flag_beats_environment(schema, monkeypatch, capsys):
    monkeypatch.setenv(const.FORMAT_ENV, "json")
    assert main(["cuteopts", "-s", schema, "-f", "lines", "--", "prog", "x"]) == 0
    assert capsys.readouterr().out.strip() == "input=x"


def test_cli_logs_failures(schema, tmp_path, caplog):
    assert main(["cuteopts", "-s", schema, "--", "prog", "-z"]) == 1
    assert any(r.levelno == logging.ERROR for r in caplog.records)

    caplog.clear()
    assert main(["cuteopts", "-s", str(tmp_path / "nope"), "--", "prog"]) == 1
    assert any(r.levelno == logging.ERROR for r in caplog.records)


def test_cli_verbose_is_known_before_matching():
    assert isVerbose(["cuteopts", "-v"])
    assert isVerbose(["cuteopts", "--verbose", "-s", "x"])
    assert isVerbose(["cuteopts", "-Hv"])
    assert not isVerbose(["cuteopts", "-s", "x"])
    assert not isVerbose(["cuteopts", "--version"])
    assert not isVerbose([])
