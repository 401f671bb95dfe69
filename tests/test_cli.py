"""
CLI: test_cli.py

Drives ``master.main`` in-process and checks the contract callers see:
  - exit 0 and a JSON file on success, with a summary on stdout
  - exit 2 with a one-line "error:" message for configuration errors,
    and no output file
  - exit 1 for conversion failures
  - argparse rejects a missing path and unknown separators
"""

from __future__ import annotations

import json

import pytest

from master import _build_config, _build_parser, main


def run_cli(*argv: str) -> int:
    with pytest.raises(SystemExit) as exc_info:
        main(list(argv))
    return exc_info.value.code


class TestParser:
    def test_defaults(self):
        args = _build_parser().parse_args(["data.csv"])
        assert args.source == "data.csv"
        assert args.separator is None
        assert args.pretty is False
        assert args.verbose is False

    def test_flags(self):
        args = _build_parser().parse_args(
            ["--separator", "semicolon", "--pretty", "-v", "--queue-size", "4", "data.csv"]
        )
        assert args.separator == "semicolon"
        assert args.pretty is True
        assert args.verbose is True
        assert args.queue_size == 4

    def test_missing_source_exits_nonzero(self):
        with pytest.raises(SystemExit) as exc_info:
            _build_parser().parse_args([])
        assert exc_info.value.code != 0

    def test_unknown_separator_exits_nonzero(self):
        with pytest.raises(SystemExit) as exc_info:
            _build_parser().parse_args(["--separator", "tab", "data.csv"])
        assert exc_info.value.code != 0

    def test_build_config_prefers_flags_over_env(self, monkeypatch):
        monkeypatch.setenv("CSVJSON_SEPARATOR", "comma")
        args = _build_parser().parse_args(["--separator", "semicolon", "x.csv"])
        assert _build_config(args).separator == "semicolon"

    def test_build_config_falls_back_to_env(self, monkeypatch):
        monkeypatch.setenv("CSVJSON_PRETTY", "true")
        args = _build_parser().parse_args(["x.csv"])
        assert _build_config(args).pretty is True


class TestMain:
    def test_success(self, tmp_path, capsys):
        path = tmp_path / "people.csv"
        path.write_text("name,age\nAnn,30\nBob\n", encoding="utf-8")
        assert run_cli(str(path)) == 0
        out = json.loads((tmp_path / "people.json").read_text(encoding="utf-8"))
        assert out == [{"name": "Ann", "age": "30"}]
        stdout = capsys.readouterr().out
        assert "SUCCESS" in stdout
        assert "Skipped" in stdout

    def test_semicolon_pretty(self, tmp_path):
        path = tmp_path / "p.csv"
        path.write_text("a;b\n1;2\n", encoding="utf-8")
        assert run_cli("--separator", "semicolon", "--pretty", str(path)) == 0
        text = (tmp_path / "p.json").read_text(encoding="utf-8")
        assert text.startswith("[\n   {")
        assert json.loads(text) == [{"a": "1", "b": "2"}]

    def test_missing_file_exits_2(self, tmp_path, capsys):
        assert run_cli(str(tmp_path / "nope.csv")) == 2
        err = capsys.readouterr().err
        assert err.startswith("error: ")
        assert err.count("\n") == 1
        assert not (tmp_path / "nope.json").exists()

    def test_not_csv_exits_2(self, tmp_path, capsys):
        path = tmp_path / "data.json"
        path.write_text("[]", encoding="utf-8")
        assert run_cli(str(path)) == 2
        assert "is not CSV" in capsys.readouterr().err

    def test_malformed_csv_exits_1(self, tmp_path, capsys):
        path = tmp_path / "bad.csv"
        path.write_text('a,b\n1,"2"x\n', encoding="utf-8")
        assert run_cli(str(path)) == 1
        assert "Malformed row" in capsys.readouterr().err
        assert not (tmp_path / "bad.json").exists()
