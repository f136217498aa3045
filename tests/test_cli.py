"""Tests for the toonify command line."""

import io
import json
import sys
from pathlib import Path

import pytest

# Add src to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from toonify import __version__
from toonify.cli import main


def run(argv, stdin=""):
    """Run the CLI, returning (exit code, stdout, stderr)."""
    out, err = io.StringIO(), io.StringIO()
    code = main(argv, stdin=io.StringIO(stdin), stdout=out, stderr=err)
    return code, out.getvalue(), err.getvalue()


class TestEncode:
    def test_stdin(self):
        code, out, err = run(["encode"], '{"name": "Alice", "age": 30}')
        assert code == 0
        assert out == "name: Alice\nage: 30\n"
        assert err == ""

    def test_tabular(self):
        code, out, _ = run(["encode", "-"], '[{"id": 1}, {"id": 2}]')
        assert code == 0
        assert out == "[2]{id}:\n  1\n  2\n"

    def test_delimiter_and_indent(self):
        code, out, _ = run(
            ["encode", "--delimiter", "pipe", "--indent", "4"],
            '{"t": [{"a": 1, "b": "x"}]}',
        )
        assert code == 0
        assert out == "t:\n    [1|]{a,b}:\n        1|x\n"

    def test_file(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text('{"ok": true}', encoding="utf-8")
        code, out, _ = run(["encode", str(path)])
        assert code == 0
        assert out == "ok: true\n"

    def test_invalid_json(self):
        code, out, err = run(["encode"], "{not json")
        assert code == 1
        assert out == ""
        assert err.startswith("toonify: invalid JSON")


class TestDecode:
    def test_file(self, tmp_path):
        path = tmp_path / "data.toon"
        path.write_text("users:\n  [1]{id,name}:\n    1,Zoë\n", encoding="utf-8")
        code, out, _ = run(["decode", str(path)])
        assert code == 0
        assert json.loads(out) == {"users": [{"id": 1, "name": "Zoë"}]}
        assert "Zoë" in out

    def test_indent(self):
        code, out, _ = run(["decode", "--indent", "4"], "a:\n    b: 1")
        assert code == 0
        assert json.loads(out) == {"a": {"b": 1}}

    def test_syntax_error(self):
        code, out, err = run(["decode"], "[1]{a}:\n  1,2")
        assert code == 1
        assert out == ""
        assert err.startswith("toonify: line 2, column 2: Field count mismatch")

    def test_lenient(self):
        code, _, err = run(["decode"], "a:\n\tb: 1")
        assert code == 1
        assert "Tab in indentation" in err

        code, out, _ = run(["decode", "--lenient"], "a:\n\tb: 1")
        assert code == 0
        assert json.loads(out) == {"a": None, "b": 1}

    def test_missing_file(self, tmp_path):
        code, _, err = run(["decode", str(tmp_path / "missing.toon")])
        assert code == 1
        assert err.startswith("toonify: ")


class TestArguments:
    def test_command_is_required(self):
        with pytest.raises(SystemExit) as exc_info:
            run([])
        assert exc_info.value.code == 2

    def test_unknown_delimiter(self):
        with pytest.raises(SystemExit) as exc_info:
            run(["encode", "--delimiter", "semicolon"])
        assert exc_info.value.code == 2

    def test_invalid_indent(self):
        with pytest.raises(SystemExit) as exc_info:
            run(["decode", "--indent", "0"])
        assert exc_info.value.code == 2

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            run(["--version"])
        assert exc_info.value.code == 0
        assert capsys.readouterr().out.strip() == f"toonify {__version__}"
