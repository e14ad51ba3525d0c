"""Tests for the Typer CLI."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from asmcc.cli import app


def _completed(returncode: int = 0, stdout: bytes = b"") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user configuration and editor settings out of CLI runs."""
    monkeypatch.setattr("asmcc.config.USER_CONFIG_PATH", tmp_path / "absent.toml")
    monkeypatch.delenv("ASMCC_COMPILER", raising=False)
    monkeypatch.setenv("EDITOR", "vim")
    monkeypatch.delenv("VISUAL", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def source_file(tmp_path: Path) -> Path:
    path = tmp_path / "snippet.c"
    path.write_text("int x;\n")
    return path


class TestCompileCommand:
    """Tests for `asmcc compile`."""

    def test_input_file_compiles_without_editor(self, cli_runner, source_file):
        with patch("asmcc.compilation.pipeline.subprocess.run") as mock_run, patch(
            "asmcc.editor.subprocess.call"
        ) as mock_edit:
            mock_run.return_value = _completed(stdout=b"\tret\n")
            result = cli_runner.invoke(app, ["compile", "-l", "c", "-i", str(source_file)])

        assert result.exit_code == 0, result.output
        assert result.stdout.startswith("# Compiled with `clang -xc ")
        assert " " * 8 + "ret" in result.stdout
        mock_edit.assert_not_called()
        assert mock_run.call_count == 1

    def test_working_copy_compiled_not_input(self, cli_runner, source_file):
        with patch("asmcc.compilation.pipeline.subprocess.run") as mock_run, patch("asmcc.editor.subprocess.call"):
            mock_run.return_value = _completed(stdout=b"ret\n")
            cli_runner.invoke(app, ["compile", "-l", "c", "-i", str(source_file)])

        compiled_path = mock_run.call_args.args[0][-3]
        assert compiled_path != str(source_file)
        assert compiled_path.endswith(".c")

    def test_declined_retry_exits_1_without_output(self, cli_runner, source_file):
        with patch("asmcc.compilation.pipeline.subprocess.run") as mock_run, patch("asmcc.editor.subprocess.call"):
            mock_run.return_value = _completed(returncode=1)
            result = cli_runner.invoke(app, ["compile", "-i", str(source_file)], input="n\n")

        assert result.exit_code == 1
        assert "Compiled with" not in result.stdout
        assert mock_run.call_count == 1

    def test_closed_stdin_at_retry_prompt_exits_1(self, cli_runner, source_file):
        with patch("asmcc.compilation.pipeline.subprocess.run") as mock_run, patch("asmcc.editor.subprocess.call"):
            mock_run.return_value = _completed(returncode=1)
            result = cli_runner.invoke(app, ["compile", "-i", str(source_file)], input="")

        assert result.exit_code == 1
        assert not isinstance(result.exception, EOFError)
        assert mock_run.call_count == 1

    def test_missing_editor_still_compiles(self, cli_runner):
        with patch("asmcc.compilation.pipeline.subprocess.run") as mock_run, patch(
            "asmcc.editor.subprocess.call", side_effect=FileNotFoundError(2, "No such file or directory", "vim")
        ):
            mock_run.return_value = _completed(stdout=b"ret\n")
            result = cli_runner.invoke(app, ["compile", "-l", "c"])

        assert result.exit_code == 0, result.output
        assert result.stdout.endswith("ret\n")

    def test_retry_then_success(self, cli_runner, source_file):
        with patch("asmcc.compilation.pipeline.subprocess.run") as mock_run, patch(
            "asmcc.editor.subprocess.call", return_value=0
        ) as mock_edit:
            mock_run.side_effect = [
                _completed(returncode=1),
                _completed(stdout=b"_Z3foov:\n"),
                _completed(stdout=b"foo():\n"),
            ]
            result = cli_runner.invoke(app, ["compile", "-i", str(source_file)], input="y\n")

        assert result.exit_code == 0, result.output
        assert result.stdout.endswith("foo():\n")
        assert mock_edit.call_count == 1
        assert mock_edit.call_args.args[0][0] == "vim"

    def test_editor_opened_without_input(self, cli_runner):
        with patch("asmcc.compilation.pipeline.subprocess.run") as mock_run, patch(
            "asmcc.editor.subprocess.call", return_value=0
        ) as mock_edit:
            mock_run.return_value = _completed(stdout=b"ret\n")
            result = cli_runner.invoke(app, ["compile", "-l", "c"])

        assert result.exit_code == 0, result.output
        edited = mock_edit.call_args.args[0][-1]
        assert edited == mock_run.call_args.args[0][-3]

    def test_out_file(self, cli_runner, source_file, tmp_path):
        out = tmp_path / "out.s"

        with patch("asmcc.compilation.pipeline.subprocess.run") as mock_run, patch("asmcc.editor.subprocess.call"):
            mock_run.return_value = _completed(stdout=b"ret\n")
            result = cli_runner.invoke(app, ["compile", "-l", "c", "-C", "-i", str(source_file), "-o", str(out)])

        assert result.exit_code == 0, result.output
        assert result.stdout == ""
        text = out.read_text()
        assert text.startswith("int x;\n")
        assert text.endswith("ret\n\n*/\n")

    def test_edit_result_opens_output(self, cli_runner, source_file, tmp_path):
        out = tmp_path / "out.s"

        with patch("asmcc.compilation.pipeline.subprocess.run") as mock_run, patch(
            "asmcc.editor.subprocess.call", return_value=0
        ) as mock_edit:
            mock_run.return_value = _completed(stdout=b"ret\n")
            result = cli_runner.invoke(app, ["compile", "-l", "c", "-E", "-i", str(source_file), "-o", str(out)])

        assert result.exit_code == 0, result.output
        mock_edit.assert_called_once_with(["vim", str(out)])

    def test_flag_options_reach_compiler(self, cli_runner, source_file):
        with patch("asmcc.compilation.pipeline.subprocess.run") as mock_run, patch("asmcc.editor.subprocess.call"):
            mock_run.return_value = _completed(stdout=b"ret\n")
            result = cli_runner.invoke(
                app,
                [
                    "compile",
                    "-l", "c",
                    "-O", "2",
                    "-W", "extra,shadow",
                    "-I", "/opt/inc",
                    "-D", "A=1,B",
                    "-U", "B",
                    "-X", "-fno-inline",
                    "--m32",
                    "-g",
                    "-v",
                    "-i", str(source_file),
                ],
            )

        assert result.exit_code == 0, result.output
        argv = mock_run.call_args.args[0]
        assert "-O2" in argv
        assert "-m32" in argv
        assert [a for a in argv if a.startswith("-W")] == ["-Wextra", "-Wshadow"]
        assert argv[argv.index("-I/opt/inc") - 1].endswith("/usr/local/include")
        assert argv[-9:-3] == ["-DA=1", "-DB", "-UB", "-g", "-fno-inline", "-v"]

    def test_emit_llvm_disables_encoding(self, cli_runner, source_file):
        with patch("asmcc.compilation.pipeline.subprocess.run") as mock_run, patch("asmcc.editor.subprocess.call"):
            mock_run.return_value = _completed(stdout=b"define void @f()\n")
            result = cli_runner.invoke(app, ["compile", "-l", "c", "-L", "-S", "-i", str(source_file)])

        assert result.exit_code == 0, result.output
        assert mock_run.call_count == 1
        assert result.stdout.startswith("; Compiled with")

    def test_m32_and_m64_conflict(self, cli_runner, source_file):
        result = cli_runner.invoke(app, ["compile", "--m32", "--m64", "-i", str(source_file)])

        assert result.exit_code == 2

    def test_missing_input_rejected(self, cli_runner, tmp_path):
        result = cli_runner.invoke(app, ["compile", "-i", str(tmp_path / "nope.c")])

        assert result.exit_code == 2


class TestEnvCommand:
    """Tests for `asmcc env`."""

    def test_json_report(self, cli_runner):
        with patch("asmcc.environment.detectors.shutil.which", side_effect=lambda c: f"/usr/bin/{c}"), patch(
            "asmcc.environment.detectors._probe_version", return_value="v1"
        ):
            result = cli_runner.invoke(app, ["env", "--json"])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["editor"] == "vim"
        assert {t["name"] for t in payload["tools"]} == {"compiler", "encoder", "demangler", "editor"}

    def test_missing_compiler_exits_1(self, cli_runner):
        with patch("asmcc.environment.detectors.shutil.which", return_value=None):
            result = cli_runner.invoke(app, ["env"])

        assert result.exit_code == 1
        assert "Missing" in result.stdout
