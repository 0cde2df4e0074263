"""Tests for the command-line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import structlog

from brainy.cli import create_parser, format_parse_result, main
from brainy.parser import parse


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch):
    """Keep a developer's .brainy/config.yaml out of the tests.

    main() configures structlog globally; undo it so later tests do not log
    to a closed capture stream.
    """
    monkeypatch.chdir(tmp_path)
    yield tmp_path
    structlog.reset_defaults()


def write_playbook(directory: Path, text: str) -> Path:
    path = directory / "notes.md"
    path.write_text(text, encoding="utf-8")
    return path


# =============================================================================
# Parser Tests
# =============================================================================


class TestArgumentParser:
    def test_run_arguments(self) -> None:
        args = create_parser().parse_args(["run", "notes.md", "--provider", "echo", "--model", "m"])

        assert args.command == "run"
        assert args.file == "notes.md"
        assert args.provider == "echo"
        assert args.model == "m"

    def test_no_command(self, capsys) -> None:
        assert main([]) == 1


# =============================================================================
# parse Command Tests
# =============================================================================


class TestParseCommand:
    """Tests for `brainy parse`."""

    def test_text_output(self, tmp_path: Path, capsys) -> None:
        path = write_playbook(tmp_path, '# Notes\n@task --prompt "Summarize"\n')

        assert main(["parse", str(path)]) == 0

        out = capsys.readouterr().out
        assert "Blocks (2):" in out
        assert '[2] @task --prompt "Summarize"' in out

    def test_json_output(self, tmp_path: Path, capsys) -> None:
        path = write_playbook(tmp_path, "@model --id gpt-4.1\n")

        assert main(["parse", str(path), "--json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["blocks"][0]["name"] == "model"
        assert data["errors"] == []

    def test_critical_errors_exit_non_zero(self, tmp_path: Path, capsys) -> None:
        path = write_playbook(tmp_path, "@\n")

        assert main(["parse", str(path)]) == 1
        assert "INVALID_ANNOTATION" in capsys.readouterr().out

    def test_missing_file(self, tmp_path: Path, capsys) -> None:
        assert main(["parse", str(tmp_path / "missing.md")]) == 1
        assert "File not found" in capsys.readouterr().err

    def test_format_parse_result(self) -> None:
        text = format_parse_result(parse("intro\n```bash\nls\n```\n"))

        assert "[1] plainText: intro" in text
        assert "[2-4] plainCodeBlock: ls" in text


# =============================================================================
# run Command Tests
# =============================================================================


class TestRunCommand:
    """Tests for `brainy run` with the offline echo provider."""

    def test_run_prints_context(self, tmp_path: Path, capsys) -> None:
        path = write_playbook(tmp_path, 'Background\n@task --prompt "hi"\n')

        assert main(["run", str(path), "--provider", "echo", "--model", "m"]) == 0

        out = capsys.readouterr().out
        assert "[agent] Background" in out
        assert "[user] hi" in out
        assert "[assistant] [m] hi" in out

    def test_run_json(self, tmp_path: Path, capsys) -> None:
        path = write_playbook(tmp_path, "@context research\n")

        assert main(["run", str(path), "--provider", "echo", "--json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["success"] is True
        assert data["final_state"] == "idle"

    def test_workspace_defaults_to_playbook_directory(self, tmp_path: Path) -> None:
        playbook_dir = tmp_path / "docs"
        playbook_dir.mkdir()
        path = write_playbook(playbook_dir, '@file --action write --path "out.txt" --content "done"\n')

        assert main(["run", str(path), "--provider", "echo"]) == 0
        assert (playbook_dir / "out.txt").read_text() == "done"

    def test_input_reads_stdin(self, tmp_path: Path, monkeypatch, capsys) -> None:
        monkeypatch.setattr("builtins.input", lambda prompt: "Ada")
        path = write_playbook(
            tmp_path, '@input --prompt "Name" --variable who\n@task --prompt "Hi {{who}}"\n'
        )

        assert main(["run", str(path), "--provider", "echo", "--model", "m"]) == 0
        assert "[assistant] [m] Hi Ada" in capsys.readouterr().out

    def test_failed_step_exit_code(self, tmp_path: Path, capsys) -> None:
        path = write_playbook(tmp_path, "ok\n@file --action read --path missing.txt\n")

        assert main(["run", str(path), "--provider", "echo"]) == 1
        assert "Failed at line 2" in capsys.readouterr().err

    def test_critical_errors_block_run(self, tmp_path: Path, capsys) -> None:
        path = write_playbook(tmp_path, "```bash\nls\n")

        assert main(["run", str(path), "--provider", "echo"]) == 1
        err = capsys.readouterr().err
        assert "critical parse errors" in err
        assert "line 1: Unclosed code block detected." in err

    def test_bad_config(self, tmp_path: Path, capsys) -> None:
        path = write_playbook(tmp_path, "text\n")

        assert main(["--config", str(tmp_path / "missing.yaml"), "run", str(path)]) == 1
        assert "Configuration error" in capsys.readouterr().err


def test_list_skills(capsys) -> None:
    assert main(["list-skills"]) == 0

    out = capsys.readouterr().out
    assert "@task" in out
    assert "--prompt (required)" in out
