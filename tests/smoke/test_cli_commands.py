"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
They don't validate correctness deeply - just that commands work.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

# Project root
PROJECT_ROOT = Path(__file__).parent.parent.parent


def run_cli_command(args: list[str], db_path: Path | None = None, timeout: int = 60) -> tuple[int, str, str]:
    """
    Run a CLI command and return exit code, stdout, stderr.

    Args:
        args: Arguments after 'python -m adaptive_practice.cli.main'
        db_path: SQLite file to use as the database
        timeout: Maximum time to wait

    Returns:
        Tuple of (exit_code, stdout, stderr)
    """
    env = dict(os.environ)
    env["LOG_LEVEL"] = "WARNING"
    env["COLUMNS"] = "200"
    if db_path is not None:
        env["DATABASE_URL"] = f"sqlite:///{db_path}"

    result = subprocess.run(
        [sys.executable, "-m", "adaptive_practice.cli.main", *args],
        cwd=PROJECT_ROOT,
        env=env,
        capture_output=True,
        text=True,
        timeout=timeout,
    )

    return result.returncode, result.stdout, result.stderr


@pytest.fixture
def db_path(tmp_path):
    """Initialized database with a small question bank."""
    path = tmp_path / "practice.db"
    code, _, stderr = run_cli_command(["init-db"], path)
    assert code == 0, f"init-db failed: {stderr}"

    for module in (1, 2):
        for skill in (1, 2):
            for difficulty in (1, 2, 3):
                qid = f"m{module}-s{skill}-d{difficulty}"
                code, _, stderr = run_cli_command(
                    ["add-question", qid, "--module", str(module), "--skill", str(skill),
                     "--difficulty", str(difficulty)],
                    path,
                )
                assert code == 0, f"add-question failed: {stderr}"
    return path


class TestCLIHelp:
    """Test that help commands work."""

    def test_main_help(self):
        """Main help should display without errors."""
        code, stdout, stderr = run_cli_command(["--help"])

        assert code == 0, f"Help failed: {stderr}"
        assert "select" in stdout
        assert "drill" in stdout

    @pytest.mark.parametrize("command", ["select", "drill", "complete-drill", "next", "record", "confidence", "skills"])
    def test_command_help(self, command):
        code, stdout, stderr = run_cli_command([command, "--help"])

        assert code == 0, f"{command} help failed: {stderr}"


class TestCLIConfidence:
    """Test the confidence command (no database needed)."""

    def test_json_output(self):
        code, stdout, stderr = run_cli_command(
            ["confidence", "--correct", "--time", "60", "--expected", "60", "--difficulty", "10", "--json"]
        )

        assert code == 0, f"confidence failed: {stderr}"
        assert json.loads(stdout)["confidence_score"] == 1.0

    def test_invalid_input_exits_non_zero(self):
        code, stdout, stderr = run_cli_command(["confidence", "--time=-5"])

        assert code == 1
        assert "time_taken_seconds" in stdout


class TestCLISession:
    """Test selection and recording against a temporary database."""

    def test_select_json(self, db_path):
        code, stdout, stderr = run_cli_command(["select", "alice", "--size", "5", "--json"], db_path)

        assert code == 0, f"select failed: {stderr}"
        results = json.loads(stdout)
        assert len(results) == 5
        assert len({r["question_id"] for r in results}) == 5

    def test_record_then_skills(self, db_path):
        code, stdout, stderr = run_cli_command(
            ["record", "alice", "m1-s1-d2", "--correct", "--time", "45"], db_path
        )
        assert code == 0, f"record failed: {stderr}"
        assert "mastery" in stdout

        code, stdout, stderr = run_cli_command(["skills", "alice"], db_path)
        assert code == 0, f"skills failed: {stderr}"
        assert "Skills for alice" in stdout

    def test_record_unknown_question(self, db_path):
        code, stdout, stderr = run_cli_command(
            ["record", "alice", "does-not-exist", "--time", "10"], db_path
        )

        assert code == 1
        assert "Question not found" in stdout

    def test_drill_json(self, db_path):
        code, stdout, stderr = run_cli_command(["drill", "alice", "1", "--size", "4", "--json"], db_path)

        assert code == 0, f"drill failed: {stderr}"
        results = json.loads(stdout)
        assert len(results) == 4
        assert all(r["category"] == "adaptive" for r in results)

    def test_next_json(self, db_path):
        code, stdout, stderr = run_cli_command(["next", "alice", "--json"], db_path)

        assert code == 0, f"next failed: {stderr}"
        assert len(json.loads(stdout)) == 1


class TestCLIDrillCycle:
    """Test that a recorded drill drives the next one."""

    def test_completed_drill_raises_next_difficulty(self, db_path):
        code, stdout, stderr = run_cli_command(["drill", "alice", "1", "--size", "4", "--json"], db_path)
        assert code == 0, f"drill failed: {stderr}"
        first = json.loads(stdout)

        answered = []
        for r in first:
            answered += ["--correct", r["question_id"]]
        code, stdout, stderr = run_cli_command(["complete-drill", "alice", "1", *answered], db_path)
        assert code == 0, f"complete-drill failed: {stderr}"
        assert "100%" in stdout

        code, stdout, stderr = run_cli_command(["drill", "alice", "1", "--size", "4", "--json"], db_path)
        assert code == 0, f"second drill failed: {stderr}"
        second = json.loads(stdout)

        assert second
        assert not {r["question_id"] for r in second} & {r["question_id"] for r in first}
        assert min(r["difficulty"] for r in second) > max(r["difficulty"] for r in first)

    def test_complete_drill_unknown_question(self, db_path):
        code, stdout, stderr = run_cli_command(
            ["complete-drill", "alice", "1", "--correct", "does-not-exist"], db_path
        )

        assert code == 1
        assert "Question not found" in stdout

    def test_complete_drill_wrong_module(self, db_path):
        code, stdout, stderr = run_cli_command(
            ["complete-drill", "alice", "1", "--incorrect", "m2-s1-d1"], db_path
        )

        assert code == 1
        assert "belongs to module 2" in stdout


class TestCLIConfig:
    """Test the config command."""

    def test_config_reflects_environment(self, tmp_path):
        code, stdout, stderr = run_cli_command(["config"], tmp_path / "other.db")

        assert code == 0, f"config failed: {stderr}"
        config = json.loads(stdout)
        assert config["database_url"].endswith("other.db")
        assert config["logging"]["level"] == "WARNING"
        assert config["selection"]["drill"]["allocation_window"] == 3
