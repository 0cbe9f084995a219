"""Tests for the Git class."""

import logging
import os
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from gitchain.git import Git


@pytest.fixture(autouse=True)
def no_log_dir(monkeypatch):
    """Disable the command history file unless a test enables it."""
    monkeypatch.delenv("GITCHAIN_LOG_DIR", raising=False)


class TestRun:
    """Tests for Git.run."""

    @patch("subprocess.run")
    def test_prepends_git_to_command(self, mock_run):
        """Git command should be prepended to args."""
        mock_run.return_value = MagicMock(returncode=0)
        Git.run(["status"])
        mock_run.assert_called_once()
        call_args = mock_run.call_args
        assert call_args[0][0] == ["git", "status"]

    @patch("subprocess.run")
    def test_does_not_mutate_args(self, mock_run):
        """The caller's argument list should be left untouched."""
        mock_run.return_value = MagicMock(returncode=0)
        args = ["log", "--oneline"]
        Git.run(args)
        assert args == ["log", "--oneline"]

    @patch("subprocess.run")
    def test_passes_absolute_cwd(self, mock_run):
        """An absolute cwd should be passed through."""
        mock_run.return_value = MagicMock(returncode=0)
        cwd = Path("/test/dir")
        Git.run(["status"], cwd=cwd)
        call_args = mock_run.call_args
        assert call_args[1]["cwd"] == cwd

    @patch("subprocess.run")
    def test_resolves_relative_cwd(self, mock_run):
        """A relative cwd should be resolved against the process cwd."""
        mock_run.return_value = MagicMock(returncode=0)
        Git.run(["status"], cwd="sub")
        assert mock_run.call_args[1]["cwd"] == Path.cwd() / "sub"

    @patch("subprocess.run")
    def test_cwd_none_by_default(self, mock_run):
        """cwd should default to None."""
        mock_run.return_value = MagicMock(returncode=0)
        Git.run(["status"])
        assert mock_run.call_args[1]["cwd"] is None

    @patch("subprocess.run")
    def test_check_false_by_default(self, mock_run):
        """check parameter should be False by default."""
        mock_run.return_value = MagicMock(returncode=0)
        Git.run(["status"])
        call_args = mock_run.call_args
        assert call_args[1]["check"] is False

    @patch("subprocess.run")
    def test_check_true_when_specified(self, mock_run):
        """check parameter should be passed through when True."""
        mock_run.return_value = MagicMock(returncode=0)
        Git.run(["status"], check=True)
        call_args = mock_run.call_args
        assert call_args[1]["check"] is True

    @patch("subprocess.run")
    def test_capture_output_enabled(self, mock_run):
        """capture_output should be enabled."""
        mock_run.return_value = MagicMock(returncode=0)
        Git.run(["status"])
        call_args = mock_run.call_args
        assert call_args[1]["capture_output"] is True

    @patch("subprocess.run")
    def test_decodes_utf8_text(self, mock_run):
        """Output should be decoded as UTF-8 text."""
        mock_run.return_value = MagicMock(returncode=0)
        Git.run(["status"])
        call_args = mock_run.call_args
        assert call_args[1]["text"] is True
        assert call_args[1]["encoding"] == "utf-8"

    @patch("subprocess.run")
    def test_logs_command_at_debug(self, mock_run, caplog):
        """Each command should be logged at DEBUG before it runs."""
        mock_run.return_value = MagicMock(returncode=0)
        with caplog.at_level(logging.DEBUG, logger="gitchain.git"):
            Git.run(["status", "--short"])
        assert "Running: git status --short" in caplog.text

    @patch("subprocess.run", side_effect=FileNotFoundError("git"))
    def test_spawn_failure_propagates(self, mock_run):
        """A missing executable should raise."""
        with pytest.raises(FileNotFoundError):
            Git.run(["status"])

    @patch("subprocess.run", side_effect=UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte"))
    def test_decode_failure_propagates(self, mock_run):
        """Undecodable output should raise."""
        with pytest.raises(UnicodeDecodeError):
            Git.run(["show"])

    @patch("subprocess.run", side_effect=subprocess.CalledProcessError(1, "git"))
    def test_check_raises(self, mock_run):
        """check=True failures should propagate."""
        with pytest.raises(subprocess.CalledProcessError):
            Git.run(["status"], check=True)


class TestCommandHistory:
    """Tests for the optional commands.log history."""

    @patch("subprocess.run")
    def test_no_history_without_log_dir(self, mock_run, tmp_path):
        """Nothing should be written when GITCHAIN_LOG_DIR is unset."""
        mock_run.return_value = MagicMock(returncode=0)
        with patch("gitchain.git.log_command") as mock_log:
            Git.run(["status"])
        mock_log.assert_not_called()

    @patch("subprocess.run")
    def test_history_written_with_log_dir(self, mock_run, tmp_path):
        """Each run should be appended to commands.log."""
        mock_run.return_value = MagicMock(returncode=1)
        with patch.dict(os.environ, {"GITCHAIN_LOG_DIR": str(tmp_path)}):
            Git.run(["status", "--short"])

        content = (tmp_path / "commands.log").read_text()
        assert content.endswith("] 1 git status --short\n")
