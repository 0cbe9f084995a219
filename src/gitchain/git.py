"""Git process execution for gitchain."""

import logging
import subprocess
from pathlib import Path

from gitchain.config import get_settings
from gitchain.logger_out import log_command

log = logging.getLogger(__name__)


class Git:
    """Git process wrapper."""

    PROGRAM = "git"

    @staticmethod
    def run(args: list[str], cwd: Path | str | None = None, check: bool = False) -> subprocess.CompletedProcess:
        """Run a git command.

        Spawn failures and undecodable output are raised to the caller.

        Args:
            args: Git command arguments (without 'git' prefix)
            cwd: Working directory for the command
            check: Whether to raise on non-zero exit

        Returns:
            CompletedProcess result with stdout/stderr decoded as UTF-8
        """
        command = [Git.PROGRAM] + list(args)
        if cwd is not None:
            cwd = Path(cwd).absolute()

        log.debug("Running: %s", " ".join(command))
        result = subprocess.run(
            command,
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            check=check,
        )

        commands_log = get_settings().commands_log
        if commands_log is not None:
            log_command(commands_log, " ".join(command), result.returncode)
        return result
