"""Environment configuration for gitchain."""

import os
from pathlib import Path

from dotenv import load_dotenv


# Load environment variables
load_dotenv()

TRUTHY = {"1", "true", "yes", "on"}


class Settings:
    """Settings read from the environment (and .env, if present)."""

    DEBUG_VAR = "GITCHAIN_DEBUG"
    LOG_DIR_VAR = "GITCHAIN_LOG_DIR"

    def __init__(self):
        self.debug = os.environ.get(self.DEBUG_VAR, "").strip().lower() in TRUTHY

        log_dir = os.environ.get(self.LOG_DIR_VAR)
        self.log_dir: Path | None = Path(log_dir).absolute() if log_dir else None

    @property
    def commands_log(self) -> Path | None:
        """Command history file, or None when no log dir is configured."""
        if self.log_dir is None:
            return None
        return self.log_dir / "commands.log"


def get_settings() -> Settings:
    return Settings()
