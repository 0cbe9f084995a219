import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path

UTC_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

logger = logging.getLogger("gitchain")


class LoggerOut:
    MAX_DISPLAY_LENGTH = 80
    LOG_MAX_BYTES = 5 * 1024 * 1024
    LOG_BACKUP_COUNT = 3

    def __init__(self, logs_dir=None):
        self.logs_dir = Path(logs_dir) if logs_dir else Path.cwd() / "logs"
        self.stdlog = logger

    @staticmethod
    def truncate_for_display(text):
        max_len = LoggerOut.MAX_DISPLAY_LENGTH
        head = text[:max_len + 1]
        endline = head.find("\n")
        if endline != -1:
            return f"{text[:endline]}..."
        if len(head) > max_len:
            return f"{text[:max_len]}..."
        return text

    @staticmethod
    def write_log(logfile, msg):
        logfile = Path(logfile)
        logfile.parent.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now(timezone.utc).strftime(UTC_FORMAT)
        with open(logfile, "a") as f:
            f.write(f"[{timestamp}] {msg}\n")

    def setup(self, level=logging.INFO):
        self.stdlog.setLevel(level)
        self.stdlog.propagate = False
        # Already configured
        if self.stdlog.handlers:
            return

        self.logs_dir.mkdir(parents=True, exist_ok=True)

        console = logging.StreamHandler(sys.__stdout__)
        console.setFormatter(logging.Formatter("%(message)s"))
        self.stdlog.addHandler(console)

        file_handler = RotatingFileHandler(
            self.logs_dir / "gitchain.log",
            maxBytes=self.LOG_MAX_BYTES,
            backupCount=self.LOG_BACKUP_COUNT,
        )
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(message)s")
        )
        self.stdlog.addHandler(file_handler)


def setup_logging(logs_dir=None, level=logging.INFO):
    LoggerOut(logs_dir).setup(level)


def truncate_for_display(text):
    return LoggerOut.truncate_for_display(text)


def log_command(logfile, command, returncode):
    LoggerOut.write_log(logfile, f"{returncode} {command}")
