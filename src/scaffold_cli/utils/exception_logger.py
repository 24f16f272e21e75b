"""Centralized failure logger for scaffold-cli.

Writes one JSON entry per failure with:
- Timestamp and thread name
- Exception type, message and stack trace
- Command context (git command line, exit code, captured output)

Entries go to ``~/.scaffold-cli/logs/error_<timestamp>_<pid>.log`` so that
nothing is written into the repository being rewritten.
"""

import json
import logging
import os
import threading
import traceback
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict, Any

DEFAULT_LOG_DIR = Path.home() / ".scaffold-cli" / "logs"

logger = logging.getLogger(__name__)


class ExceptionLogger:
    """Process-wide failure logger (singleton)."""

    _instance: Optional["ExceptionLogger"] = None
    log_file_path: Optional[Path] = None

    def __init__(self, log_file_path: Path):
        self.log_file_path = log_file_path

    @classmethod
    def initialize(cls, log_dir: Optional[Path] = None) -> "ExceptionLogger":
        """Initialize the global logger (idempotent).

        The log file itself is created lazily on the first entry, so runs
        without failures leave no files behind. Tests should reset
        ``cls._instance = None`` when they need a fresh instance.

        Args:
            log_dir: Directory for log files (default ~/.scaffold-cli/logs)

        Returns:
            Initialized ExceptionLogger instance (singleton)
        """
        if cls._instance is not None:
            return cls._instance

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_dir = log_dir or DEFAULT_LOG_DIR
        instance = cls(log_dir / f"error_{timestamp}_{os.getpid()}.log")
        cls._instance = instance
        return instance

    @classmethod
    def get_instance(cls) -> Optional["ExceptionLogger"]:
        return cls._instance

    def log_exception(
        self,
        exception: BaseException,
        thread_name: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Append an entry for ``exception`` with optional context.

        Logging problems (unwritable home directory and the like) never
        interrupt the command that is reporting the failure.
        """
        if not self.log_file_path:
            return

        log_entry = {
            "timestamp": datetime.now().isoformat(),
            "thread": thread_name or threading.current_thread().name,
            "exception_type": type(exception).__name__,
            "exception_message": str(exception),
            "stack_trace": "".join(
                traceback.format_exception(
                    type(exception), exception, exception.__traceback__
                )
            ),
            "context": context or {},
        }

        try:
            self.log_file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.log_file_path, "a") as f:
                f.write(json.dumps(log_entry, indent=2))
                f.write("\n---\n")
        except OSError as e:
            logger.debug("Could not write failure log %s: %s", self.log_file_path, e)
