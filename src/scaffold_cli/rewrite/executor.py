"""
Runs git filter-branch with an environment filter and classifies the result.

One executor runs one rewrite. The call blocks until git exits, with a
spinner on the console for the duration; success or failure comes only
from the exit status.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

from rich.console import Console

from ..utils.exception_logger import ExceptionLogger
from ..utils.git_runner import run_git_command
from .models import ExecutorState, FilterScript, RewriteOutcome

logger = logging.getLogger(__name__)

SQUELCH_WARNING_VAR = "FILTER_BRANCH_SQUELCH_WARNING"
INTERRUPTED_EXIT_CODE = 130
PROGRESS_MESSAGE = "Rewriting commit history... (this may take a while)"


def build_filter_branch_command(
    filter_script: FilterScript, git_executable: str = "git"
) -> List[str]:
    """Argument vector for rewriting identity on all branches and tags.

    ``--force`` runs even when backup refs from an earlier rewrite exist,
    ``--tag-name-filter cat`` keeps tag names and points them at the
    rewritten commits.
    """
    return [
        git_executable,
        "filter-branch",
        "--force",
        "--env-filter",
        filter_script.text,
        "--tag-name-filter",
        "cat",
        "--",
        "--branches",
        "--tags",
    ]


def build_filter_branch_environment(filter_script: FilterScript) -> Dict[str, str]:
    """Extra environment for the child: filter parameters plus warning squelch."""
    env = dict(filter_script.environment)
    # Skips the warning and pause filter-branch shows before it starts
    env[SQUELCH_WARNING_VAR] = "1"
    return env


class RewriteExecutor:
    """Single-use runner for one history rewrite."""

    def __init__(
        self,
        repo_path: Path,
        console: Optional[Console] = None,
        git_executable: str = "git",
    ):
        self.repo_path = Path(repo_path)
        self.console = console or Console()
        self.git_executable = git_executable
        self.state = ExecutorState.IDLE
        self.outcome: Optional[RewriteOutcome] = None

    def execute(self, filter_script: FilterScript) -> RewriteOutcome:
        """Run the rewrite and return its outcome.

        Raises:
            RuntimeError: the executor already ran
        """
        if self.state != ExecutorState.IDLE:
            raise RuntimeError(
                f"Rewrite executor already used (state: {self.state.value})"
            )

        cmd = build_filter_branch_command(filter_script, self.git_executable)
        self.state = ExecutorState.RUNNING
        logger.info("Running git filter-branch in %s", self.repo_path)

        try:
            with self.console.status(PROGRESS_MESSAGE):
                result = run_git_command(
                    cmd,
                    cwd=self.repo_path,
                    check=False,
                    env=build_filter_branch_environment(filter_script),
                )
        except KeyboardInterrupt:
            # subprocess.run kills the child before re-raising
            outcome = RewriteOutcome.failure(
                INTERRUPTED_EXIT_CODE,
                stderr=(
                    "Rewrite interrupted by user. Inspect the repository and the "
                    "backup refs before retrying."
                ),
            )
        except OSError as e:
            outcome = RewriteOutcome.failure(1, stderr=f"Failed to start git: {e}")
        else:
            if result.returncode == 0:
                outcome = RewriteOutcome.success(
                    stdout=result.stdout or "", stderr=result.stderr or ""
                )
            else:
                outcome = RewriteOutcome.failure(
                    result.returncode,
                    stderr=result.stderr or "",
                    stdout=result.stdout or "",
                )

        self.outcome = outcome
        self.state = (
            ExecutorState.SUCCEEDED if outcome.succeeded else ExecutorState.FAILED
        )

        if not outcome.succeeded:
            logger.debug("git filter-branch failed with exit code %s", outcome.exit_code)
            self._log_failure(cmd, outcome)

        return outcome

    def _log_failure(self, cmd: List[str], outcome: RewriteOutcome) -> None:
        exception_logger = ExceptionLogger.get_instance()
        if exception_logger is None:
            return
        exception_logger.log_exception(
            Exception(f"History rewrite failed with exit code {outcome.exit_code}"),
            context={
                "git_command": cmd,
                "cwd": str(self.repo_path),
                "returncode": outcome.exit_code,
                "stdout": outcome.stdout,
                "stderr": outcome.stderr,
            },
        )
