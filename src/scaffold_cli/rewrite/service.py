"""
History rewrite pipeline.

Order of steps for one invocation:

1. Confirmation gate (declining ends the run with no side effects)
2. Filter-script construction from the validated request
3. git filter-branch execution
4. Outcome report
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from rich.console import Console
from rich.syntax import Syntax

from ..config import RewriteConfig
from ..utils.git_runner import find_git_executable, get_repository_root
from .confirmation import ConfirmationGate
from .errors import GitNotFoundError, NotAGitRepositoryError
from .executor import RewriteExecutor
from .filter_script import build_filter_script
from .models import RewriteOutcome, RewriteRequest
from .report import OutcomeReporter

logger = logging.getLogger(__name__)


class HistoryRewriteService:
    """Runs a validated rewrite request through gate, builder and executor."""

    def __init__(
        self,
        repo_path: Path,
        config: Optional[RewriteConfig] = None,
        console: Optional[Console] = None,
        gate: Optional[ConfirmationGate] = None,
        executor_factory: Optional[Callable[[], RewriteExecutor]] = None,
        show_script: bool = False,
    ):
        self.repo_path = Path(repo_path)
        self.config = config or RewriteConfig()
        self.console = console or Console()
        self.gate = gate or ConfirmationGate(
            self.console, backup_namespace=self.config.backup_namespace
        )
        self.executor_factory = executor_factory or self._default_executor
        self.reporter = OutcomeReporter(
            self.console,
            remote_name=self.config.remote_name,
            backup_namespace=self.config.backup_namespace,
        )
        self.show_script = show_script

    def _default_executor(self) -> RewriteExecutor:
        return RewriteExecutor(
            self.repo_path, self.console, git_executable=self.config.git_executable
        )

    def run(self, request: RewriteRequest) -> Optional[RewriteOutcome]:
        """Execute ``request``.

        Returns:
            The outcome, or None when the user declined at the gate
        """
        if not self.gate.confirm():
            return None

        filter_script = build_filter_script(request)
        if self.show_script:
            self.console.print("Environment filter (values substituted):", style="dim")
            self.console.print(Syntax(filter_script.preview(), "bash"))

        logger.debug("Starting %s rewrite in %s", request.mode.value, self.repo_path)
        outcome = self.executor_factory().execute(filter_script)
        self.reporter.report(outcome)
        return outcome


def check_rewrite_preconditions(repo_path: Path, git_executable: str = "git") -> Path:
    """Verify git is available and ``repo_path`` is inside a work tree.

    git filter-branch only runs from the top level of the work tree, so the
    rewrite targets the returned root rather than ``repo_path`` itself.

    Returns:
        Top-level directory of the work tree containing ``repo_path``

    Raises:
        GitNotFoundError: git cannot be resolved on PATH
        NotAGitRepositoryError: ``repo_path`` is not inside a git work tree
    """
    resolved = find_git_executable(git_executable)
    if resolved is None:
        raise GitNotFoundError(git_executable)
    repo_root = get_repository_root(Path(repo_path), resolved)
    if repo_root is None:
        raise NotAGitRepositoryError(repo_path)
    return repo_root
