"""
Shared pytest fixtures for scaffold-cli tests.

Provides throwaway git repositories, an isolated failure logger and a
capturing rich console.
"""

import io
import os
import subprocess
from pathlib import Path
from typing import Callable, Generator

import pytest
from rich.console import Console

from scaffold_cli.utils.exception_logger import ExceptionLogger


def _git(repo: Path, *args: str, env=None) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=repo,
        check=True,
        capture_output=True,
        text=True,
        env=env,
    )
    return result.stdout.strip()


@pytest.fixture(autouse=True)
def isolated_exception_logger(tmp_path) -> Generator[ExceptionLogger, None, None]:
    """Point the failure logger at a temporary directory for every test."""
    ExceptionLogger._instance = None
    logger = ExceptionLogger.initialize(log_dir=tmp_path / "logs")
    yield logger
    ExceptionLogger._instance = None


@pytest.fixture
def capture_console() -> Console:
    """Wide, colourless console writing to an in-memory buffer."""
    return Console(file=io.StringIO(), width=200, color_system=None)


@pytest.fixture
def git() -> Callable[..., str]:
    """Run a git command in a repository and return its stripped stdout."""
    return _git


@pytest.fixture
def git_repo(tmp_path) -> Path:
    """Empty git repository with a local identity configured."""
    repo = tmp_path / "repo"
    repo.mkdir()
    _git(repo, "init", "-q")
    _git(repo, "config", "user.name", "Test User")
    _git(repo, "config", "user.email", "test@example.com")
    _git(repo, "config", "commit.gpgsign", "false")
    return repo


@pytest.fixture
def commit_as() -> Callable[[Path, str, str, str], str]:
    """Create a commit authored and committed by ``name <email>``; returns its id."""

    def _commit(repo: Path, filename: str, name: str, email: str) -> str:
        (repo / filename).write_text(f"{filename}\n")
        _git(repo, "add", filename)
        env = dict(os.environ)
        env.update(
            {
                "GIT_AUTHOR_NAME": name,
                "GIT_AUTHOR_EMAIL": email,
                "GIT_COMMITTER_NAME": name,
                "GIT_COMMITTER_EMAIL": email,
            }
        )
        _git(repo, "commit", "-q", "-m", f"Add {filename}", env=env)
        return _git(repo, "rev-parse", "HEAD")

    return _commit
