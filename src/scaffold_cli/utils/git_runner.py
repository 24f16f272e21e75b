"""
Git command runner with dubious ownership handling.

Commands run from an argument vector (never through a shell) with
safe.directory set for the target repository, so git keeps working when the
repository owner differs from the current user (sudo, containers, CI).
"""

import os
import shutil
import subprocess
from pathlib import Path
from typing import Dict, List, Optional


def find_git_executable(executable: str = "git") -> Optional[str]:
    """Resolve the git executable on PATH.

    Returns:
        Absolute path to the executable, or None if it cannot be found
    """
    return shutil.which(executable)


def get_git_environment(project_dir: Path) -> Dict[str, str]:
    """
    Build the environment for git commands run against ``project_dir``.

    Adds safe.directory through GIT_CONFIG_COUNT/KEY/VALUE at index 0 and
    shifts any GIT_CONFIG_* entries already present in the caller's
    environment up by one.

    Args:
        project_dir: Path to the repository

    Returns:
        Dictionary of environment variables for git commands
    """
    env = os.environ.copy()

    env["GIT_CONFIG_KEY_0"] = "safe.directory"
    env["GIT_CONFIG_VALUE_0"] = str(project_dir.resolve())

    config_count = 1
    for key in os.environ:
        if not key.startswith("GIT_CONFIG_KEY_"):
            continue
        idx = key.replace("GIT_CONFIG_KEY_", "")
        if not idx.isdigit():
            continue
        new_idx = int(idx) + 1
        env[f"GIT_CONFIG_KEY_{new_idx}"] = os.environ[key]
        if f"GIT_CONFIG_VALUE_{idx}" in os.environ:
            env[f"GIT_CONFIG_VALUE_{new_idx}"] = os.environ[f"GIT_CONFIG_VALUE_{idx}"]
        config_count = max(config_count, new_idx + 1)

    env["GIT_CONFIG_COUNT"] = str(config_count)

    return env


def run_git_command(
    cmd: List[str],
    cwd: Path,
    check: bool = True,
    capture_output: bool = True,
    text: bool = True,
    timeout: Optional[float] = None,
    **kwargs,
) -> subprocess.CompletedProcess:
    """
    Run a git command with proper environment handling.

    Args:
        cmd: Git command as a list (e.g., ["git", "status"]); the first
            element may be a full path to the git executable
        cwd: Working directory for the command
        check: Whether to raise CalledProcessError on non-zero exit
        capture_output: Whether to capture stdout and stderr
        text: Whether to decode output as text
        timeout: Optional timeout in seconds
        **kwargs: Additional arguments to pass to subprocess.run; an ``env``
            mapping is merged over the git environment

    Returns:
        CompletedProcess instance with the command result

    Raises:
        subprocess.CalledProcessError: If check=True and command fails
        subprocess.TimeoutExpired: If timeout is exceeded
    """
    if not cmd or Path(cmd[0]).stem.lower() != "git":
        raise ValueError("Command must start with 'git'")

    env = get_git_environment(cwd)

    if "env" in kwargs:
        env.update(kwargs.pop("env"))

    return subprocess.run(
        cmd,
        cwd=cwd,
        check=check,
        capture_output=capture_output,
        text=text,
        timeout=timeout,
        env=env,
        **kwargs,
    )


def get_repository_root(
    project_dir: Path, git_executable: str = "git"
) -> Optional[Path]:
    """
    Find the top level of the work tree containing a directory.

    Args:
        project_dir: Path inside the work tree
        git_executable: Name or path of the git executable

    Returns:
        Top-level directory of the work tree, or None when ``project_dir``
        is not inside one
    """
    try:
        result = run_git_command(
            [git_executable, "rev-parse", "--show-toplevel"],
            cwd=project_dir,
            check=True,
        )
    except (subprocess.CalledProcessError, FileNotFoundError, NotADirectoryError):
        return None

    toplevel = result.stdout.strip()
    return Path(toplevel) if toplevel else None
