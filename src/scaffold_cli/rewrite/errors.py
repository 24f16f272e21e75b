"""Exceptions raised by the history rewrite command."""

from typing import Sequence


class RewriteValidationError(ValueError):
    """Base exception for rejected rewrite parameters."""

    pass


class MissingFieldError(RewriteValidationError):
    """Raised when one or more required fields are empty."""

    def __init__(self, fields: Sequence[str], message: str = ""):
        self.fields = list(fields)
        super().__init__(
            message or f"Missing required field(s): {', '.join(self.fields)}"
        )


class EmptyHashListError(RewriteValidationError):
    """Raised when the commit hash input contains only separators."""

    def __init__(self, raw_input: str):
        self.raw_input = raw_input
        super().__init__("Please provide at least one commit hash.")


class RewritePreconditionError(Exception):
    """Base exception for environment problems detected before prompting."""

    pass


class GitNotFoundError(RewritePreconditionError):
    """Raised when the git executable cannot be resolved on PATH."""

    def __init__(self, executable: str = "git"):
        self.executable = executable
        super().__init__(
            f"Error: `{executable}` is not installed or not in your PATH."
        )


class NotAGitRepositoryError(RewritePreconditionError):
    """Raised when the target directory is not inside a git work tree."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Error: {path} is not a git repository.")
