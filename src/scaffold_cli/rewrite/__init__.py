"""Commit-author history rewriting on top of git filter-branch."""

from .errors import (
    EmptyHashListError,
    GitNotFoundError,
    MissingFieldError,
    NotAGitRepositoryError,
    RewritePreconditionError,
    RewriteValidationError,
)
from .filter_script import build_filter_script, parse_commit_hashes
from .models import (
    ExecutorState,
    FilterScript,
    RewriteMode,
    RewriteOutcome,
    RewriteRequest,
)
from .service import HistoryRewriteService, check_rewrite_preconditions

__all__ = [
    "EmptyHashListError",
    "ExecutorState",
    "FilterScript",
    "GitNotFoundError",
    "HistoryRewriteService",
    "MissingFieldError",
    "NotAGitRepositoryError",
    "RewriteMode",
    "RewriteOutcome",
    "RewritePreconditionError",
    "RewriteRequest",
    "RewriteValidationError",
    "build_filter_script",
    "check_rewrite_preconditions",
    "parse_commit_hashes",
]
