"""Data model for commit-author history rewrites."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from .errors import EmptyHashListError, MissingFieldError


class RewriteMode(Enum):
    """Which commits get their identity rewritten."""

    ALL = "all"
    BY_EMAIL = "by-email"
    BY_HASH = "by-hash"

    @property
    def description(self) -> str:
        return _MODE_DESCRIPTIONS[self]


_MODE_DESCRIPTIONS = {
    RewriteMode.ALL: "Rewrite author for ALL commits in history",
    RewriteMode.BY_EMAIL: "Rewrite author for commits from a specific email",
    RewriteMode.BY_HASH: "Rewrite author for specific commits by hash",
}


class ExecutorState(Enum):
    """Lifecycle of a single rewrite execution."""

    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class RewriteRequest:
    """Validated rewrite intent.

    Build instances with :meth:`create`; it is the only place that checks
    required fields, so a request that exists is always complete.
    """

    mode: RewriteMode
    new_name: str
    new_email: str
    old_email: Optional[str] = None
    commit_hashes: Tuple[str, ...] = ()

    @classmethod
    def create(
        cls,
        mode: RewriteMode,
        new_name: Optional[str] = None,
        new_email: Optional[str] = None,
        old_email: Optional[str] = None,
        commit_hashes: Optional[str] = None,
    ) -> "RewriteRequest":
        """Validate raw prompt answers and build a request.

        Raises:
            MissingFieldError: a field required by ``mode`` is empty
            EmptyHashListError: BY_HASH input held only separators
        """
        # filter_script imports this module
        from .filter_script import parse_commit_hashes

        values = {
            "old_email": (old_email or "").strip(),
            "new_name": (new_name or "").strip(),
            "new_email": (new_email or "").strip(),
            # Separator-only hash input is not missing; it fails parsing below
            "commit_hashes": commit_hashes or "",
        }

        required = {
            RewriteMode.ALL: ["new_name", "new_email"],
            RewriteMode.BY_EMAIL: ["old_email", "new_name", "new_email"],
            RewriteMode.BY_HASH: ["new_name", "new_email", "commit_hashes"],
        }[mode]

        missing = [name for name in required if not values[name]]
        if missing:
            if mode == RewriteMode.ALL:
                message = "Author name and email are required. Aborting."
            else:
                message = "All fields are required. Aborting."
            raise MissingFieldError(missing, message)

        hashes: Tuple[str, ...] = ()
        if mode == RewriteMode.BY_HASH:
            hashes = tuple(parse_commit_hashes(values["commit_hashes"]))
            if not hashes:
                raise EmptyHashListError(values["commit_hashes"])

        return cls(
            mode=mode,
            new_name=values["new_name"],
            new_email=values["new_email"],
            old_email=values["old_email"] if mode == RewriteMode.BY_EMAIL else None,
            commit_hashes=hashes,
        )


@dataclass(frozen=True)
class FilterScript:
    """Shell fragment for ``git filter-branch --env-filter``.

    ``text`` only references the variables in ``environment``; the values
    reach the filter through the child process environment.
    """

    text: str
    environment: Dict[str, str] = field(default_factory=dict)

    def preview(self) -> str:
        """Render ``text`` with values substituted, for display only."""
        rendered = self.text
        # Longest names first so no variable is a prefix of another
        for name in sorted(self.environment, key=len, reverse=True):
            rendered = rendered.replace(f"${name}", self.environment[name])
        return rendered


@dataclass(frozen=True)
class RewriteOutcome:
    """Result of one executed rewrite."""

    succeeded: bool
    exit_code: int = 0
    stdout: str = ""
    stderr: str = ""

    @classmethod
    def success(cls, stdout: str = "", stderr: str = "") -> "RewriteOutcome":
        return cls(succeeded=True, exit_code=0, stdout=stdout, stderr=stderr)

    @classmethod
    def failure(
        cls, exit_code: int, stderr: str = "", stdout: str = ""
    ) -> "RewriteOutcome":
        return cls(succeeded=False, exit_code=exit_code, stdout=stdout, stderr=stderr)
