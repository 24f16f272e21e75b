"""
Environment filter construction for git filter-branch.

git filter-branch evaluates the ``--env-filter`` fragment once per commit in
a shell, with GIT_COMMIT, GIT_AUTHOR_* and GIT_COMMITTER_* describing the
commit being replayed. Exporting new identity values from the fragment
rewrites that commit's metadata while leaving its tree untouched.

User-supplied names, emails and hashes never become part of the fragment
text. The fragment reads them from SCAFFOLD_REWRITE_* variables which the
executor places in the child environment, and every reference is
double-quoted, so shell metacharacters in the values are inert.
"""

import logging
import re
from typing import Dict, List, Sequence

from .models import FilterScript, RewriteMode, RewriteRequest

logger = logging.getLogger(__name__)

NEW_NAME_VAR = "SCAFFOLD_REWRITE_NEW_NAME"
NEW_EMAIL_VAR = "SCAFFOLD_REWRITE_NEW_EMAIL"
OLD_EMAIL_VAR = "SCAFFOLD_REWRITE_OLD_EMAIL"
COMMIT_PATTERN_VAR = "SCAFFOLD_REWRITE_COMMIT_PATTERN"

_HASH_SEPARATORS = re.compile(r"[\s,]+")
# POSIX extended regular expression metacharacters
_ERE_SPECIAL = re.compile(r"([\\.\[\]()*+?{}|^$])")


def parse_commit_hashes(raw: str) -> List[str]:
    """Split commit hash input on whitespace and/or commas.

    Empty tokens are dropped and the input order is kept, so
    ``"abc123, def456  ghi789"`` gives ``["abc123", "def456", "ghi789"]``
    and ``" , "`` gives ``[]``.
    """
    return [token for token in _HASH_SEPARATORS.split(raw or "") if token]


def escape_ere(token: str) -> str:
    """Escape a literal token for use inside a grep -E pattern."""
    return _ERE_SPECIAL.sub(r"\\\1", token)


def build_hash_pattern(hashes: Sequence[str]) -> str:
    """Join hashes into one ERE alternation, in the given order."""
    if not hashes:
        raise ValueError("At least one commit hash is required to build a pattern")
    return "|".join(escape_ere(h) for h in hashes)


def _identity_exports(author: bool, committer: bool, indent: str = "") -> List[str]:
    lines = []
    if author:
        lines.append(f'{indent}export GIT_AUTHOR_NAME="${NEW_NAME_VAR}"')
        lines.append(f'{indent}export GIT_AUTHOR_EMAIL="${NEW_EMAIL_VAR}"')
    if committer:
        lines.append(f'{indent}export GIT_COMMITTER_NAME="${NEW_NAME_VAR}"')
        lines.append(f'{indent}export GIT_COMMITTER_EMAIL="${NEW_EMAIL_VAR}"')
    return lines


def _build_all(request: RewriteRequest) -> List[str]:
    return _identity_exports(author=True, committer=True)


def _build_by_email(request: RewriteRequest) -> List[str]:
    # Committer and author guards are independent; a commit may hit either,
    # both or neither.
    lines = [f'if [ "$GIT_COMMITTER_EMAIL" = "${OLD_EMAIL_VAR}" ]; then']
    lines += _identity_exports(author=False, committer=True, indent="    ")
    lines.append("fi")
    lines.append(f'if [ "$GIT_AUTHOR_EMAIL" = "${OLD_EMAIL_VAR}" ]; then')
    lines += _identity_exports(author=True, committer=False, indent="    ")
    lines.append("fi")
    return lines


def _build_by_hash(request: RewriteRequest) -> List[str]:
    # Anchored at the start: a listed hash matches as a prefix of the full id
    lines = [
        f'if printf \'%s\\n\' "$GIT_COMMIT" | grep -qiE "^(${COMMIT_PATTERN_VAR})"; then'
    ]
    lines += _identity_exports(author=True, committer=True, indent="    ")
    lines.append("fi")
    return lines


_BUILDERS = {
    RewriteMode.ALL: _build_all,
    RewriteMode.BY_EMAIL: _build_by_email,
    RewriteMode.BY_HASH: _build_by_hash,
}


def build_filter_script(request: RewriteRequest) -> FilterScript:
    """Translate a validated request into an env-filter fragment."""
    environment: Dict[str, str] = {
        NEW_NAME_VAR: request.new_name,
        NEW_EMAIL_VAR: request.new_email,
    }
    if request.mode == RewriteMode.BY_EMAIL:
        environment[OLD_EMAIL_VAR] = request.old_email or ""
    elif request.mode == RewriteMode.BY_HASH:
        environment[COMMIT_PATTERN_VAR] = build_hash_pattern(request.commit_hashes)

    text = "\n".join(_BUILDERS[request.mode](request)) + "\n"
    logger.debug("Built %s filter script:\n%s", request.mode.value, text)
    return FilterScript(text=text, environment=environment)
