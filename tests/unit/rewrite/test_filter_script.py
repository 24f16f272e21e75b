"""Tests for env-filter construction."""

import os
import shutil
import subprocess

import pytest

from scaffold_cli.rewrite.filter_script import (
    COMMIT_PATTERN_VAR,
    NEW_EMAIL_VAR,
    NEW_NAME_VAR,
    OLD_EMAIL_VAR,
    build_filter_script,
    build_hash_pattern,
    escape_ere,
    parse_commit_hashes,
)
from scaffold_cli.rewrite.models import RewriteMode, RewriteRequest

requires_sh = pytest.mark.skipif(shutil.which("sh") is None, reason="sh not available")

IDENTITY_PROBE = (
    'printf "%s|%s|%s|%s" "$GIT_AUTHOR_NAME" "$GIT_AUTHOR_EMAIL" '
    '"$GIT_COMMITTER_NAME" "$GIT_COMMITTER_EMAIL"'
)


def run_filter(script, commit="0" * 40, author=("Old", "old@x.io"), committer=None):
    """Evaluate the filter the way filter-branch does and report the identity."""
    committer = committer or author
    env = dict(os.environ)
    env.update(
        {
            "GIT_COMMIT": commit,
            "GIT_AUTHOR_NAME": author[0],
            "GIT_AUTHOR_EMAIL": author[1],
            "GIT_COMMITTER_NAME": committer[0],
            "GIT_COMMITTER_EMAIL": committer[1],
        }
    )
    env.update(script.environment)
    result = subprocess.run(
        ["sh", "-c", script.text + IDENTITY_PROBE],
        env=env,
        capture_output=True,
        text=True,
        check=True,
    )
    return tuple(result.stdout.split("|"))


class TestParseCommitHashes:
    """Splitting of free-form hash input."""

    def test_mixed_separators_keep_order(self):
        assert parse_commit_hashes("abc123, def456  ghi789") == [
            "abc123",
            "def456",
            "ghi789",
        ]

    def test_only_separators_yields_nothing(self):
        assert parse_commit_hashes(" , ") == []

    def test_leading_trailing_and_newlines(self):
        assert parse_commit_hashes(",abc\n\tdef,,") == ["abc", "def"]

    def test_empty_input(self):
        assert parse_commit_hashes("") == []


class TestHashPattern:
    """Alternation pattern built from hashes."""

    def test_joins_all_hashes_in_order(self):
        pattern = build_hash_pattern(["abc123", "def456", "ghi789"])
        assert pattern == "abc123|def456|ghi789"

    def test_escapes_regex_metacharacters(self):
        assert escape_ere("a.b*") == r"a\.b\*"
        assert build_hash_pattern(["a|b"]) == r"a\|b"

    def test_empty_list_rejected(self):
        with pytest.raises(ValueError):
            build_hash_pattern([])


class TestBuildFilterScriptText:
    """Rendered fragment structure."""

    def test_all_mode_sets_four_identity_variables(self):
        request = RewriteRequest.create(
            RewriteMode.ALL, new_name="Jane Doe", new_email="jane@example.com"
        )
        script = build_filter_script(request)

        assert f'export GIT_AUTHOR_NAME="${NEW_NAME_VAR}"' in script.text
        assert f'export GIT_AUTHOR_EMAIL="${NEW_EMAIL_VAR}"' in script.text
        assert f'export GIT_COMMITTER_NAME="${NEW_NAME_VAR}"' in script.text
        assert f'export GIT_COMMITTER_EMAIL="${NEW_EMAIL_VAR}"' in script.text
        assert "if " not in script.text
        assert script.environment == {
            NEW_NAME_VAR: "Jane Doe",
            NEW_EMAIL_VAR: "jane@example.com",
        }

    def test_preview_shows_exact_values(self):
        request = RewriteRequest.create(
            RewriteMode.ALL, new_name="Jane Doe", new_email="jane@example.com"
        )
        preview = build_filter_script(request).preview()

        assert 'export GIT_AUTHOR_NAME="Jane Doe"' in preview
        assert 'export GIT_AUTHOR_EMAIL="jane@example.com"' in preview
        assert 'export GIT_COMMITTER_NAME="Jane Doe"' in preview
        assert 'export GIT_COMMITTER_EMAIL="jane@example.com"' in preview

    def test_by_email_has_two_guards(self):
        request = RewriteRequest.create(
            RewriteMode.BY_EMAIL,
            old_email="old@example.com",
            new_name="New",
            new_email="new@example.com",
        )
        script = build_filter_script(request)

        assert f'if [ "$GIT_COMMITTER_EMAIL" = "${OLD_EMAIL_VAR}" ]' in script.text
        assert f'if [ "$GIT_AUTHOR_EMAIL" = "${OLD_EMAIL_VAR}" ]' in script.text
        assert script.text.count("fi\n") == 2
        assert script.environment[OLD_EMAIL_VAR] == "old@example.com"

    def test_by_hash_pattern_in_environment(self):
        request = RewriteRequest.create(
            RewriteMode.BY_HASH,
            new_name="New",
            new_email="new@example.com",
            commit_hashes="abc123, def456  ghi789",
        )
        script = build_filter_script(request)

        assert "$GIT_COMMIT" in script.text
        assert script.environment[COMMIT_PATTERN_VAR] == "abc123|def456|ghi789"

    def test_user_values_never_in_script_text(self):
        request = RewriteRequest.create(
            RewriteMode.BY_EMAIL,
            old_email='x"; rm -rf / #',
            new_name="$(whoami)",
            new_email="`id`",
        )
        script = build_filter_script(request)

        assert "rm -rf" not in script.text
        assert "whoami" not in script.text
        assert "`id`" not in script.text

    def test_deterministic(self):
        request = RewriteRequest.create(
            RewriteMode.BY_HASH, new_name="N", new_email="e@x", commit_hashes="a b"
        )
        assert build_filter_script(request) == build_filter_script(request)


@requires_sh
class TestFilterScriptEvaluation:
    """Fragment behaviour when evaluated by a POSIX shell."""

    def test_all_mode_rewrites_every_commit(self):
        script = build_filter_script(
            RewriteRequest.create(RewriteMode.ALL, new_name="Jane", new_email="j@x.io")
        )
        assert run_filter(script) == ("Jane", "j@x.io", "Jane", "j@x.io")

    def test_by_email_committer_only(self):
        script = build_filter_script(
            RewriteRequest.create(
                RewriteMode.BY_EMAIL,
                old_email="old@x.io",
                new_name="New",
                new_email="new@x.io",
            )
        )
        result = run_filter(
            script, author=("Someone", "someone@x.io"), committer=("Old", "old@x.io")
        )
        assert result == ("Someone", "someone@x.io", "New", "new@x.io")

    def test_by_email_author_only(self):
        script = build_filter_script(
            RewriteRequest.create(
                RewriteMode.BY_EMAIL,
                old_email="old@x.io",
                new_name="New",
                new_email="new@x.io",
            )
        )
        result = run_filter(
            script, author=("Old", "old@x.io"), committer=("Bot", "bot@x.io")
        )
        assert result == ("New", "new@x.io", "Bot", "bot@x.io")

    def test_by_email_neither(self):
        script = build_filter_script(
            RewriteRequest.create(
                RewriteMode.BY_EMAIL,
                old_email="old@x.io",
                new_name="New",
                new_email="new@x.io",
            )
        )
        result = run_filter(script, author=("A", "a@x.io"), committer=("B", "b@x.io"))
        assert result == ("A", "a@x.io", "B", "b@x.io")

    @pytest.mark.parametrize(
        "commit",
        [
            "abc1230000000000000000000000000000000000",
            "def4560000000000000000000000000000000000",
            "ABC123ffffffffffffffffffffffffffffffffff",
        ],
    )
    def test_by_hash_matches_any_listed_prefix(self, commit):
        script = build_filter_script(
            RewriteRequest.create(
                RewriteMode.BY_HASH,
                new_name="New",
                new_email="new@x.io",
                commit_hashes="abc123, def456",
            )
        )
        assert run_filter(script, commit=commit) == ("New", "new@x.io", "New", "new@x.io")

    def test_by_hash_ignores_mid_id_substring(self):
        script = build_filter_script(
            RewriteRequest.create(
                RewriteMode.BY_HASH,
                new_name="New",
                new_email="new@x.io",
                commit_hashes="abc123",
            )
        )
        result = run_filter(script, commit="0000abc123" + "0" * 30)
        assert result == ("Old", "old@x.io", "Old", "old@x.io")

    def test_shell_metacharacters_are_inert(self):
        script = build_filter_script(
            RewriteRequest.create(
                RewriteMode.ALL, new_name='Jane "$(echo pwned)"', new_email="`id`@x.io"
            )
        )
        assert run_filter(script) == (
            'Jane "$(echo pwned)"',
            "`id`@x.io",
            'Jane "$(echo pwned)"',
            "`id`@x.io",
        )
