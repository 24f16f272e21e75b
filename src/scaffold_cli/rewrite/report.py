"""Console report for a finished history rewrite."""

from typing import Optional

from rich.console import Console

from .models import RewriteOutcome


def backup_cleanup_command(backup_namespace: str = "refs/original/") -> str:
    """Command that deletes every backup ref left by git filter-branch."""
    return (
        f'git for-each-ref --format="%(refname)" {backup_namespace} '
        "| xargs -n 1 git update-ref -d"
    )


def force_push_command(remote_name: str = "origin") -> str:
    """Command that publishes rewritten branches and tags."""
    return f"git push --force --tags {remote_name} 'refs/heads/*'"


class OutcomeReporter:
    """Prints the result of a rewrite and the follow-up steps."""

    def __init__(
        self,
        console: Optional[Console] = None,
        remote_name: str = "origin",
        backup_namespace: str = "refs/original/",
    ):
        self.console = console or Console()
        self.remote_name = remote_name
        self.backup_namespace = backup_namespace

    def report(self, outcome: RewriteOutcome) -> None:
        if outcome.succeeded:
            self.report_success()
        else:
            self.report_failure(outcome)

    def report_success(self) -> None:
        self.console.print(
            "✅ Commit history has been rewritten successfully.", style="green"
        )
        self.console.print(
            f"A backup of the original refs was stored in {self.backup_namespace}.",
            style="green",
            markup=False,
        )
        self.console.print(
            "Please review your git history to confirm the changes.", style="yellow"
        )
        self.console.print()
        self.console.print(
            "To clean up the backup and finalize the changes, run:", style="yellow"
        )
        self._print_command(backup_cleanup_command(self.backup_namespace))
        self.console.print()
        self.console.print(
            "After confirming, you may need to force-push to your remote repository:",
            style="yellow",
        )
        self._print_command(force_push_command(self.remote_name))

    def report_failure(self, outcome: RewriteOutcome) -> None:
        self.console.print(
            "❌ An error occurred during the rewrite process.", style="red"
        )
        self.console.print(f"Exit code: {outcome.exit_code}", style="dim")
        # git output is shown as-is: no markup, highlighting or wrapping
        if outcome.stderr:
            self.console.print(
                outcome.stderr.rstrip("\n"),
                style="red",
                markup=False,
                highlight=False,
                soft_wrap=True,
            )
        if outcome.stdout:
            self.console.print(
                outcome.stdout.rstrip("\n"),
                style="dim",
                markup=False,
                highlight=False,
                soft_wrap=True,
            )

    def _print_command(self, command: str) -> None:
        self.console.print(
            f"  {command}", style="cyan", markup=False, highlight=False, soft_wrap=True
        )
