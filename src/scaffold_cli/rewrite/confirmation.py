"""Mandatory confirmation before any history rewrite."""

import logging
from typing import Callable, Optional

from rich.console import Console
from rich.prompt import Confirm

logger = logging.getLogger(__name__)

AskFn = Callable[..., bool]


class ConfirmationGate:
    """Warns about the rewrite and asks for explicit consent.

    The default answer is "no"; an empty reply declines.
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        backup_namespace: str = "refs/original/",
        ask: Optional[AskFn] = None,
    ):
        self.console = console or Console()
        self.backup_namespace = backup_namespace
        self._ask = ask or Confirm.ask

    def show_warning(self) -> None:
        self.console.print()
        self.console.print(
            "⚠️  Warning: This is a destructive operation that rewrites Git history.",
            style="yellow bold",
        )
        self.console.print("   It can be very slow on large repositories.", style="yellow")
        self.console.print(
            f"   A backup of your history will be stored in [cyan]{self.backup_namespace}[/cyan]."
        )
        self.console.print(
            "   Make sure you have a clean working directory before proceeding.",
            style="yellow",
        )
        self.console.print()

    def confirm(self) -> bool:
        """Show the warning and return True only on an explicit yes."""
        self.show_warning()

        if not self._ask(
            "Are you sure you want to continue?", default=False, console=self.console
        ):
            self.console.print("Operation cancelled.", style="dim")
            logger.debug("History rewrite declined at confirmation")
            return False

        return True
