"""Command line interface for scaffold-cli."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from . import __version__
from .config import ConfigManager
from .rewrite import (
    EmptyHashListError,
    HistoryRewriteService,
    MissingFieldError,
    RewriteMode,
    RewritePreconditionError,
    RewriteRequest,
    check_rewrite_preconditions,
)
from .utils.exception_logger import ExceptionLogger

logger = logging.getLogger(__name__)

console = Console()

MODE_CHOICES = [RewriteMode.ALL, RewriteMode.BY_EMAIL, RewriteMode.BY_HASH]


@click.group(invoke_without_command=True)
@click.option("--config", "-c", type=click.Path(exists=False), help="Config file path")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.option(
    "--path",
    "-p",
    type=click.Path(exists=True, file_okay=False),
    help="Repository directory to operate on (default: current directory)",
)
@click.version_option(version=__version__, prog_name="scaffold-cli")
@click.pass_context
def cli(ctx, config: Optional[str], verbose: bool, path: Optional[str]):
    """Project scaffolding helpers, including git commit-author history rewriting.

    \b
    COMMANDS:
      rewrite   Rewrite commit author history (destructive, asks first)

    \b
    CONFIGURATION:
      Config file: .scaffold-cli/config.json

      Key settings:
      • rewrite.git_executable: git binary to use (default: git)
      • rewrite.remote_name: remote shown in the force-push hint (default: origin)

    For detailed help on any command, use: scaffold-cli COMMAND --help
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    ExceptionLogger.initialize()

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s:%(name)s:%(message)s",
    )

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        return

    ctx.obj["config_manager"] = ConfigManager(Path(config) if config else None)
    ctx.obj["project_root"] = Path(path).resolve() if path else Path.cwd()


def _ask(message: str) -> str:
    """Prompt for a value; an empty answer is returned as an empty string."""
    return click.prompt(message, default="", show_default=False)


def _prompt_mode() -> RewriteMode:
    console.print("What kind of commit history rewrite do you want to perform?")
    for index, mode in enumerate(MODE_CHOICES, start=1):
        console.print(f"  {index}. {mode.description}")
    choice = click.prompt(
        "Select an option", type=click.IntRange(1, len(MODE_CHOICES)), default=1
    )
    return MODE_CHOICES[choice - 1]


def _prompt_request(mode: RewriteMode) -> RewriteRequest:
    """Collect the fields for ``mode`` and validate them into a request."""
    if mode == RewriteMode.ALL:
        new_name = _ask("Enter the new author name for ALL commits")
        new_email = _ask("Enter the new author email for ALL commits")
        return RewriteRequest.create(mode, new_name=new_name, new_email=new_email)

    if mode == RewriteMode.BY_EMAIL:
        old_email = _ask("Enter the old email address to replace")
        new_name = _ask("Enter the new author name")
        new_email = _ask("Enter the new author email")
        return RewriteRequest.create(
            mode, new_name=new_name, new_email=new_email, old_email=old_email
        )

    new_name = _ask("Enter the new author name")
    new_email = _ask("Enter the new author email")
    commit_hashes = _ask("Enter commit hashes to rewrite (space or comma separated)")
    return RewriteRequest.create(
        mode, new_name=new_name, new_email=new_email, commit_hashes=commit_hashes
    )


@cli.command()
@click.pass_context
def rewrite(ctx):
    """Rewrite git commit history using native git commands.

    Changes author and committer name/email on every commit, on commits
    from one email address, or on a list of commits by hash. Uses
    git filter-branch over all branches and tags and keeps a backup of
    the original refs under refs/original/.

    \b
    REQUIREMENTS:
      • git on PATH
      • a clean working directory (not checked)

    Always asks for confirmation before touching history.
    """
    project_root: Path = ctx.obj["project_root"]

    try:
        config = ctx.obj["config_manager"].load()
    except ValueError as e:
        console.print(f"❌ {e}", style="red", markup=False, soft_wrap=True)
        sys.exit(1)

    try:
        repo_root = check_rewrite_preconditions(
            project_root, config.rewrite.git_executable
        )
    except RewritePreconditionError as e:
        console.print(str(e), style="red", markup=False, soft_wrap=True)
        sys.exit(1)

    mode = _prompt_mode()

    try:
        request = _prompt_request(mode)
    except EmptyHashListError as e:
        console.print(f"{e} Aborting.", style="red", markup=False, soft_wrap=True)
        sys.exit(1)
    except MissingFieldError as e:
        console.print(str(e), style="red", markup=False, soft_wrap=True)
        sys.exit(1)

    if repo_root.resolve() != project_root.resolve():
        console.print(
            f"Rewriting repository at {repo_root}",
            style="dim",
            markup=False,
            soft_wrap=True,
        )

    service = HistoryRewriteService(
        repo_root,
        config=config.rewrite,
        console=console,
        show_script=ctx.obj.get("verbose", False),
    )
    outcome = service.run(request)

    if outcome is not None and not outcome.succeeded:
        sys.exit(1)


def main():
    """Main entry point."""
    try:
        cli(obj={})
    except KeyboardInterrupt:
        console.print("\n❌ Interrupted by user", style="red")
        sys.exit(1)
    except Exception as e:
        console.print(f"❌ Unexpected error: {str(e)}", style="red", markup=False)
        sys.exit(1)


if __name__ == "__main__":
    main()
