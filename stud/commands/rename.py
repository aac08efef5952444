"""stud rename - rename a branch locally and on origin."""

import click
from rich.console import Console

from stud.console import ConsoleIO
from stud.constants import DEFAULT_REMOTE, PROTECTED_BRANCHES
from stud.exceptions import GitError, StudError
from stud.git.inspector import validate_branch_name
from stud.logging import get_logger
from stud.workspace import Workspace

console = Console()
logger = get_logger("commands.rename")


def sync_with_remote(ws: Workspace, io: ConsoleIO, branch: str, yes: bool) -> None:
    """Offer to rebase ``branch`` onto its remote copy when the remote is ahead.

    Exits with status 1 when the rebase would conflict or fails.
    """
    remote_ref = f"{DEFAULT_REMOTE}/{branch}"
    ws.operator.fetch(DEFAULT_REMOTE)
    behind = ws.inspector.ahead_behind(remote_ref, branch)
    if behind == 0:
        return

    io.warning(f"{remote_ref} has {behind} commit(s) that {branch} does not have.")
    if not yes and not io.confirm(f"Rebase {branch} onto {remote_ref} before renaming?", default=True):
        return

    suggestion = f"Resolve it manually with: git switch {branch} && git rebase {remote_ref}"
    if not ws.inspector.can_rebase_branch(branch, remote_ref):
        io.error(f"Rebasing {branch} onto {remote_ref} would conflict.")
        io.note(suggestion)
        raise SystemExit(1)

    try:
        ws.operator.rebase(remote_ref, branch)
    except GitError as e:
        io.error(f"Rebase onto {remote_ref} failed: {e.technical_details}")
        io.note(suggestion)
        raise SystemExit(1) from e
    io.success(f"Rebased {branch} onto {remote_ref}")


@click.command()
@click.argument("new_name")
@click.option("--branch", "-b", "branch", help="Branch to rename (defaults to the current branch)")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
def rename(new_name: str, branch: str | None, yes: bool) -> None:
    """Rename a branch to NEW_NAME, locally and on origin."""
    try:
        io = ConsoleIO(console)
        ws = Workspace.open(io=io)

        if ws.inspector.has_changes():
            console.print("[red]Working tree is not clean.[/red] Commit or stash your changes first.")
            raise SystemExit(1)

        if not validate_branch_name(new_name):
            console.print(f"[red]Invalid branch name:[/red] {new_name}")
            raise SystemExit(1)

        target = branch or ws.inspector.current_branch()
        if not target:
            console.print("[red]Could not determine the branch to rename[/red]")
            raise SystemExit(1)

        if target in PROTECTED_BRANCHES:
            console.print(f"[red]Refusing to rename protected branch {target}[/red]")
            raise SystemExit(1)

        if ws.inspector.local_branch_exists(new_name) or ws.inspector.remote_branch_exists(
            DEFAULT_REMOTE, new_name
        ):
            console.print(f"[red]Branch {new_name} already exists[/red]")
            raise SystemExit(1)

        has_local = ws.inspector.local_branch_exists(target)
        has_remote = ws.inspector.remote_branch_exists(DEFAULT_REMOTE, target)
        if not has_local and not has_remote:
            console.print(f"[red]Branch {target} not found locally or on {DEFAULT_REMOTE}[/red]")
            raise SystemExit(1)

        if has_local and has_remote:
            sync_with_remote(ws, io, target, yes)

        console.print(f"Renaming [cyan]{target}[/cyan] -> [cyan]{new_name}[/cyan]")
        if has_local:
            console.print("  - local branch")
        if has_remote:
            console.print(f"  - {DEFAULT_REMOTE}/{target}")
        if not yes and not io.confirm("Proceed?", default=True):
            return

        if has_local:
            ws.operator.rename_local_branch(target, new_name)
            console.print("[green]✓[/green] Renamed local branch")

        if has_remote:
            try:
                ws.operator.rename_remote_branch(target, new_name, DEFAULT_REMOTE)
                console.print(f"[green]✓[/green] Renamed {DEFAULT_REMOTE}/{target}")
            except GitError as e:
                console.print(f"[yellow]Remote rename failed:[/yellow] {e.technical_details}")
                logger.warning(f"Remote rename of {target} failed: {e}")

    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        raise SystemExit(130) from None
    except GitError as e:
        console.print(f"\n[red]Git error:[/red] {e}")
        console.print(f"[dim]{e.technical_details}[/dim]")
        raise SystemExit(1) from e
    except StudError as e:
        console.print(f"\n[red]Error:[/red] {e}")
        raise SystemExit(1) from e
