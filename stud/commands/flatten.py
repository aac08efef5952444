"""stud flatten - fold fixup!/squash! commits into their targets."""

import click
from rich.console import Console

from stud.console import ConsoleIO
from stud.exceptions import GitError, StudError
from stud.logging import get_logger
from stud.workspace import Workspace

console = Console()
logger = get_logger("commands.flatten")


@click.command()
@click.option("--push", is_flag=True, help="Force-push with lease afterwards if the branch has an upstream")
def flatten(push: bool) -> None:
    """Autosquash fixup commits made since the branch left the base branch."""
    try:
        ws = Workspace.open(io=ConsoleIO(console))

        if ws.inspector.has_changes():
            console.print("[red]Working tree is not clean.[/red] Commit or stash your changes first.")
            raise SystemExit(1)

        base = ws.resolver.ensure_base_branch_configured()
        base_sha = ws.inspector.merge_base(base, "HEAD")

        if not ws.operator.has_fixup_commits(base_sha):
            console.print("[cyan]Note:[/cyan] No fixup or squash commits to flatten.")
            return

        console.print("[yellow]Warning:[/yellow] This rewrites the history of the current branch.")
        ws.operator.rebase_autosquash(base_sha)
        console.print("[green]✓[/green] Fixup commits flattened")

        if push and ws.inspector.upstream_branch():
            ws.operator.force_push_with_lease()
            console.print("[green]✓[/green] Force-pushed with lease")

    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        raise SystemExit(130) from None
    except GitError as e:
        console.print(f"\n[red]Flatten failed:[/red] {e}")
        console.print(f"[dim]{e.technical_details}[/dim]")
        raise SystemExit(1) from e
    except StudError as e:
        console.print(f"\n[red]Error:[/red] {e}")
        raise SystemExit(1) from e
