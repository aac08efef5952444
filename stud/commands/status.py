"""stud status - where the current branch stands against base and upstream."""

import click
from rich.console import Console
from rich.table import Table

from stud.console import ConsoleIO
from stud.exceptions import GitError, StudError
from stud.logging import get_logger
from stud.workspace import Workspace

console = Console()
logger = get_logger("commands.status")


@click.command()
def status() -> None:
    """Show the current branch with ahead/behind counts.

    Counts are given against the configured base branch and, when one is
    set, the branch's upstream.
    """
    try:
        ws = Workspace.open(io=ConsoleIO(console))
        branch = ws.inspector.current_branch()
        if branch is None or branch == "HEAD":
            console.print("[yellow]Not on a branch (detached HEAD)[/yellow]")
            raise SystemExit(1)

        base = ws.resolver.ensure_base_branch_configured()
        upstream = ws.inspector.upstream_branch()
        branch_status = ws.operator.get_branch_status(branch, base, upstream)

        table = Table(title=f"Branch [cyan]{branch}[/cyan]")
        table.add_column("Compared to")
        table.add_column("Ahead", justify="right")
        table.add_column("Behind", justify="right")
        table.add_row(base, str(branch_status.ahead_base), str(branch_status.behind_base))
        table.add_row(
            upstream or "[dim]no upstream[/dim]",
            str(branch_status.ahead_remote),
            str(branch_status.behind_remote),
        )
        console.print(table)

        if ws.inspector.has_changes():
            console.print("[yellow]Working tree has uncommitted changes[/yellow]")

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
