"""stud branches - find the branches that belong to an issue."""

import click
from rich.console import Console
from rich.table import Table

from stud.constants import DEFAULT_REMOTE
from stud.exceptions import StudError
from stud.git.inspector import project_key_from_issue_key
from stud.workspace import Workspace

console = Console()


@click.command()
@click.argument("issue_key")
@click.option("--fetch/--no-fetch", default=True, help="Fetch from origin before searching")
def branches(issue_key: str, fetch: bool) -> None:
    """List local and remote branches for ISSUE_KEY (e.g. PROJ-123)."""
    try:
        issue_key = issue_key.upper()
        project_key_from_issue_key(issue_key)

        ws = Workspace.open()
        if fetch:
            ws.operator.fetch(DEFAULT_REMOTE)

        matches = ws.inspector.find_branches_by_issue_key(issue_key)
        if matches.is_empty():
            console.print(f"[yellow]No branches found for {issue_key}[/yellow]")
            return

        current = ws.inspector.current_branch()
        table = Table(title=f"Branches for {issue_key}")
        table.add_column("Branch")
        table.add_column("Local", justify="center")
        table.add_column("Remote", justify="center")
        for name in dict.fromkeys([*matches.local, *matches.remote]):
            label = f"{name} (current)" if name == current else name
            table.add_row(
                label,
                "✓" if name in matches.local else "",
                "✓" if name in matches.remote else "",
            )
        console.print(table)

    except StudError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1) from e
