"""stud config - inspect and resolve the per-repository configuration."""

import click
from rich.console import Console
from rich.table import Table

from stud.console import ConsoleIO
from stud.exceptions import GitError, StudError
from stud.workspace import Workspace

console = Console()

SECRET_KEYS = frozenset({"githubToken", "gitlabToken"})


def mask_secret(value: str) -> str:
    """Keep only the last four characters of a secret."""
    if len(value) <= 4:
        return "****"
    return f"****{value[-4:]}"


@click.group("config")
def config_group() -> None:
    """Per-repository configuration (stored in .git/stud.config)."""


@config_group.command("show")
def config_show() -> None:
    """Print the stored configuration with secrets masked."""
    try:
        ws = Workspace.open()
        data = ws.store.read()
        if not data:
            console.print(f"[yellow]No configuration at {ws.store.config_path}[/yellow]")
            return

        table = Table(title=str(ws.store.config_path))
        table.add_column("Key")
        table.add_column("Value")
        for key, value in data.items():
            shown = mask_secret(str(value)) if key in SECRET_KEYS and value else str(value)
            table.add_row(key, shown)
        console.print(table)

    except StudError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1) from e


@config_group.command("init")
@click.option("--skip-token", is_flag=True, help="Do not ask for a provider token")
def config_init(skip_token: bool) -> None:
    """Resolve base branch, git provider and token for this repository."""
    try:
        ws = Workspace.open(io=ConsoleIO(console))

        base = ws.resolver.ensure_base_branch_configured()
        console.print(f"[green]✓[/green] Base branch: [cyan]{base}[/cyan]")

        provider = ws.resolver.ensure_git_provider_configured()
        console.print(f"[green]✓[/green] Git provider: [cyan]{provider}[/cyan]")

        if not skip_token:
            token = ws.resolver.ensure_git_token_configured(provider)
            if token:
                console.print(f"[green]✓[/green] {provider} token: {mask_secret(token)}")

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
