"""Interactive console used for prompts and user-facing notices."""

from collections.abc import Callable, Sequence

from rich.console import Console
from rich.prompt import Confirm, Prompt


class ConsoleIO:
    """Prompt and message helpers on top of a rich Console.

    Validators passed to ``ask`` receive the raw answer and either return
    the (possibly normalised) value or raise; there is no re-prompt loop.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def ask(
        self,
        question: str,
        default: str | None = None,
        validator: Callable[[str], str] | None = None,
    ) -> str:
        if default is None:
            answer = Prompt.ask(question, console=self.console)
        else:
            answer = Prompt.ask(question, console=self.console, default=default)
        answer = (answer or "").strip()
        if validator is not None:
            answer = validator(answer)
        return answer

    def ask_hidden(self, question: str) -> str:
        """Ask without echoing the answer (tokens, passwords)."""
        answer = Prompt.ask(question, console=self.console, password=True, default="", show_default=False)
        return (answer or "").strip()

    def choice(self, question: str, choices: Sequence[str], default: str | None = None) -> str:
        """Ask once with the options listed; the caller validates the answer."""
        return self.ask(f"{question} ({'/'.join(choices)})", default=default)

    def confirm(self, question: str, default: bool = True) -> bool:
        return Confirm.ask(question, console=self.console, default=default)

    def note(self, message: str) -> None:
        self.console.print(f"[cyan]Note:[/cyan] {message}")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]Warning:[/yellow] {message}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]Error:[/red] {message}")

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")
