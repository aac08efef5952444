"""stud command-line interface."""

import click

from stud import __version__
from stud.commands import branches, config_group, flatten, rename, status
from stud.logging import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="stud")
@click.option("--verbose", "-v", is_flag=True, help="Log every git command")
@click.option("--log-dir", type=click.Path(file_okay=False), default=None, help="Also write JSON logs here")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, log_dir: str | None) -> None:
    """stud - git workflows for issue-driven branches."""
    ctx.ensure_object(dict)
    setup_logging(level="debug" if verbose else "warning", log_dir=log_dir)
    ctx.obj["verbose"] = verbose


cli.add_command(branches)
cli.add_command(config_group, name="config")
cli.add_command(flatten)
cli.add_command(rename)
cli.add_command(status)


if __name__ == "__main__":
    cli()
