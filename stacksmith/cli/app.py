"""Typer application for the stacksmith command.

Entry point: ``stacksmith`` (configured via pyproject.toml console_scripts).
"""

from __future__ import annotations

import logging

import typer
from rich.logging import RichHandler

from stacksmith.cli.commands.deploy import deploy_cmd
from stacksmith.cli.commands.plan import plan_cmd
from stacksmith.config import DeployConfig

app = typer.Typer(
    name="stacksmith",
    help="Stacksmith: dependency-ordered Clarity contract deployment.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="plan", help="Show the resolved deployment order.")(plan_cmd)
app.command(name="deploy", help="Deploy all contracts to a Stacks node.")(deploy_cmd)


@app.callback()
def configure(
    log_level: str = typer.Option(
        None, "--log-level", help="Logging level (defaults to STACKSMITH_LOG_LEVEL)."
    ),
) -> None:
    """Install the Rich log handler before any command runs."""
    level = (log_level or DeployConfig().log_level).upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=False, show_path=False)],
        force=True,
    )


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
