"""``stacksmith plan``: print the resolved deployment order.

Loads ``Clarinet.toml``, resolves dependencies and prints the order the
contracts would be deployed in.  Makes no network requests.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from stacksmith.config import DeployConfig
from stacksmith.core.dependency_graph import resolve_deployment_order
from stacksmith.core.project_loader import load_manifest
from stacksmith.errors import DeploymentError
from stacksmith.monitor.renderer import DeploymentRenderer

console = Console()


def plan_cmd(
    project_dir: Path = typer.Option(
        Path("."),
        "--project-dir",
        "-p",
        help="Directory containing Clarinet.toml.",
    ),
) -> None:
    """Show the order contracts will be deployed in."""
    config = DeployConfig()
    renderer = DeploymentRenderer(console=console)

    try:
        project_name, artifacts = load_manifest(project_dir)
        order = resolve_deployment_order(artifacts)
    except DeploymentError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=1)

    console.print(f"[bold]Project:[/bold] {project_name}")
    if not order:
        console.print("[dim]No contracts declared.[/dim]")
        return
    renderer.print_plan(order, default_deployer=config.deployer_account)
