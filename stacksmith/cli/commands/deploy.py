"""``stacksmith deploy``: deploy every contract to the target network.

Loads the project and the target's settings file, resolves the deployment
order (failing before any network activity on unknown dependencies or
cycles), then deploys contracts one at a time and halts on the first
failure.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from stacksmith.bridge.node_client import NodeClient
from stacksmith.config import DeployConfig
from stacksmith.core.dependency_graph import resolve_deployment_order
from stacksmith.core.orchestrator import Orchestrator
from stacksmith.core.project_loader import load_project
from stacksmith.core.transaction_builder import TransactionBuilder
from stacksmith.errors import DeploymentError
from stacksmith.models.network import NetworkTarget
from stacksmith.monitor.renderer import DeploymentRenderer

console = Console()


def _target_environment(mocknet: bool, testnet: bool, mainnet: bool, default: str) -> str:
    selected = [name for name, flag in (
        ("mocknet", mocknet), ("testnet", testnet), ("mainnet", mainnet)
    ) if flag]
    if len(selected) > 1:
        raise typer.BadParameter(
            "--mocknet, --testnet and --mainnet are mutually exclusive"
        )
    return selected[0] if selected else default


def deploy_cmd(
    mocknet: bool = typer.Option(
        False, "--mocknet", help="Deploy using settings/Mocknet.toml."
    ),
    testnet: bool = typer.Option(
        False, "--testnet", help="Deploy using settings/Testnet.toml."
    ),
    mainnet: bool = typer.Option(
        False, "--mainnet", help="Deploy using settings/Mainnet.toml."
    ),
    node_url: str = typer.Option(
        None,
        "--node-url",
        "-n",
        help="Stacks node RPC address (overrides settings and environment).",
    ),
    project_dir: Path = typer.Option(
        Path("."),
        "--project-dir",
        "-p",
        help="Directory containing Clarinet.toml and settings/.",
    ),
) -> None:
    """Deploy all contracts, in dependency order, to a Stacks node."""
    config = DeployConfig()
    environment = _target_environment(mocknet, testnet, mainnet, config.environment)
    network = NetworkTarget.for_environment(environment)
    renderer = DeploymentRenderer(console=console)

    try:
        project = load_project(project_dir, environment)
        order = resolve_deployment_order(project.artifacts)
    except DeploymentError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=1)

    base_url = node_url or project.node_url or config.node_url
    console.print(
        f"[bold]Deploying[/bold] {project.name} to [cyan]{environment}[/cyan] "
        f"via {base_url}"
    )
    renderer.print_plan(order, default_deployer=config.deployer_account)

    orchestrator = Orchestrator(
        project.accounts,
        NodeClient(base_url, timeout=config.request_timeout_seconds),
        network,
        builder=TransactionBuilder(network, base_fee=config.base_fee),
        deployer_account=config.deployer_account,
    )
    report = orchestrator.run(order, on_result=renderer.print_result)

    console.print()
    renderer.print_report(report, order)
    if report.failure is not None:
        renderer.print_failure(report.failure)
        raise typer.Exit(code=1)
