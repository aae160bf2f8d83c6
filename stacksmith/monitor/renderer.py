"""Rich terminal renderer for deployment plans and results.

Color scheme
------------
- green     : deployed
- bold red  : failed (halts the run)
- dim       : not attempted
- cyan      : contract names
"""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from stacksmith.models.artifacts import ArtifactDefinition
from stacksmith.models.deployment import (
    DeploymentFailure,
    DeploymentReport,
    DeploymentResult,
)


class DeploymentRenderer:
    """Renders deployment plans, per-contract results and run reports.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    # ------------------------------------------------------------------
    # Plan
    # ------------------------------------------------------------------

    def render_plan(
        self, order: Sequence[ArtifactDefinition], default_deployer: str = "deployer"
    ) -> Table:
        """Render the resolved deployment order as a table."""
        table = Table(
            title="Deployment Plan",
            show_header=True,
            header_style="bold cyan",
        )
        table.add_column("#", style="dim", width=4, justify="right")
        table.add_column("Contract", style="cyan", min_width=20)
        table.add_column("Depends On", min_width=20)
        table.add_column("Deployer")
        table.add_column("Size", justify="right")

        for i, artifact in enumerate(order, start=1):
            deps = ", ".join(artifact.depends_on) if artifact.depends_on else "[dim]-[/dim]"
            deployer = artifact.deployer or f"[dim]{default_deployer}[/dim]"
            table.add_row(
                str(i),
                artifact.name,
                deps,
                deployer,
                f"{len(artifact.source.encode('utf-8'))} B",
            )
        return table

    def print_plan(
        self, order: Sequence[ArtifactDefinition], default_deployer: str = "deployer"
    ) -> None:
        self.console.print(self.render_plan(order, default_deployer))

    # ------------------------------------------------------------------
    # Streaming results
    # ------------------------------------------------------------------

    def print_result(self, result: DeploymentResult) -> None:
        """Print one deployed contract as soon as it is broadcast."""
        self.console.print(
            f"[green]Deploying[/green] [cyan]{result.name}[/cyan] "
            f"(txid: {result.transaction_id}, nonce: {result.sequence_used})"
        )

    def print_failure(self, failure: DeploymentFailure) -> None:
        self.console.print(
            Panel(
                "\n".join([
                    f"[bold red]Deployment halted at {failure.name}[/bold red]",
                    "",
                    f"[bold]Error:[/bold] {failure.error_type}",
                    escape(failure.message),
                    "",
                    "[dim]Contracts deployed before this one remain on-chain.[/dim]",
                ]),
                title="[bold]Deployment Failed[/bold]",
                border_style="red",
                padding=(1, 2),
            )
        )

    # ------------------------------------------------------------------
    # Report
    # ------------------------------------------------------------------

    def render_report(
        self, report: DeploymentReport, order: Sequence[ArtifactDefinition] = ()
    ) -> Panel:
        """Render a finished run: deployed, failed and never-attempted contracts."""
        table = Table(show_header=True, header_style="bold cyan", expand=True)
        table.add_column("Contract", min_width=20)
        table.add_column("State", justify="center")
        table.add_column("Nonce", justify="right")
        table.add_column("Txid")

        for result in report.results:
            table.add_row(
                f"[cyan]{result.name}[/cyan]",
                "[green]DEPLOYED[/green]",
                str(result.sequence_used),
                result.transaction_id,
            )
        if report.failure is not None:
            table.add_row(
                f"[cyan]{report.failure.name}[/cyan]",
                "[bold red]FAILED[/bold red]",
                "[dim]-[/dim]",
                f"[red]{report.failure.error_type}[/red]",
            )

        reached = set(report.deployed_names)
        if report.failure is not None:
            reached.add(report.failure.name)
        for artifact in order:
            if artifact.name not in reached:
                table.add_row(
                    f"[dim]{artifact.name}[/dim]",
                    "[dim]NOT ATTEMPTED[/dim]",
                    "[dim]-[/dim]",
                    "[dim]-[/dim]",
                )

        status = (
            "[green]complete[/green]" if report.succeeded else "[bold red]HALTED[/bold red]"
        )
        summary = (
            f"[bold]Network:[/bold] {report.network}  |  "
            f"[bold]Deployed:[/bold] {len(report.results)}  |  "
            f"[bold]Status:[/bold] {status}"
        )
        return Panel(
            Group(table, Text(""), Text.from_markup(summary)),
            title="[bold]Stacksmith Deployment[/bold]",
            border_style="green" if report.succeeded else "red",
            padding=(1, 2),
        )

    def print_report(
        self, report: DeploymentReport, order: Sequence[ArtifactDefinition] = ()
    ) -> None:
        self.console.print(self.render_report(report, order))
