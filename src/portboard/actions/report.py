"""Report Action - Render the unified port view in the terminal.

CONTRACT:
- read_only: True
"""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from portboard.model.ports import PortState, PortsView, UnifiedPortEntry

_STATE_STYLE = {
    PortState.OPEN_ON_HOST: "[green]host[/]",
    PortState.OPEN_IN_CONTAINER: "[cyan]container[/]",
    PortState.FIREWALL_ONLY: "[yellow]ufw only[/]",
}


class ReportAction:
    """Formats a PortsView as a rich table."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def report_ports(self, view: PortsView) -> None:
        ufw = "[green]active[/]" if view.ufw_active else "[red]inactive[/]"
        self.console.print(f"\n[bold]UFW:[/] {ufw}   [bold]Ports:[/] {len(view.ports)}")

        table = Table(show_header=True, header_style="bold white", expand=True)
        table.add_column("Port", justify="right")
        table.add_column("Proto")
        table.add_column("State")
        table.add_column("Label")
        table.add_column("Process / Container")
        table.add_column("UFW Rules")

        for entry in sorted(view.ports, key=lambda e: (e.port, e.protocol)):
            table.add_row(
                str(entry.port),
                entry.protocol,
                _STATE_STYLE[entry.state],
                escape(entry.label or ""),
                escape(self._owner(entry)),
                self._rules(entry),
            )
        self.console.print(table)

        for warning in view.warnings:
            self.console.print(f"[yellow]Warning:[/] {escape(warning)}")

    @staticmethod
    def _owner(entry: UnifiedPortEntry) -> str:
        parts = []
        if entry.container:
            parts.append(f"{entry.container.name} @ {entry.container.endpoint_name}")
        if entry.process:
            parts.append(entry.process)
        return "\n".join(parts) or "-"

    @staticmethod
    def _rules(entry: UnifiedPortEntry) -> str:
        if not entry.firewall_rules:
            return "[dim]none[/]"
        return "\n".join(
            f"[{rule.rule_id}] {escape(rule.action)} from {escape(rule.source)}"
            for rule in entry.firewall_rules
        )
