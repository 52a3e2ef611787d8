"""Output formatting utilities for CLI."""

import json
from enum import Enum
from typing import Any, Dict, List, Optional

import yaml
from rich.console import Console
from rich.table import Table


class OutputFormat(Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"
    YAML = "yaml"


class OutputFormatter:
    """Handle output formatting for different formats."""

    def __init__(self, format_type: str = "table", console: Optional[Console] = None):
        """
        Initialize output formatter.

        Args:
            format_type: Output format (table, json, yaml)
            console: Console to print to
        """
        self.console = console or Console()
        try:
            self.format = OutputFormat(format_type.lower())
        except ValueError:
            self.format = OutputFormat.TABLE

    def _dump(self, data: Any) -> None:
        if self.format == OutputFormat.JSON:
            self.console.print_json(json.dumps(data, default=str))
        else:
            self.console.print(yaml.safe_dump(data, default_flow_style=False), end="")

    def print_list(
        self,
        items: List[Dict[str, Any]],
        columns: Optional[List[str]] = None,
        title: Optional[str] = None,
    ):
        """
        Print a list of items.

        Args:
            items: List of items to print
            columns: Column names to display (for table format)
            title: Table title (for table format)
        """
        if self.format != OutputFormat.TABLE:
            self._dump(items)
            return

        if not items:
            self.console.print("[dim]No entries found[/dim]")
            return

        if not columns:
            columns = list(items[0].keys())

        table = Table(title=title)
        for col in columns:
            table.add_column(col.replace("_", " ").title())

        for item in items:
            row = []
            for col in columns:
                value = item.get(col)
                if value is None:
                    row.append("[dim]-[/dim]")
                elif isinstance(value, bool):
                    row.append("[green]✓[/green]" if value else "[red]✗[/red]")
                else:
                    row.append(str(value))
            table.add_row(*row)

        self.console.print(table)

    def print_detail(
        self,
        item: Dict[str, Any],
        title: Optional[str] = None,
    ):
        """
        Print detailed view of a single item.

        Args:
            item: Item to print
            title: Optional title
        """
        if self.format != OutputFormat.TABLE:
            self._dump(item)
            return

        if title:
            self.console.print(f"[bold]{title}[/bold]\n")

        for key, value in item.items():
            formatted_key = key.replace("_", " ").title()

            if value is None:
                formatted_value = "[dim]Not set[/dim]"
            elif isinstance(value, bool):
                formatted_value = "[green]Yes[/green]" if value else "[red]No[/red]"
            else:
                formatted_value = str(value)

            self.console.print(f"[cyan]{formatted_key}:[/cyan] {formatted_value}")

    def print_error(self, message: str):
        """Print error message."""
        if self.format == OutputFormat.TABLE:
            self.console.print(f"[red]✗[/red] {message}")
        else:
            self._dump({"status": "error", "message": message})
