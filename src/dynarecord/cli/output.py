"""Output formatting for CLI commands."""

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from dynarecord import DynaRecordError, Record, Statement

console = Console()


class OutputFormatter:
    """Formats output for terminal or JSON mode."""

    def __init__(self, json_mode: bool = False) -> None:
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON instead of Rich formatting
        """
        self.json_mode = json_mode

    def print_records(self, title: str, records: list[Record]) -> None:
        """Print records as a Rich table or JSON array.

        Records of one type may carry different attributes, so the columns
        are the union of every record's attribute names in first-seen order.

        Args:
            title: Table title
            records: Records to display
        """
        data = [record.to_dict() for record in records]
        if self.json_mode:
            print(json.dumps(data, default=str, indent=2))
            return

        columns: list[str] = []
        for row in data:
            columns.extend(name for name in row if name not in columns)

        table = Table(title=title, show_header=True, header_style="bold magenta")
        for col in columns:
            table.add_column(col)
        for row in data:
            table.add_row(*[_cell(row, col) for col in columns])
        console.print(table)

    def print_record(self, record: Record) -> None:
        """Print a single record.

        Args:
            record: Record to display
        """
        if self.json_mode:
            print(json.dumps(record.to_dict(), default=str, indent=2))
            return

        table = Table(title=type(record).__name__, show_header=True, header_style="bold cyan")
        table.add_column("Attribute")
        table.add_column("Value")
        for name, value in record.to_dict().items():
            table.add_row(name, _format_value(value))
        console.print(table)

    def print_statement(self, statement: Statement) -> None:
        """Print a statement and its parameters.

        Args:
            statement: Statement to display
        """
        if self.json_mode:
            print(json.dumps(statement.model_dump(mode="json"), default=str, indent=2))
            return

        console.print(f"[bold]{statement.kind.value.upper()}[/bold] on {statement.table}")
        console.print(Syntax(statement.sql, "sql", word_wrap=True))
        console.print(f"Parameters: {list(statement.params)!r}", style="dim")

    def print_success(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Print success message.

        Args:
            message: Success message
            details: Optional details to display
        """
        if self.json_mode:
            output = {"success": True, "message": message}
            if details:
                output.update(details)
            print(json.dumps(output, default=str, indent=2))
        else:
            console.print(f"✓ {message}", style="green")
            if details:
                for key, value in details.items():
                    console.print(f"  {key}: {value}", style="dim")

    def print_error(self, error: Exception) -> None:
        """Print error message.

        Args:
            error: Exception to display
        """
        if self.json_mode:
            if isinstance(error, DynaRecordError):
                print(json.dumps(error.to_dict(), default=str, indent=2))
            else:
                print(json.dumps({"error": str(error)}, indent=2))
        else:
            error_text = str(error)
            if isinstance(error, DynaRecordError) and error.context:
                context_str = "\n".join(f"{k}: {v}" for k, v in error.context.items())
                error_text = f"{error_text}\n\n{context_str}"

            panel = Panel(
                error_text,
                title="[red]Error[/red]",
                border_style="red",
            )
            console.print(panel)


def _format_value(value: Any) -> str:
    if value is None:
        return "[dim]NULL[/dim]"
    return str(value)


def _cell(row: dict[str, Any], column: str) -> str:
    if column not in row:
        return ""
    return _format_value(row[column])
