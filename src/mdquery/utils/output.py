"""Console output for mdquery CLI tools.

Rich-formatted messages and tables behind a single shared console.
"""

import json
from typing import Any, List, Optional

from rich.console import Console
from rich.table import Table

from mdquery.query.hash import json_default


class OutputManager:
    """Singleton Rich Console wrapper for CLI output."""

    _instance: Optional["OutputManager"] = None
    _console: Optional[Console] = None
    _quiet: bool = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._console = Console()
        return cls._instance

    def configure(self, quiet: bool = False) -> None:
        """Configure output behavior.

        Args:
            quiet: Suppress status messages
        """
        self._quiet = quiet

    def success(self, message: str, **kwargs) -> None:
        self._console.print(f"[green]✓[/green] {message}", **kwargs)

    def warn(self, message: str, **kwargs) -> None:
        self._console.print(f"[yellow]⚠[/yellow] {message}", **kwargs)

    def error(self, message: str, **kwargs) -> None:
        """Print error message (red). Never suppressed."""
        self._console.print(f"[red]✗[/red] {message}", **kwargs)

    def status(self, message: str, **kwargs) -> None:
        if not self._quiet:
            self._console.print(f"[dim]{message}[/dim]", **kwargs)

    def print_table(
        self,
        title: str,
        columns: List[str],
        rows: List[List[Any]],
        **kwargs,
    ) -> None:
        table = Table(title=title, **kwargs)
        for col in columns:
            table.add_column(col)
        for row in rows:
            table.add_row(*["" if cell is None else str(cell) for cell in row])
        self._console.print(table)

    def print_json(self, data: Any) -> None:
        """Print data as indented JSON, without markup or wrapping.

        Pydantic models (validated predicate configs) are printed as their
        JSON dump.
        """
        self._console.print(
            json.dumps(data, indent=2, default=json_default),
            soft_wrap=True,
            markup=False,
            highlight=False,
        )


output = OutputManager()
