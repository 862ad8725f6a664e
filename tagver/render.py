"""
Rendering functions for tagver output.

This module handles all pretty-printing and table formatting.
Services return data, this module makes it human-readable.
"""

from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.table import Table

console = Console()


def _table(title: Optional[str] = None) -> Table:
    return Table(
        title=title,
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )


def render_table(headers: List[str], rows: List[List[Any]], title: Optional[str] = None) -> None:
    """
    Render a generic table with the given headers and rows.

    Args:
        headers: List of column headers
        rows: List of rows, where each row is a list of values
        title: Optional table title
    """
    if not rows:
        console.print("[yellow]No data to display.[/yellow]")
        return

    table = _table(title)
    for header in headers:
        table.add_column(header)
    for row in rows:
        table.add_row(*["" if val is None else str(val) for val in row])

    console.print(table)


def render_description(description: Dict[str, Any]) -> None:
    """Render the result of VersionCalculator.describe() as a key/value table."""
    table = _table("Version")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("version", f"[bold]{description['version']}[/bold]")
    table.add_row("strategy", description['strategy'])
    table.add_row("lookup policy", description['lookup_policy'])
    table.add_row("max depth", str(description['max_depth']) if description['max_depth'] is not None else "unbounded")
    table.add_row("dirty", "yes" if description['dirty'] else "no")

    head = description.get('head')
    if head:
        table.add_row("head", head['id'][:8])
    base = description.get('base')
    if base:
        table.add_row("base commit", base['id'][:8])
        table.add_row("distance", str(base['distance']))
    table.add_row("base tag", description.get('base_tag') or "-")

    console.print(table)


def render_tags_table(tags: List[Dict[str, Any]], title: str = "Tags") -> None:
    """Render classified tags, one row per tag."""
    if not tags:
        console.print("[yellow]No tags found.[/yellow]")
        return

    table = _table(title)
    table.add_column("Tag", style="cyan")
    table.add_column("Type", style="blue")
    table.add_column("Commit", style="dim")
    table.add_column("Version", style="green")
    table.add_column("On HEAD", style="yellow")

    for tag in tags:
        table.add_row(
            tag['name'],
            tag['type'],
            (tag.get('target') or '')[:8],
            tag.get('version') or '',
            "✓" if tag.get('on_head') else ""
        )

    console.print(table)


def render_metadata_table(metadata: Dict[str, str]) -> None:
    """Render computation metadata as a key/value table."""
    render_table(["Metadata", "Value"], [[k, v] for k, v in metadata.items()], title="Metadata")
