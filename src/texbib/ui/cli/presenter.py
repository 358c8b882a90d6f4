"""Rich renderers for resolved documents and raw entry streams."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from texbib.core.document import Bibliography, Document
from texbib.core.model import (
    Abbreviation,
    BibliographyEntry,
    CommentEntry,
    PreambleEntry,
    RawEntry,
    StringFragment,
    StringLiteral,
    VariableEntry,
)

from .state import get_cli_state


if TYPE_CHECKING:
    from rich.panel import Panel


_PRIMARY_FIELDS = (
    ("Title", ("title",)),
    ("Authors", ("author",)),
    ("Year", ("year",)),
    ("Journal", ("journal", "booktitle")),
)


def describe_fragments(fragments: Sequence[StringFragment]) -> str:
    """Render fragments the way they were written, joined with ``#``."""
    parts: list[str] = []
    for fragment in fragments:
        match fragment:
            case StringLiteral(text=text):
                parts.append(f"{{{text}}}")
            case Abbreviation(name=name):
                parts.append(name)
            case _:
                raise TypeError(f"Unsupported string fragment: {fragment!r}")
    return " # ".join(parts)


def build_reference_panel(bibliography: Bibliography) -> Panel:
    """Create a Rich panel that visualises a single bibliography entry."""
    from rich import box
    from rich.markup import escape
    from rich.panel import Panel
    from rich.table import Table

    fields = bibliography.tags
    grid = Table.grid(padding=(0, 1))
    grid.add_column(style="bold green", no_wrap=True)
    grid.add_column()

    for label, keys in _PRIMARY_FIELDS:
        for key in keys:
            value = fields.pop(key, None)
            if value and value.strip():
                grid.add_row(label, escape(value.strip()))
                break

    for key, value in sorted(fields.items()):
        if value.strip():
            grid.add_row(key.title(), escape(value))

    title = escape(f"{bibliography.citation_key} ({bibliography.entry_type})")
    return Panel(grid, title=title, box=box.SIMPLE)


def print_document_overview(document: Document) -> None:
    """Render a summary table followed by variables, preambles and entries."""
    from rich import box
    from rich.markup import escape
    from rich.table import Table

    console = get_cli_state().console

    summary = Table(title="Document", box=box.SQUARE, header_style="bold cyan")
    summary.add_column("Section", style="magenta")
    summary.add_column("Count", justify="right")
    summary.add_row("Bibliographies", str(len(document.bibliographies)))
    summary.add_row("String variables", str(len(document.variables)))
    summary.add_row("Preambles", str(len(document.preambles)))
    summary.add_row("Comments", str(len(document.comments)))
    console.print(summary)

    variables = document.variables
    if variables:
        table = Table(title="String Variables", box=box.SIMPLE, header_style="bold cyan")
        table.add_column("Name", style="green")
        table.add_column("Value")
        for name, value in sorted(variables.items()):
            table.add_row(escape(name), escape(value))
        console.print(table)

    for index, preamble in enumerate(document.preambles, start=1):
        console.print(f"[bold]Preamble {index}:[/bold] {escape(preamble)}", highlight=False)

    if not document.bibliographies:
        console.print("No bibliography entries found.")
        return
    console.print("[bold]Entries[/bold]")
    for bibliography in document.bibliographies:
        console.print(build_reference_panel(bibliography))


def print_raw_entries(entries: Sequence[RawEntry]) -> None:
    """Render the unresolved entry stream as a table."""
    from rich import box
    from rich.markup import escape
    from rich.table import Table

    console = get_cli_state().console
    table = Table(title="Raw Entries", box=box.SQUARE, header_style="bold cyan")
    table.add_column("Line", justify="right")
    table.add_column("Kind", style="magenta")
    table.add_column("Name", style="green")
    table.add_column("Value")

    for entry in entries:
        line = str(entry.span.line) if entry.span is not None else "-"
        match entry:
            case VariableEntry(variable=variable):
                value_text = describe_fragments(variable.value)
                table.add_row(line, "string", escape(variable.key), escape(value_text))
            case CommentEntry(text=text):
                table.add_row(line, "comment", "-", escape(text))
            case PreambleEntry(value=value):
                table.add_row(line, "preamble", "-", escape(describe_fragments(value)))
            case BibliographyEntry(entry_type=entry_type, citation_key=key, tags=tags):
                rendered = "\n".join(
                    f"{tag.key} = {describe_fragments(tag.value)}" for tag in tags
                )
                table.add_row(line, escape(entry_type), escape(key), escape(rendered) or "-")
            case _:
                raise TypeError(f"Unsupported raw entry: {entry!r}")

    if not entries:
        table.add_row("-", "-", "-", "No entries found")
    console.print(table)


__all__ = [
    "build_reference_panel",
    "describe_fragments",
    "print_document_overview",
    "print_raw_entries",
]
