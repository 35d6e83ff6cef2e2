# ABOUTME: Rich tables for the CLI: per-template run summary, single-page identifiers, logging status
# ABOUTME: All tables share one styled base so the commands look alike

from collections.abc import Iterable
from typing import Any

from rich.box import ROUNDED, SIMPLE, Box
from rich.console import Console
from rich.table import Table


def _styled_table(title: str, title_style: str = "bold cyan", box: Box = ROUNDED, expand: bool = True) -> Table:
    return Table(
        title=f"[{title_style}]{title}[/{title_style}]",
        title_justify="left",
        box=box,
        header_style="bold magenta",
        border_style="cyan",
        row_styles=["", "dim"],
        expand=expand,
    )


def create_key_value_table(title: str, data: dict[str, str], title_style: str = "bold green") -> Table:
    """Two-column Setting/Value table, values shown as plain text."""
    table = _styled_table(title, title_style=title_style, expand=False)
    table.add_column("Setting", style="blue")
    table.add_column("Value", style="white")
    for key, value in data.items():
        table.add_row(key, str(value))
    return table


def create_multi_column_table(
    title: str, columns: list[tuple[str, str]], rows: Iterable[list[str]], box: Box = ROUNDED
) -> Table:
    """Table with one styled column per ``(name, style)`` pair and alternating dim rows."""
    table = _styled_table(title, box=box)
    for name, style in columns:
        table.add_column(name, style=style)
    for row in rows:
        table.add_row(*row)
    return table


def _stage_cell(outcome: Any) -> str:
    if not outcome.written:
        return f"[dim]{outcome.updated_count:,} (unchanged)[/dim]"
    return f"[bold green]{outcome.updated_count:,}[/bold green] ({outcome.added_count:+,d})"


def create_update_summary_table(summaries: list[Any]) -> Table:
    """One row per TemplateRunSummary: snapshot sizes, identifier coverage and archived copies."""
    rows = []
    for summary in summaries:
        archived = [str(o.archived_to) for o in (summary.raw, summary.parsed) if o.archived_to]
        rows.append(
            [
                summary.template,
                summary.template_title,
                _stage_cell(summary.raw),
                _stage_cell(summary.parsed),
                f"{summary.pages_with_identifiers:,}",
                "\n".join(archived) or "-",
            ]
        )

    return create_multi_column_table(
        title="🧪 Infobox Update Summary",
        columns=[
            ("Template", "cyan"),
            ("Wiki Title", "white"),
            ("Raw Pages", "white"),
            ("Parsed Pages", "white"),
            ("With Identifiers", "yellow"),
            ("Archived", "dim white"),
        ],
        rows=rows,
    )


def create_identifier_table(parsed_page: Any) -> Table:
    """One row per retained infobox of a ParsedPageRecord."""

    def _join(values) -> str:
        return "\n".join(sorted(values)) or "[dim]-[/dim]"

    rows = [
        [
            infobox.title or "[dim]untitled[/dim]",
            _join(infobox.cas_numbers),
            _join(infobox.inchi_keys),
            _join(infobox.dashboard_ids),
            _join(infobox.smiles),
        ]
        for infobox in parsed_page.infoboxes
    ]

    return create_multi_column_table(
        title=f"📄 {parsed_page.title} (page {parsed_page.page_id})",
        columns=[
            ("Infobox", "bold cyan"),
            ("CAS RN", "green"),
            ("InChIKey", "magenta"),
            ("DTXSID", "yellow"),
            ("SMILES", "white"),
        ],
        rows=rows,
        box=SIMPLE,
    )


def create_logging_status_table(status: dict[str, Any]) -> Table:
    """Summarise get_logging_status(): mode, log folder, active log files and muted libraries."""
    data = {
        "🔧 Mode": status["mode"].title(),
        "📁 Log Directory": status["log_directory"] or "N/A (production mode)",
        "🔇 Suppressed Libraries": ", ".join(status["third_party_suppressed"]),
    }
    labels = {"main": "📝 Main Log", "json": "📊 JSON Log", "errors": "🚨 Error Log"}
    for key, label in labels.items():
        if status["log_files"][key]:
            data[label] = status["log_files"][key]

    return create_key_value_table("🔍 Logging Configuration", data)


def print_rich_table(console: Console, table: Table) -> None:
    console.print()
    console.print(table)
    console.print()
