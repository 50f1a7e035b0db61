# ABOUTME: Rich table utilities for styled, colorful run summaries and dataset lookups
# ABOUTME: Provides pre-configured table generators for the CLI commands

from typing import Any

from rich.box import ROUNDED
from rich.console import Console
from rich.table import Table


def _base_table(title: str, title_style: str, expand: bool, box_style=ROUNDED, **options) -> Table:
    return Table(
        title=f"[{title_style}]{title}[/{title_style}]",
        box=box_style,
        show_header=True,
        border_style="cyan",
        title_justify="left",
        expand=expand,
        **options,
    )


def create_key_value_table(
    title: str,
    data: dict[str, str],
    title_style: str = "bold cyan",
    key_style: str = "bold blue",
    value_style: str = "green",
    box_style=ROUNDED,
) -> Table:
    """Two-column Field/Value table; values are stringified as given.

    Args:
        title: Table title, may include emoji
        data: Rows in display order
        title_style: Style for the title markup
        key_style: Style for the field column
        value_style: Style for the value column
        box_style: Rich box used for borders
    """
    table = _base_table(title, title_style, expand=False, box_style=box_style, header_style="bold magenta")
    table.add_column("Field", style=key_style)
    table.add_column("Value", style=value_style)

    for key, value in data.items():
        table.add_row(key, str(value))
    return table


def create_multi_column_table(
    title: str,
    columns: list[tuple[str, str]],
    rows: list[list[str]],
    title_style: str = "bold cyan",
    header_style: str = "bold magenta",
    alternate_row_styles: list[str] | None = None,
    box_style=ROUNDED,
) -> Table:
    """Full-width table with zebra striping; ``columns`` holds (name, style) pairs."""
    table = _base_table(
        title,
        title_style,
        expand=True,
        box_style=box_style,
        header_style=header_style,
        row_styles=alternate_row_styles or ["", "dim"],
    )
    for name, style in columns:
        table.add_column(name, style=style)

    for row in rows:
        table.add_row(*row)
    return table


def create_run_summary_table(report: Any) -> Table:
    """Create the end-of-run summary for a PipelineReport."""
    data = {
        "🧪 Elements": f"{report.element_count:,}",
        "📚 Tier sections": str(len(report.sections)),
        "🔗 Used-in entries": f"{len(report.dataset.used_in):,}",
        "📄 Output": str(report.output_path),
    }

    downloads = report.downloads
    if downloads is None:
        data["🖼️ Icons"] = "⏭️ Skipped (--skip-icons)"
    else:
        data["🖼️ Icons downloaded"] = str(downloads.downloaded)
        data["🖼️ Icons failed"] = str(downloads.failed)
        data["🖼️ Icons skipped"] = str(downloads.skipped)

    if report.conflicts:
        data["⚠️ Identifier conflicts"] = str(len(report.conflicts))
    if report.sections_without_table:
        data["⚠️ Sections without table"] = ", ".join(report.sections_without_table)
    if report.discarded_recipes:
        data["⚠️ Discarded base-tier recipes"] = str(report.discarded_recipes)
    if report.unresolved:
        data["❓ Unresolved ingredients"] = str(len(report.unresolved))

    return create_key_value_table(
        title="✨ Dataset Build Summary",
        data=data,
        title_style="bold magenta",
        key_style="cyan",
        value_style="white",
    )


def create_failures_table(failures: list[Any], limit: int = 20) -> Table:
    """Create a table listing icon downloads that failed."""
    rows = [[failure.element_id, failure.reason or "unknown"] for failure in failures[:limit]]
    if len(failures) > limit:
        rows.append(["…", f"{len(failures) - limit} more"])

    return create_multi_column_table(
        title="❌ Failed Icon Downloads",
        columns=[("Element", "bold red"), ("Reason", "white")],
        rows=rows,
    )


def create_element_table(element: Any, used_in: list[str], tier_label: str) -> Table:
    """Create a detail table for one element."""
    recipes = [" + ".join(recipe.ingredients) for recipe in element.recipes]

    data = {
        "🆔 ID": element.id,
        "📛 Name": element.name,
        "🏷️ Tier": f"{tier_label} ({element.tier})",
        "🖼️ Icon": element.icon_ref or "❌ Missing",
        "⚗️ Recipes": "\n".join(recipes) if recipes else "—",
        "🔗 Used in": ", ".join(used_in) if used_in else "—",
    }

    return create_key_value_table(
        title=f"🧪 {element.name}",
        data=data,
        title_style="bold magenta",
        key_style="cyan",
        value_style="white",
    )


def create_tier_breakdown_table(groups: dict[int, list[Any]], tier_names: dict[int, str]) -> Table:
    """Create a per-tier element count table."""
    rows = []
    for tier, elements in groups.items():
        recipe_total = sum(len(element.recipes) for element in elements)
        rows.append([tier_names[tier], str(len(elements)), str(recipe_total)])

    return create_multi_column_table(
        title="📊 Elements by Tier",
        columns=[("Tier", "bold blue"), ("Elements", "green"), ("Recipes", "yellow")],
        rows=rows,
    )


def create_logging_status_table(status: dict[str, Any]) -> Table:
    """Create a styled table for logging configuration status."""
    log_files = status.get("log_files", {})

    data = {
        "🎛️ Mode": status["mode"],
        "📁 Log Directory": status.get("log_directory") or "Not created",
        "📄 Main Log": log_files.get("main") or "—",
        "🧾 JSON Log": log_files.get("json") or "—",
        "🚨 Error Log": log_files.get("errors") or "—",
        "🔇 Suppressed": ", ".join(status.get("third_party_suppressed", [])),
    }

    return create_key_value_table(title="📊 Logging Configuration", data=data)


def print_rich_table(console: Console, table: Table) -> None:
    """Print a table with a blank line on either side."""
    console.print()
    console.print(table)
    console.print()
