# ABOUTME: Main CLI application entry point using asyncclick for native async support
# ABOUTME: Provides commands to build the element dataset, inspect it, and check logging setup

import json as jsonlib
from pathlib import Path

import asyncclick as click
from rich.console import Console
from rich.panel import Panel

from alchemy_scribe.config import Config, get_config
from alchemy_scribe.core.catalog import ElementCatalog, tier_name
from alchemy_scribe.core.pipeline import DatasetPipeline, PipelineReport
from alchemy_scribe.extraction.base import ScrapeError
from alchemy_scribe.utils.logging import (
    LoggingMode,
    configure_logging,
    create_download_progress,
    get_logging_status,
    with_pipeline_context,
)
from alchemy_scribe.utils.rich_tables import (
    create_element_table,
    create_failures_table,
    create_logging_status_table,
    create_run_summary_table,
    create_tier_breakdown_table,
    print_rich_table,
)

console = Console()


def _scrape_config(source_url: str | None, output: Path | None, icons_dir: Path | None) -> Config:
    """Apply command-line overrides on top of the environment config."""
    overrides: dict[str, object] = {}
    if source_url:
        overrides["source_url"] = source_url
    if output:
        overrides["output_path"] = output
    if icons_dir:
        overrides["icons_dir"] = icons_dir
    return get_config().model_copy(update=overrides)


def _report_summary(report: PipelineReport) -> dict[str, object]:
    downloads = report.downloads
    return {
        "elements": report.element_count,
        "output": str(report.output_path),
        "icons": None
        if downloads is None
        else {"downloaded": downloads.downloaded, "failed": downloads.failed, "skipped": downloads.skipped},
        "identifier_conflicts": len(report.conflicts),
        "unresolved_ingredients": len(report.unresolved),
    }


@click.command()
@click.option("--source-url", help="Wiki page to scrape (defaults to the configured source)")
@click.option("--output", "-o", type=click.Path(path_type=Path), help="Dataset artifact path")
@click.option("--icons-dir", type=click.Path(path_type=Path), help="Directory for the icon cache")
@click.option("--skip-icons", is_flag=True, help="Build the dataset without downloading icons")
@click.pass_context
async def scrape(ctx, source_url: str | None, output: Path | None, icons_dir: Path | None, skip_icons: bool):
    """
    🧪 Scrape the elements wiki page and build the dataset.

    Fetches the page, extracts every element and recipe, downloads missing
    icons and writes the sorted dataset with its used-in index.
    """
    json_output = ctx.obj["json_output"]
    config = _scrape_config(source_url, output, icons_dir)

    with with_pipeline_context("dataset_ingestion", source_url=config.source_url) as logger:
        pipeline = DatasetPipeline(config=config)

        try:
            if json_output:
                report = await pipeline.run(download_icons=not skip_icons)
            else:
                console.print(
                    Panel.fit(
                        f"🧪 [bold cyan]Alchemy Scribe[/bold cyan] 🧪\nSource: {config.source_url}",
                        border_style="magenta",
                    )
                )
                report = await _run_with_progress(pipeline, download_icons=not skip_icons)
        except ScrapeError as e:
            logger.error("Dataset build failed", error=str(e), error_type=type(e).__name__)
            if json_output:
                click.echo(jsonlib.dumps({"success": False, "error": str(e)}))
            else:
                console.print(f"[red]❌ {e}[/red]")
            raise click.exceptions.Exit(1)
        finally:
            await pipeline.close()

        logger.info("Dataset build complete", element_count=report.element_count)

    if json_output:
        click.echo(jsonlib.dumps({"success": True, **_report_summary(report)}))
        return

    print_rich_table(console, create_run_summary_table(report))
    if report.downloads and report.downloads.failures:
        print_rich_table(console, create_failures_table(report.downloads.failures))
    console.print("✅ [bold green]Done![/bold green]")


async def _run_with_progress(pipeline: DatasetPipeline, download_icons: bool) -> PipelineReport:
    """Run the pipeline with a live progress bar for the icon stage."""
    _progress, _task_id, tracker = create_download_progress(console, "📜 Fetching and parsing the wiki page...")

    def on_icon(element, outcome, index, total):
        if index == 1:
            tracker.set_total(total)
        tracker.advance(outcome.status.value, element.name)

    with tracker:
        return await pipeline.run(download_icons=download_icons, progress_callback=on_icon)


def _load_catalog(dataset: Path | None) -> ElementCatalog:
    path = dataset or get_config().output_path
    if not path.exists():
        console.print(f"[red]❌ No dataset at {path}. Run `alchemy-scribe scrape` first.[/red]")
        raise click.exceptions.Exit(1)
    return ElementCatalog.from_file(path)


@click.command()
@click.argument("element")
@click.option("--dataset", "-d", type=click.Path(path_type=Path), help="Dataset artifact to read")
@click.pass_context
async def show(ctx, element: str, dataset: Path | None):
    """
    🔍 Show an element's recipes and what it is used in.

    ELEMENT may be an identifier ("philosopher-s-stone") or a display name.
    """
    catalog = _load_catalog(dataset)
    found = catalog.get_by_id(element) or catalog.find(element)
    if found is None:
        console.print(f"[yellow]No element named {element!r} in the dataset.[/yellow]")
        raise click.exceptions.Exit(1)

    used_in = catalog.used_in(found.id)
    if ctx.obj["json_output"]:
        payload = found.model_dump(mode="json", by_alias=True)
        click.echo(jsonlib.dumps({**payload, "usedIn": used_in}))
        return

    print_rich_table(console, create_element_table(found, used_in, tier_name(found.tier)))


@click.command()
@click.option("--dataset", "-d", type=click.Path(path_type=Path), help="Dataset artifact to read")
@click.pass_context
async def tiers(ctx, dataset: Path | None):
    """
    📊 Show how many elements each tier holds.
    """
    catalog = _load_catalog(dataset)
    groups = catalog.by_tier()

    if ctx.obj["json_output"]:
        click.echo(jsonlib.dumps({tier_name(tier): len(elements) for tier, elements in groups.items()}))
        return

    names = {tier: tier_name(tier) for tier in groups}
    print_rich_table(console, create_tier_breakdown_table(groups, names))
    console.print(f"🧪 [bold]{len(catalog)}[/bold] elements in total")


def _initialize_logging(json_output: bool, log_level: str | None = None, log_file: str | None = None) -> None:
    """Set up sinks once per invocation; CLI flags win over the environment."""
    config = get_config()
    mode = LoggingMode.PRODUCTION if json_output else config.log_mode
    level = log_level or config.log_level
    if log_file is None and config.log_file is not None:
        log_file = str(config.log_file)

    configure_logging(mode=mode, log_level=level, log_file=log_file)


@click.command(name="logging-status")
def logging_status():
    """
    📊 Show where logs are going for this environment.
    """
    print_rich_table(console, create_logging_status_table(get_logging_status()))


@click.group(invoke_without_command=True)
@click.option("--json", is_flag=True, help="Print JSON results and JSON log lines instead of the rich interface")
@click.option("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ERROR)")
@click.option("--log-file", help="Write the human-readable log here instead of logs/")
@click.pass_context
def app(ctx, json: bool, log_level: str | None, log_file: str | None):
    """
    🧪 Alchemy Scribe - Element dataset builder for Little Alchemy 2

    Scrape the community wiki into a sorted, cross-referenced element dataset
    with a local icon cache, ready for the browsing app.
    """
    ctx.ensure_object(dict)
    ctx.obj["json_output"] = json
    _initialize_logging(json, log_level, log_file)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


app.add_command(scrape)
app.add_command(show)
app.add_command(tiers)
app.add_command(logging_status)


if __name__ == "__main__":
    app()
