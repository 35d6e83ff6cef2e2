# ABOUTME: Main CLI application entry point using asyncclick for native async support
# ABOUTME: Provides commands for updating, re-parsing and inspecting infobox snapshots

import contextlib

import asyncclick as click
from rich.console import Console
from rich.panel import Panel

from wiki_infoboxes.config import get_config
from wiki_infoboxes.core.service import InfoboxUpdateService
from wiki_infoboxes.persistence import SnapshotCorruptError, SnapshotNotFoundError
from wiki_infoboxes.utils.logging import (
    LoggingMode,
    configure_logging,
    create_smart_progress,
    get_logging_status,
    with_pipeline_context,
)
from wiki_infoboxes.utils.rich_tables import (
    create_identifier_table,
    create_logging_status_table,
    create_update_summary_table,
    print_rich_table,
)

console = Console()

TEMPLATE_CHOICES = ["all", "chembox", "drugbox"]


def _selected_templates(template: str) -> list[str] | None:
    return None if template == "all" else [template]


@click.command()
@click.option(
    "--template", "-t", type=click.Choice(TEMPLATE_CHOICES), default="all", show_default=True, help="Template to update"
)
@click.option("--redownload", is_flag=True, help="Download every page again instead of only new ones")
@click.pass_context
async def update(ctx, template: str, redownload: bool):
    """
    🧪 Download new infobox pages and parse their chemical identifiers.

    Pages already in the raw snapshot are kept as they are; only pages that
    started embedding the template since the last run are fetched. Superseded
    snapshots are archived before being overwritten.
    """
    await _update_async(template, redownload, ctx.obj["json_output"])


async def _update_async(template: str, redownload: bool, json_output: bool):
    with with_pipeline_context("infobox_update", template=template, redownload=redownload) as logger:
        logger.info("Starting update")

        if json_output:
            progress, tracker_callback = None, None
        else:
            console.print(Panel.fit("🧪 [bold cyan]Wiki Infoboxes Update[/bold cyan] 🧪", border_style="magenta"))
            progress, _, tracker = create_smart_progress(console)
            tracker_callback = tracker.update

        service = InfoboxUpdateService(progress_callback=tracker_callback)
        try:
            with progress if progress is not None else contextlib.nullcontext():
                summaries = await service.update_all(_selected_templates(template), redownload=redownload)
        except (OSError, SnapshotCorruptError) as e:
            logger.error("Snapshot I/O failed", error=str(e), error_type=type(e).__name__)
            raise click.ClickException(f"Snapshot I/O failed: {e}") from e
        finally:
            await service.close()

        logger.info("Update complete", templates=[s.template for s in summaries])
        if not json_output:
            print_rich_table(console, create_update_summary_table(summaries))


@click.command()
@click.option(
    "--template", "-t", type=click.Choice(TEMPLATE_CHOICES), default="all", show_default=True, help="Template to parse"
)
@click.pass_context
async def reparse(ctx, template: str):
    """
    🔁 Re-parse stored raw HTML into the parsed snapshot without contacting the wiki.
    """
    json_output = ctx.obj["json_output"]
    config = get_config()
    names = _selected_templates(template)
    service = InfoboxUpdateService(config=config, progress_callback=None if json_output else console.print)

    try:
        for target in config.templates():
            if names and target.name not in names:
                continue
            try:
                outcome = service.reparse_template(target)
            except SnapshotNotFoundError:
                console.print(f"[yellow]No raw snapshot for {target.name}, run 'update' first.[/yellow]")
                continue
            if not json_output:
                archived = f" (previous version archived to {outcome.archived_to})" if outcome.archived_to else ""
                console.print(f"✅ {target.parsed_snapshot}: {outcome.updated_count:,} pages{archived}")
    except (OSError, SnapshotCorruptError) as e:
        raise click.ClickException(f"Re-parse failed: {e}") from e
    finally:
        await service.close()


@click.command(name="fetch-page")
@click.argument("page")
@click.pass_context
async def fetch_page(ctx, page: str):
    """
    🔍 Fetch one page (by title or numeric page ID) and show its infobox identifiers.

    Nothing is written to the snapshots.
    """
    json_output = ctx.obj["json_output"]
    service = InfoboxUpdateService()
    try:
        result = await service.fetch_page(page)
    finally:
        await service.close()

    if result is None:
        raise click.ClickException(f"Could not fetch page {page!r}")

    record, parsed = result
    if json_output:
        click.echo(parsed.model_dump_json(by_alias=True, indent=2))
        return

    console.print(f"Found {len(record.infobox_html)} infobox tables, {len(parsed.infoboxes)} with data")
    print_rich_table(console, create_identifier_table(parsed))


def _initialize_logging(json_output: bool, log_level: str | None = None, log_file: str | None = None) -> None:
    """Initialize logging configuration."""
    try:
        config = get_config()
        mode = LoggingMode.PRODUCTION if json_output else LoggingMode.INTERACTIVE

        # Use config defaults when CLI parameters are not provided
        final_log_level = log_level or config.log_level
        final_log_file = log_file or (str(config.log_file) if config.log_file else None)

        configure_logging(mode=mode, log_level=final_log_level, log_file=final_log_file)
    except OSError:
        # Fall back to minimal logging configuration
        configure_logging(mode=LoggingMode.PRODUCTION, log_level=log_level or "INFO")


@click.command(name="logging-status")
def logging_status():
    """
    📊 Show current logging configuration and status.
    """
    status = get_logging_status()
    logging_table = create_logging_status_table(status)
    print_rich_table(console, logging_table)


@click.group(invoke_without_command=True)
@click.option("--json", is_flag=True, help="Output structured JSON logs instead of rich interface")
@click.option("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ERROR)")
@click.option("--log-file", help="Custom log file path")
@click.pass_context
def app(ctx, json: bool, log_level: str | None, log_file: str | None):
    """
    🧪 Wiki Infoboxes - Chemical identifiers from Wikipedia infoboxes

    Collects CAS numbers, InChIKeys, SMILES and CompTox DTXSIDs from every
    Wikipedia article carrying a Chembox or Drugbox, keeping dated archives of
    earlier snapshots.
    """
    # Store global options in context for commands to access
    ctx.ensure_object(dict)
    ctx.obj["json_output"] = json

    # Initialize logging once here instead of in each command
    _initialize_logging(json, log_level, log_file)

    # Show help if no command provided
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Add commands to the main group
app.add_command(update)
app.add_command(reparse)
app.add_command(fetch_page)
app.add_command(logging_status)


if __name__ == "__main__":
    app()
