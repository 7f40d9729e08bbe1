"""Main CLI entry point for queryhydrate.

Provides commands for inspecting dehydrated snapshots on disk.
"""

import json
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from queryhydrate.config import load_settings_from_env
from queryhydrate.errors import SnapshotRecordError
from queryhydrate.hydration.models import (
    MalformedSnapshot,
    SnapshotParseResult,
    parse_dehydrated_state,
)
from queryhydrate.observability.logging import get_logger, setup_logging

logger = get_logger(__name__)

console = Console()


@click.group()
@click.version_option(version="0.1.0", prog_name="queryhydrate")
@click.option("--log-level", default=None, help="Logging level (overrides environment)")
@click.option(
    "--json-logs/--console-logs",
    default=None,
    help="Render logs as JSON or for the console (overrides environment)",
)
def cli(log_level: Optional[str], json_logs: Optional[bool]) -> None:
    """queryhydrate - move query cache state across process boundaries."""
    settings = load_settings_from_env()
    setup_logging(
        log_level=log_level or settings.log_level,
        json_logs=settings.json_logs if json_logs is None else json_logs,
    )


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
def inspect(path: Path, output_format: str) -> None:
    """Validate a snapshot file and summarize its records."""
    result = parse_snapshot_file(path)

    if isinstance(result, MalformedSnapshot):
        raise click.ClickException(f"Malformed snapshot: {result.reason}")

    summaries = [
        {
            "key": record.query_key,
            "updatedAt": record.updated_at,
            "hasData": record.has_data,
            "cacheTime": record.config.cache_time,
        }
        for record in result.records
    ]

    if output_format == "json":
        click.echo(json.dumps({"recordCount": len(summaries), "records": summaries}, indent=2))
        return

    table = Table(title=f"Snapshot: {escape(path.name)} ({len(summaries)} records)")
    table.add_column("Key", style="cyan")
    table.add_column("Updated At", justify="right")
    table.add_column("Data", style="green")
    table.add_column("Cache Time", style="yellow", justify="right")

    for summary in summaries:
        cache_time = summary["cacheTime"]
        table.add_row(
            escape(json.dumps(summary["key"])),
            str(summary["updatedAt"]),
            "yes" if summary["hasData"] else "no",
            "default" if cache_time is None else str(cache_time),
        )

    console.print(table)

    if not summaries:
        console.print("[yellow]Snapshot has no records.[/yellow]")


def parse_snapshot_file(path: Path) -> SnapshotParseResult:
    """Read and parse a snapshot file.

    Raises:
        click.ClickException: If a record in the snapshot is invalid
    """
    try:
        result = parse_dehydrated_state(path.read_bytes())
    except SnapshotRecordError as e:
        logger.error("snapshot_record_invalid", path=str(path), index=e.index)
        raise click.ClickException(e.message) from e

    logger.debug("snapshot_file_parsed", path=str(path))
    return result


def main() -> None:
    """CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
