import asyncio
import json
from pathlib import Path
from typing import Optional

import typer

from api.error_handling import FileServiceError
from api.file_client import FileServiceClient
from config.settings import Settings
from ui.filters.model import DateRange, FileFilters, SizeRange, parse_size_input
from ui.filters.query_params import describe_filters, serialize_filters
from ui.ui_utils import format_percentage, format_size
from utils.logger_setup import setup_logging

app = typer.Typer(
    name="filehub",
    help="CLI tool for the deduplicating file storage service.",
    add_completion=False,
)

_state = {"base_url": None}


@app.callback()
def main(
    base_url: Optional[str] = typer.Option(
        None, "--base-url", envvar="FILEHUB_API_URL", help="Storage API root, e.g. http://localhost:8000/api"
    ),
    log_level: str = typer.Option(Settings.LOG_LEVEL, "--log-level", help="Logging level for the CLI run."),
):
    """Configure logging and the API location for every command."""
    setup_logging(logger_name="filehub_cli", log_level=Settings.get_log_level(log_level), console_output=False)
    _state["base_url"] = base_url


def _client() -> FileServiceClient:
    return FileServiceClient(base_url=_state["base_url"])


def _fail(message: str) -> None:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _build_filters(
    search: str,
    file_type: str,
    min_size: Optional[str],
    max_size: Optional[str],
    start_date: str,
    end_date: str,
) -> FileFilters:
    return FileFilters(
        search=search,
        file_type=file_type,
        size_range=SizeRange(min=parse_size_input("min", min_size), max=parse_size_input("max", max_size)),
        date_range=DateRange(start=start_date, end=end_date),
    )


SEARCH_OPTION = typer.Option("", "--search", "-s", help="Filename substring.")
TYPE_OPTION = typer.Option("", "--type", "-t", help="Exact MIME type, e.g. application/pdf.")
MIN_SIZE_OPTION = typer.Option(None, "--min-size", help="Minimum size in bytes.")
MAX_SIZE_OPTION = typer.Option(None, "--max-size", help="Maximum size in bytes.")
START_OPTION = typer.Option("", "--start-date", help="Uploaded on or after (YYYY-MM-DD).")
END_OPTION = typer.Option("", "--end-date", help="Uploaded on or before (YYYY-MM-DD).")


@app.command()
def files(
    search: str = SEARCH_OPTION,
    file_type: str = TYPE_OPTION,
    min_size: Optional[str] = MIN_SIZE_OPTION,
    max_size: Optional[str] = MAX_SIZE_OPTION,
    start_date: str = START_OPTION,
    end_date: str = END_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Print raw records as JSON."),
):
    """
    List catalog entries matching the given filters.
    """
    filters = _build_filters(search, file_type, min_size, max_size, start_date, end_date)
    for label in describe_filters(filters):
        typer.echo(f"Filter: {label}", err=True)

    try:
        records = asyncio.run(_client().list_files(filters))
    except FileServiceError as e:
        _fail(f"{e.message} ({e.category.value})")

    if as_json:
        typer.echo(json.dumps([record.to_dict() for record in records], indent=2))
        return
    if not records:
        typer.echo("No files match the given filters.")
        return
    for record in records:
        typer.echo(
            f"{record.uuid}  {format_size(record.file_size):>10}  x{record.upload_count:<3} "
            f"{record.mime_type or '-':<28} {record.original_filename}"
        )
    typer.secho(f"{len(records)} file(s)", fg=typer.colors.GREEN)


@app.command()
def stats():
    """
    Show storage and deduplication statistics.
    """
    try:
        result = asyncio.run(_client().get_stats())
    except FileServiceError as e:
        _fail(f"{e.message} ({e.category.value})")

    typer.echo(f"Total uploads:        {result.total_uploads}")
    typer.echo(f"Unique files:         {result.unique_files}")
    typer.echo(f"Duplicates prevented: {result.duplicates_prevented}")
    typer.echo(f"Uploaded volume:      {format_size(result.total_upload_size)}")
    typer.echo(f"Storage used:         {format_size(result.actual_storage_used)}")
    typer.echo(
        f"Storage saved:        {format_size(result.storage_saved)} "
        f"({format_percentage(result.storage_saved_percentage)})"
    )


@app.command()
def upload(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="File to upload."),
):
    """
    Upload a file; identical content is stored only once.
    """
    try:
        record = asyncio.run(_client().upload_path(path))
    except FileServiceError as e:
        _fail(f"{e.message} ({e.category.value})")

    if record.upload_count > 1:
        typer.secho(
            f"Duplicate content: reused {record.uuid} (uploaded {record.upload_count} times)",
            fg=typer.colors.YELLOW,
        )
    else:
        typer.secho(f"Uploaded {record.original_filename} as {record.uuid}", fg=typer.colors.GREEN)


@app.command()
def delete(
    file_id: str = typer.Argument(..., help="Identifier of the catalog entry."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
):
    """
    Delete a catalog entry.
    """
    if not yes:
        typer.confirm(f"Delete {file_id}?", abort=True)
    try:
        asyncio.run(_client().delete_file(file_id))
    except FileServiceError as e:
        _fail(f"{e.message} ({e.category.value})")
    typer.secho(f"Deleted {file_id}", fg=typer.colors.GREEN)


@app.command("query-params")
def query_params(
    search: str = SEARCH_OPTION,
    file_type: str = TYPE_OPTION,
    min_size: Optional[str] = MIN_SIZE_OPTION,
    max_size: Optional[str] = MAX_SIZE_OPTION,
    start_date: str = START_OPTION,
    end_date: str = END_OPTION,
):
    """
    Print the query parameters the given filters translate to (no request is made).
    """
    filters = _build_filters(search, file_type, min_size, max_size, start_date, end_date)
    typer.echo(json.dumps(serialize_filters(filters), sort_keys=True))


if __name__ == "__main__":
    app()
