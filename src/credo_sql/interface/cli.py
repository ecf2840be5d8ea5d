"""
Credo SQL CLI - Command-line interface.

Commands:
- credo-sql init → Create the data directory and records table
- credo-sql status → Show database path and record counts
- credo-sql list TYPE → List records of a type
- credo-sql show ID → Show one record
- credo-sql find TYPE QUERY → Run a tag query
- credo-sql delete ID → Delete a record
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from credo_sql.core.config import settings, setup_logging
from credo_sql.core.errors import QueryError
from credo_sql.core.records import GenericRecord, record_class_for
from credo_sql.core.types import QueryOptions
from credo_sql.storage.codec import row_from_db
from credo_sql.storage.database import TABLE_NAME, RecordDatabase
from credo_sql.storage.service import SQLiteStorageService

app = typer.Typer(
    name="credo-sql",
    help="Credo SQL - SQLite record storage",
    no_args_is_help=True,
)
console = Console()

DbOption = typer.Option(None, "--db", help="Database file (defaults to the configured path)")


def run_async(coro):
    """Run an async function synchronously."""
    return asyncio.run(coro)


def get_service(db: Path | None) -> SQLiteStorageService:
    """Open a storage service on the given or configured database."""
    return SQLiteStorageService(RecordDatabase(db or settings.db_path))


def _records_table(title: str, records: list[GenericRecord]) -> Table:
    table = Table(title=escape(title))
    table.add_column("ID", style="cyan")
    table.add_column("Tags", style="green")
    table.add_column("Updated", style="dim")

    for record in records:
        updated = record.get_tags().get("updated_at", "-")
        table.add_row(escape(record.id), escape(json.dumps(record.get_tags())), str(updated))

    return table


@app.command()
def init(db: Optional[Path] = DbOption):
    """Create the data directory and the records table."""
    setup_logging()

    settings.ensure_directories()
    service = get_service(db)
    console.print(f"[green]✓ Records table ready[/green] in {service.database.db_path}")
    service.close()


@app.command()
def status(db: Optional[Path] = DbOption):
    """Show database path and record counts per type."""
    setup_logging()

    service = get_service(db)
    counts = service.database.count_by_type()
    service.close()

    console.print(f"[bold]Database:[/bold] {service.database.db_path}\n")
    if not counts:
        console.print("[dim]No records[/dim]")
        return

    console.print("Record counts:")
    for record_type, count in counts.items():
        console.print(f"  {record_type}: {count}")


@app.command("list")
def list_records(
    record_type: str = typer.Argument(..., help="Record type to list"),
    db: Optional[Path] = DbOption,
):
    """List all records of a type."""
    setup_logging()

    service = get_service(db)
    records = run_async(service.get_all(record_class_for(record_type)))
    service.close()

    if records:
        console.print(_records_table(record_type, records))
    else:
        console.print(f"[dim]No {record_type} records[/dim]")


@app.command()
def show(
    record_id: str = typer.Argument(..., help="Record id"),
    db: Optional[Path] = DbOption,
):
    """Show one record's type, value and tags."""
    setup_logging()

    database = RecordDatabase(db or settings.db_path)
    rows = database.execute(f"SELECT * FROM {TABLE_NAME} WHERE id = ?", (record_id,))
    database.close()

    if not rows:
        console.print(f"[red]Error: record with id {record_id} not found.[/red]")
        raise typer.Exit(code=1)

    row = row_from_db(rows[0])
    console.print(Panel(
        f"[bold]Value[/bold]\n{escape(json.dumps(row.value, indent=2))}\n\n"
        f"[bold]Tags[/bold]\n{escape(json.dumps(row.tags, indent=2))}",
        title=f"{row.id} ({row.type})",
    ))


@app.command()
def find(
    record_type: str = typer.Argument(..., help="Record type to search"),
    query: str = typer.Argument("{}", help='Tag query as JSON, e.g. \'{"state": "active"}\''),
    limit: Optional[int] = typer.Option(None, min=0, help="Maximum records returned"),
    offset: Optional[int] = typer.Option(None, min=0, help="Matches skipped first"),
    db: Optional[Path] = DbOption,
):
    """Find records of a type whose tags match a query."""
    setup_logging()

    try:
        parsed = json.loads(query)
    except json.JSONDecodeError as e:
        console.print(f"[red]Error: invalid query JSON ({e.msg})[/red]")
        raise typer.Exit(code=2)

    service = get_service(db)
    try:
        records = run_async(service.find_by_query(
            record_class_for(record_type),
            parsed,
            QueryOptions(limit=limit, offset=offset),
        ))
    except QueryError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=2)
    finally:
        service.close()

    if records:
        console.print(_records_table(f"{record_type} matching {query}", records))
    else:
        console.print("[dim]No matching records[/dim]")


@app.command()
def delete(
    record_id: str = typer.Argument(..., help="Record id"),
    db: Optional[Path] = DbOption,
):
    """Delete a record by id."""
    setup_logging()

    service = get_service(db)
    rows = service.database.execute(f"SELECT type FROM {TABLE_NAME} WHERE id = ?", (record_id,))
    if not rows:
        service.close()
        console.print(f"[dim]No record with id {record_id}[/dim]")
        return

    record_type = rows[0]["type"]
    run_async(service.delete_by_id(record_class_for(record_type), record_id))
    service.close()
    console.print(f"[green]✓ Deleted[/green] {record_id} ({record_type})")


if __name__ == "__main__":
    app()
