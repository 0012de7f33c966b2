"""Database subcommand: init."""

from __future__ import annotations

import typer

from gigflow.storage.db import get_connection, init_schema

app = typer.Typer(help="Database management")


@app.command("init")
def init(ctx: typer.Context) -> None:
    """Create tables and sequences if missing."""
    db_path = ctx.obj.get("db_path") or ctx.obj["settings"].db_path
    conn = get_connection(db_path)
    try:
        init_schema(conn)
        typer.echo(f"Schema ready at {db_path}")
    finally:
        conn.close()
