"""Notifications subcommand: list."""

from __future__ import annotations

import typer

from gigflow.cli.common import open_marketplace

app = typer.Typer(help="Notification log")


@app.command("list")
def list_notifications(
    ctx: typer.Context,
    user_id: str = typer.Argument(...),
    unread: bool = typer.Option(False, "--unread", help="Only unread notifications"),
) -> None:
    with open_marketplace(ctx) as market:
        rows = market.notifications.list_for_user(user_id, unread_only=unread)
        for n in rows:
            mark = " " if n.read else "*"
            typer.echo(f"{mark} {n.created_at}  {n.kind:<8}  {n.message}  (gig {n.gig_id})")
        typer.echo(f"Total: {len(rows)} notifications")
