"""Gigs subcommand: post, list, show."""

from __future__ import annotations

import typer

from gigflow.cli.common import open_marketplace
from gigflow.models import GigStatus

app = typer.Typer(help="Post and browse gigs")


@app.command("post")
def post(
    ctx: typer.Context,
    owner: str = typer.Option(..., "--owner", help="Owner user id"),
    title: str = typer.Option(..., "--title", "-t"),
    description: str = typer.Option(..., "--description", "-d"),
    budget: float = typer.Option(..., "--budget", "-b"),
) -> None:
    """Post a new open gig."""
    with open_marketplace(ctx) as market:
        gig = market.ledger.post_gig(owner, title, description, budget)
        typer.echo(f"Posted gig {gig.gig_id}")


@app.command("list")
def list_gigs(
    ctx: typer.Context,
    status: GigStatus | None = typer.Option(None, "--status", "-s", help="open or assigned"),
    search: str | None = typer.Option(None, "--search", "-q", help="Match title or description"),
    owner: str | None = typer.Option(None, "--owner", help="Only gigs posted by this user"),
) -> None:
    """List gigs, newest first."""
    with open_marketplace(ctx) as market:
        rows = market.queries.list_gigs(status=status, owner_id=owner, search=search)
        for g in rows:
            typer.echo(f"  {g.gig_id}  {g.status.value:<8}  {g.budget:>10.2f}  {g.bid_count:>3} bids  {g.title[:50]}")
        typer.echo(f"Total: {len(rows)} gigs")


@app.command("show")
def show(ctx: typer.Context, gig_id: str = typer.Argument(...)) -> None:
    """Show a gig and its bids."""
    with open_marketplace(ctx) as market:
        gig = market.queries.get_gig(gig_id)
        typer.echo(f"{gig.title}  [{gig.status.value}]  budget {gig.budget:.2f}  owner {gig.owner_id}")
        typer.echo(gig.description)
        for b in market.queries.bids_for_gig(gig_id):
            typer.echo(f"  {b.bid_id}  {b.status.value:<8}  {b.price:>10.2f}  {b.freelancer_id}")
