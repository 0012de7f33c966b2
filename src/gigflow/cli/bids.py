"""Bids subcommand: submit, list, mine."""

from __future__ import annotations

import typer

from gigflow.cli.common import open_marketplace

app = typer.Typer(help="Submit and list bids")


@app.command("submit")
def submit(
    ctx: typer.Context,
    gig_id: str = typer.Argument(...),
    freelancer: str = typer.Option(..., "--as", help="Freelancer user id"),
    message: str = typer.Option(..., "--message", "-m"),
    price: float = typer.Option(..., "--price"),
) -> None:
    """Submit a bid on an open gig."""
    with open_marketplace(ctx) as market:
        bid = market.ledger.submit_bid(gig_id, freelancer, message, price)
        typer.echo(f"Submitted bid {bid.bid_id}")


@app.command("list")
def list_bids(ctx: typer.Context, gig_id: str = typer.Argument(...)) -> None:
    """List bids for a gig in submission order."""
    with open_marketplace(ctx) as market:
        rows = market.ledger.list_bids_for_gig(gig_id)
        for b in rows:
            typer.echo(f"  {b.bid_id}  {b.status.value:<8}  {b.price:>10.2f}  {b.freelancer_id}  {b.message[:40]}")
        typer.echo(f"Total: {len(rows)} bids")


@app.command("mine")
def mine(ctx: typer.Context, freelancer: str = typer.Option(..., "--as", help="Freelancer user id")) -> None:
    """List a freelancer's bids, newest first."""
    with open_marketplace(ctx) as market:
        rows = market.queries.bids_by_freelancer(freelancer)
        for b in rows:
            typer.echo(f"  {b.bid_id}  gig {b.gig_id}  {b.status.value:<8}  {b.price:>10.2f}")
        typer.echo(f"Total: {len(rows)} bids")
