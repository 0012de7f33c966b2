"""Hire command."""

from __future__ import annotations

import typer

from gigflow.cli.common import open_marketplace


def hire(
    ctx: typer.Context,
    bid_id: str = typer.Argument(...),
    owner: str | None = typer.Option(None, "--as", help="Gig owner user id; ownership is checked when given"),
) -> None:
    """Hire a bid: assigns its gig and rejects every other pending bid."""
    with open_marketplace(ctx) as market:
        result = market.engine.hire(bid_id, caller_id=owner)
        typer.echo(f"Hired {result.freelancer_id} for gig {result.gig_id} ({result.rejected_count} bids rejected)")
