"""Shared helpers for subcommands."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import typer

from gigflow.errors import MarketplaceError
from gigflow.market.service import Marketplace, build_marketplace


@contextmanager
def open_marketplace(ctx: typer.Context) -> Iterator[Marketplace]:
    """Open the marketplace for one command; marketplace errors exit with code 1."""
    market = build_marketplace(ctx.obj["settings"], db_path=ctx.obj.get("db_path"))
    try:
        yield market
    except MarketplaceError as e:
        typer.echo(f"Error ({e.code}): {e}", err=True)
        raise typer.Exit(1) from e
    finally:
        market.close()
