"""Root CLI app - entry point and command registration."""

from pathlib import Path

import typer

from gigflow.config import get_settings
from gigflow.config.settings import configure_logging

app = typer.Typer(
    name="gigflow",
    help="GigFlow - freelance marketplace: gigs, bids, and hiring.",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    config_dir: Path | None = typer.Option(
        None, "--config-dir", "-C", help="Config directory (default: ./config or package config)"
    ),
    profile: str | None = typer.Option(
        None, "--profile", "-p", help="Config profile (e.g. dev) to overlay on default.toml"
    ),
    db_path: str | None = typer.Option(None, "--db", help="Database path (overrides config)"),
) -> None:
    """Configure logging and store options in context."""
    settings = get_settings(profile, config_dir)
    configure_logging(settings)
    ctx.obj = {"settings": settings, "config_dir": config_dir, "profile": profile, "db_path": db_path}


# Subcommands registered from other modules
from gigflow.cli import api_cmd, bids, db_cmd, gigs, hire_cmd, notifications  # noqa: E402

app.add_typer(db_cmd.app, name="db")
app.add_typer(gigs.app, name="gigs")
app.add_typer(bids.app, name="bids")
app.add_typer(notifications.app, name="notifications")
app.add_typer(api_cmd.app, name="api")
app.command("hire")(hire_cmd.hire)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
