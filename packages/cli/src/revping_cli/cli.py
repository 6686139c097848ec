"""CLI entry point for revping.

Usage:
  revping CONFIG_PATH

Scans every configured Phabricator query, pings a reviewer for each open
revision in the group's Slack channel, then sleeps until the next cycle.
Runs until interrupted.
"""

from __future__ import annotations

import click
from rich.console import Console

console = Console()


@click.command()
@click.argument("config_path", type=click.Path(dir_okay=False))
def main(config_path: str):
    """Remind reviewers about open Differential revisions on Slack."""
    from revping_cli.logging_config import setup_logging
    from revping_core.config import ConfigError, load_config
    from revping_core.scan import ReviewScanner

    setup_logging()

    try:
        config = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e))

    if not config.get("conduit_token"):
        console.print("[yellow]No Conduit token configured; relying on anonymous access.[/yellow]")

    console.print(f"[bold]revping[/bold] watching {len(config['groups'])} group(s), every {config['interval']:.0f}s.")
    scanner = ReviewScanner(config_path, interval=config["interval"])
    try:
        scanner.run_forever()
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped.[/yellow]")
