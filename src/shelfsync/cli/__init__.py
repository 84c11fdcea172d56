# ABOUTME: CLI package for shelfsync, built on Click.
# ABOUTME: Defines the root command group and registers subcommands.

import logging

import click

from shelfsync.cli.commands import match_cmd, normalize_cmd, sync_cmd


@click.group()
@click.version_option(package_name="shelfsync")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Show debug logging.")
def cli(verbose: bool) -> None:
    """shelfsync - mark Audiobookshelf books finished from a Goodreads export."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


cli.add_command(sync_cmd.sync)
cli.add_command(match_cmd.match)
cli.add_command(normalize_cmd.normalize)
