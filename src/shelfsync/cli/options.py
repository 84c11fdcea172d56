# ABOUTME: Shared Click options for shelfsync CLI commands.
# ABOUTME: Provides reusable decorators for the Goodreads export path and confidence threshold.

from pathlib import Path

import click

threshold_option = click.option(
    "-t",
    "--threshold",
    type=click.FloatRange(0.0, 1.0),
    default=None,
    help="Minimum match confidence (0.0-1.0, default 0.7).",
)

export_option = click.option(
    "--export",
    "export_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to the Goodreads library export CSV.",
)
