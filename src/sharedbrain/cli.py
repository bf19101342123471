#!/usr/bin/env python3
"""
sharedbrain: resolve [[wikilinks]] and add backlinks to markdown notes

Usage:
    sharedbrain notes/ site/content/          # Convert notes into site/content/
    sharedbrain --stub-date latest notes/ out/ # Date stubs by newest linking note
    sharedbrain --version
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from . import __version__ as SHAREDBRAIN_VERSION
from .config import STUB_DATE_POLICIES, ConfigurationError, get_stub_date_policy
from .errors import SharedBrainError

log = logging.getLogger(__name__)


@click.command()
@click.version_option(SHAREDBRAIN_VERSION, "--version", "-V", prog_name="sharedbrain")
@click.argument(
    "content",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.argument(
    "dest",
    type=click.Path(file_okay=False, path_type=Path),
)
@click.option(
    "--stub-date",
    "stub_date_policy",
    type=click.Choice(STUB_DATE_POLICIES),
    default=None,
    help=(
        "How stub notes pick a date from the notes linking to them "
        "(default: first, or SHAREDBRAIN_STUB_DATE_POLICY)"
    ),
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    envvar="SHAREDBRAIN_QUIET",
    help="Suppress progress output, show only errors and the summary",
)
@click.option("--verbose", is_flag=True, help="Log every file read and stub created")
def cli(
    content: Path,
    dest: Path,
    stub_date_policy: str | None,
    quiet: bool,
    verbose: bool,
):
    """Convert the markdown notes in CONTENT into cross-referenced notes in DEST.

    \b
    For every note:
      - [[Wiki Links]] become [Wiki Links](../wiki-links/)
      - a "Backlinks" section lists the notes linking to it, with context
      - notes named like 2020-04-19.md get that title and date by default

    Links to notes that don't exist produce stub notes in DEST, so the
    output has no dangling links.
    """
    from ._logging import set_log_level, set_quiet_mode
    from .publisher import generate

    if verbose:
        set_log_level(logging.DEBUG)
    set_quiet_mode(quiet)

    log.info("sharedbrain %s", SHAREDBRAIN_VERSION)

    try:
        policy = stub_date_policy or get_stub_date_policy()
        result = generate(content, dest, policy)  # type: ignore[arg-type]
    except (SharedBrainError, ConfigurationError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(
        f"Wrote {result.documents_written} notes to {result.output_dir} "
        f"({result.stubs_created} stubs, {result.backlinks_collected} backlinks)"
    )
    log.info("Generation complete!")


# ─────────────────────────────────────────────────────────────────────────────
# Entry Point
# ─────────────────────────────────────────────────────────────────────────────


def main():
    """Entry point for sharedbrain CLI."""
    from ._logging import configure_logging

    configure_logging()
    cli()


if __name__ == "__main__":
    main()
