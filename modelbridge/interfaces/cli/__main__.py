"""Entry point for the modelbridge CLI.

``python -m modelbridge.interfaces.cli`` (or the ``modelbridge`` console
script) runs the top-level Click group defined here.
"""

import logging

import click

from modelbridge.infrastructure.observability import configure_logging

from .check import check


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """modelbridge command-line interface."""
    configure_logging(level=logging.DEBUG if verbose else logging.WARNING)


cli.add_command(check)


if __name__ == "__main__":
    cli()
