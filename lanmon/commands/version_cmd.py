"""
Version command - displays lanmon version information
"""

import click

from lanmon.version import LANMON_VERSION


def run_version(verbose: bool = False) -> None:
    """
    Display lanmon version information.

    Args:
        verbose: If True, also show the release date and Python runtime
    """
    if not verbose:
        click.echo(f"lanmon {LANMON_VERSION}")
        return

    import platform

    click.echo(f"lanmon version {LANMON_VERSION.full_version()}")
    click.echo(f"  Release Date: {LANMON_VERSION.date_string()}")
    click.echo(f"  Python:       {platform.python_version()} ({platform.system()})")
