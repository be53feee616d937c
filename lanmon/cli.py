#!/usr/bin/env python3
"""lanmon CLI - local network diagnostics from the command line."""

import click
from pydantic import ValidationError

from lanmon.config import DiagnosticsConfig
from lanmon.utils.env import EnvVarError, get_env
from lanmon.utils.logger import Logger


@click.group()
def lanmon():
    """Local network monitor: interfaces, ping, ARP discovery, internet probe."""
    if not Logger.is_configured():
        Logger.configure(
            level=get_env("LANMON_LOG_LEVEL", default="INFO"), timestamps=True
        )


def _load_config() -> DiagnosticsConfig:
    """Read LANMON_* settings for the commands that need them."""
    try:
        return DiagnosticsConfig.from_env()
    except (EnvVarError, ValidationError) as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e


@lanmon.command()
@click.option("--host", default=None, help="Address to bind (default: 127.0.0.1)")
@click.option("--port", type=int, default=None, help="Port to listen on (default: 8080)")
def serve(host, port):
    """Serve the HTTP API and web UI."""
    from lanmon.server import run_server

    config = _load_config()
    if host:
        config = config.model_copy(update={"host": host})
    if port:
        config = config.model_copy(update={"port": port})
    run_server(config)


@lanmon.command()
def interfaces():
    """List local network interfaces."""
    from lanmon.commands.probe_cmd import run_interfaces

    run_interfaces()


@lanmon.command()
@click.argument("target")
@click.option("--count", "-c", type=click.IntRange(min=1), help="Echo requests to send")
@click.option("--timeout", "-t", type=click.FloatRange(min=0, min_open=True), help="Seconds for the whole run")
def ping(target, count, timeout):
    """Ping TARGET (requires raw socket privileges)."""
    from lanmon.commands.probe_cmd import run_ping

    config = _load_config()
    if count:
        config = config.model_copy(update={"probe_count": count})
    if timeout:
        config = config.model_copy(update={"ping_timeout": timeout})
    run_ping(target, config)


@lanmon.command()
def discover():
    """Show LAN neighbours from the ARP table."""
    from lanmon.commands.probe_cmd import run_discover

    config = _load_config()
    run_discover(config)


@lanmon.command()
@click.option("--deadline", type=click.FloatRange(min=0, min_open=True), help="Overall deadline in seconds")
def internet(deadline):
    """Probe DNS, TCP and HTTP reachability of public endpoints."""
    from lanmon.commands.probe_cmd import run_internet

    config = _load_config()
    if deadline:
        config = config.model_copy(update={"internet_probe_deadline": deadline})
    run_internet(config)


@lanmon.command()
@click.option("--verbose", "-v", is_flag=True, help="Show detailed version information")
def version(verbose):
    """Display lanmon version information."""
    from lanmon.commands.version_cmd import run_version

    run_version(verbose=verbose)


if __name__ == "__main__":
    lanmon()
