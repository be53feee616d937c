"""One-shot diagnostic commands that print JSON to stdout."""

from __future__ import annotations

import json

import click
from pydantic import BaseModel

from lanmon.backends.arp import ArpTable, DiscoveryError
from lanmon.backends.internet import Deadline, InternetProber
from lanmon.backends.network import Network
from lanmon.backends.ping import Pinger
from lanmon.config import DiagnosticsConfig


def _echo(payload: BaseModel | list[BaseModel]) -> None:
    if isinstance(payload, list):
        data = [item.model_dump(mode="json", exclude_none=True) for item in payload]
    else:
        data = payload.model_dump(mode="json", exclude_none=True)
    click.echo(json.dumps(data, indent=2))


def run_interfaces() -> None:
    """Print the interface table.

    Raises:
        click.ClickException: If the interface table cannot be read.
    """
    try:
        interfaces = Network().list_interfaces()
    except OSError as e:
        raise click.ClickException(str(e)) from e
    _echo(interfaces)


def run_ping(target: str, config: DiagnosticsConfig) -> None:
    """Ping ``target`` and print the normalized result."""
    target = target.strip()
    if not target:
        raise click.BadParameter("target is required", param_hint="TARGET")
    pinger = Pinger(count=config.probe_count, timeout=config.ping_timeout)
    _echo(pinger.ping(target))


def run_discover(config: DiagnosticsConfig) -> None:
    """Print the ARP table.

    Raises:
        click.ClickException: If the arp command fails.
    """
    try:
        entries = ArpTable(config.arp_command, config.discovery_timeout).discover()
    except DiscoveryError as e:
        raise click.ClickException(str(e)) from e
    _echo(entries)


def run_internet(config: DiagnosticsConfig) -> None:
    """Probe internet reachability and print the measurements."""
    prober = InternetProber(
        dns_hosts=config.dns_hosts,
        dial_targets=config.dial_targets,
        http_url=config.http_probe_url,
        tcp_timeout=config.tcp_dial_timeout,
        http_timeout=config.http_probe_timeout,
    )
    _echo(prober.probe(Deadline(config.internet_probe_deadline)))
