"""Diagnostic backends: interfaces, ping, ARP discovery and internet probing."""

from lanmon.backends.arp import ArpTable, DiscoveryError, parse_arp_output
from lanmon.backends.internet import Deadline, InternetProber, ProbeTimeoutError
from lanmon.backends.network import InterfaceEnumerationError, Network
from lanmon.backends.ping import Pinger, normalize_ping_result

__all__ = [
    "ArpTable",
    "Deadline",
    "DiscoveryError",
    "InterfaceEnumerationError",
    "InternetProber",
    "Network",
    "Pinger",
    "ProbeTimeoutError",
    "normalize_ping_result",
    "parse_arp_output",
]
