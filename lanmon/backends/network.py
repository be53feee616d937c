"""Interface backend - lists local network interfaces using psutil."""

from __future__ import annotations

import ipaddress
import socket
from typing import Any

import psutil

from lanmon.models.network_models import INTERFACE_FLAGS, InterfaceInfo
from lanmon.utils.logger import Logger


class InterfaceEnumerationError(OSError):
    """Raised when the OS interface table cannot be read."""


class Network:
    """Interface lister backed by psutil.

    Every call re-reads the OS tables; nothing is cached between requests.
    """

    def list_interfaces(self) -> list[InterfaceInfo]:
        """Enumerate all interfaces with their flags and bound addresses.

        Returns
        -------
            One InterfaceInfo per interface known to the OS.

        Raises
        ------
            InterfaceEnumerationError: If psutil cannot read the interface table.
        """
        log = Logger.get("backends.network")
        try:
            addrs = psutil.net_if_addrs()
            stats = psutil.net_if_stats()
        except OSError as e:
            raise InterfaceEnumerationError(
                f"failed to enumerate interfaces: {e}"
            ) from e

        names = list(addrs)
        names.extend(name for name in stats if name not in addrs)

        interfaces = []
        for name in names:
            if_addrs = addrs.get(name, [])
            if_stats = stats.get(name)

            try:
                addresses = [
                    self._format_address(addr.address, addr.netmask)
                    for addr in if_addrs
                    if addr.family in (socket.AF_INET, socket.AF_INET6)
                ]
            except ValueError as e:
                log.debug(f"Skipping addresses of {name}: {e}")
                addresses = []

            interfaces.append(
                InterfaceInfo(
                    name=name,
                    mtu=if_stats.mtu if if_stats else 0,
                    mac=self._find_mac(if_addrs),
                    flags=self._flags_for(if_stats, addresses),
                    addresses=addresses,
                )
            )

        log.debug(f"Found {len(interfaces)} interfaces")
        return interfaces

    @staticmethod
    def _flags_for(if_stats: Any, addresses: list[str]) -> list[str]:
        """Translate psutil interface state into named flags.

        psutil exposes a comma-separated ``flags`` string on POSIX systems;
        elsewhere only ``isup`` is available and loopback is inferred from
        the bound addresses.
        """
        present: set[str] = set()
        raw_flags = getattr(if_stats, "flags", "") if if_stats else ""
        if raw_flags:
            present.update(flag.strip() for flag in raw_flags.split(","))
        if if_stats and if_stats.isup:
            present.add("up")
        if any(ipaddress.ip_interface(a).ip.is_loopback for a in addresses):
            present.add("loopback")

        return [flag for flag in INTERFACE_FLAGS if flag in present]

    @staticmethod
    def _find_mac(if_addrs: list[Any]) -> str:
        for addr in if_addrs:
            if addr.family == psutil.AF_LINK and addr.address:
                return addr.address.lower().replace("-", ":")
        return ""

    @staticmethod
    def _format_address(address: str, netmask: str | None) -> str:
        """Render an address as ``address/prefixlen``.

        Raises
        ------
            ValueError: If the address or netmask cannot be parsed.
        """
        address = address.split("%", 1)[0]
        if not netmask:
            return str(ipaddress.ip_address(address))

        # IPv6 netmasks may come back as "ffff:ffff::/64"
        mask = ipaddress.ip_address(netmask.split("/", 1)[0])
        prefixlen = bin(int(mask)).count("1")
        return ipaddress.ip_interface(f"{address}/{prefixlen}").with_prefixlen
