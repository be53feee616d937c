"""ARP table backend - runs the platform ``arp -a`` and parses its rows.

The parser targets the Windows layout::

    Interface: 192.168.1.5 --- 0x3
      Internet Address      Physical Address      Type
      192.168.1.1           aa-bb-cc-dd-ee-ff     dynamic

Other platforms and localized output are handled on a best-effort basis: any
non-header line with at least three fields becomes an entry.
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence

from lanmon.models.network_models import DiscoveryEntry
from lanmon.utils.logger import Logger

HEADER_PREFIXES = ("interface:", "internet")


class DiscoveryError(RuntimeError):
    """Raised when the ARP command cannot be run or exits abnormally."""


def parse_arp_output(text: str) -> list[DiscoveryEntry]:
    """Parse ``arp -a`` output into entries, keeping the output order.

    Blank lines, header lines and lines with fewer than three fields are
    skipped.
    """
    entries = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.lower().startswith(HEADER_PREFIXES):
            continue

        fields = line.split()
        if len(fields) < 3:
            continue

        entries.append(DiscoveryEntry(ip=fields[0], mac=fields[1], type=fields[2]))
    return entries


class ArpTable:
    """Reads the OS neighbour table through the arp command."""

    def __init__(
        self, command: Sequence[str] = ("arp", "-a"), timeout: float | None = None
    ) -> None:
        """Initialize the reader.

        Args:
            command: Command line that prints the ARP table.
            timeout: Seconds to wait for the command, None waits until it exits.
        """
        self._command = list(command)
        self._timeout = timeout

    def discover(self) -> list[DiscoveryEntry]:
        """Run the command once and return the parsed table.

        Raises:
            DiscoveryError: If the command cannot start, times out or exits
                with a non-zero status.
        """
        log = Logger.get("backends.arp")
        log.debug(f"Running {' '.join(self._command)}")

        try:
            result = subprocess.run(
                self._command,
                check=False,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise DiscoveryError(
                f"{self._command[0]} timed out after {self._timeout}s"
            ) from e
        except OSError as e:
            raise DiscoveryError(f"failed to run {self._command[0]}: {e}") from e

        if result.returncode != 0:
            output = (result.stdout or "").strip()
            raise DiscoveryError(
                f"{self._command[0]} exited with status {result.returncode}: {output}"
            )

        entries = parse_arp_output(result.stdout or "")
        log.debug(f"Parsed {len(entries)} ARP entries")
        return entries
