"""Pydantic models for diagnostic snapshots returned by the API and CLI."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# Sentinel for a failed connect or HTTP measurement.
FAILED_MS = -1.0

INTERFACE_FLAGS = ("up", "loopback", "multicast", "broadcast")


class InterfaceInfo(BaseModel):
    """A local network interface and the addresses bound to it."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Interface name (e.g., 'eth0', 'en0')")
    mtu: int = Field(0, description="Maximum transmission unit, 0 if unknown")
    mac: str = Field("", description="Hardware address, empty if none")
    flags: list[str] = Field(
        default_factory=list,
        description="Subset of up/loopback/multicast/broadcast",
    )
    addresses: list[str] = Field(
        default_factory=list, description="IPv4/IPv6 addresses as address/prefixlen"
    )


class PingResult(BaseModel):
    """Outcome of a short ICMP echo run against one target."""

    model_config = ConfigDict(frozen=True)

    target: str = Field(..., description="Host name or address that was pinged")
    packets_sent: int = Field(0, ge=0)
    packets_recv: int = Field(0, ge=0)
    packet_loss: float = Field(0.0, description="Packet loss percentage (0-100)")
    min_rtt_ms: float = 0.0
    max_rtt_ms: float = 0.0
    avg_rtt_ms: float = 0.0
    stddev_rtt_ms: float = 0.0
    duration_ms: float = Field(0.0, description="Wall-clock time of the whole run")
    error_message: str | None = None


class DiscoveryEntry(BaseModel):
    """One row of the OS ARP table."""

    model_config = ConfigDict(frozen=True)

    ip: str
    mac: str
    type: str = Field(..., description="Entry type as printed by arp (dynamic, static)")


class InternetProbeResult(BaseModel):
    """DNS, TCP and HTTP reachability measurements for this device."""

    model_config = ConfigDict(frozen=True)

    resolved_hosts: dict[str, bool] = Field(default_factory=dict)
    resolve_time_ms: float = Field(0.0, description="Duration of the whole DNS phase")
    connect_times_ms: dict[str, float] = Field(
        default_factory=dict,
        description="host:port -> connect time in ms, -1 on failure",
    )
    http_status: int = Field(0, description="Status of the HTTP probe, 0 on failure")
    http_duration_ms: float = Field(FAILED_MS, description="-1 on failure")
    error_message: str | None = Field(
        None, description="Set only when the HTTP probe fails"
    )
