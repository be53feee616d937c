"""Pydantic models for structured output."""

from lanmon.models.network_models import (
    FAILED_MS,
    INTERFACE_FLAGS,
    DiscoveryEntry,
    InterfaceInfo,
    InternetProbeResult,
    PingResult,
)

__all__ = [
    "FAILED_MS",
    "INTERFACE_FLAGS",
    "DiscoveryEntry",
    "InterfaceInfo",
    "InternetProbeResult",
    "PingResult",
]
