"""Runtime settings for the diagnostics backends and the HTTP server.

Every field has a documented default; ``DiagnosticsConfig.from_env()`` lets
LANMON_* environment variables override them.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lanmon.utils.env import get_env

DEFAULT_HTTP_PROBE_URL = "https://www.google.com/generate_204"


class DiagnosticsConfig(BaseModel):
    """Probe counts, timeouts (seconds), probe targets and bind address."""

    model_config = ConfigDict(frozen=True)

    probe_count: int = Field(3, ge=1, description="ICMP echoes per ping run")
    ping_timeout: float = Field(5.0, gt=0, description="Upper bound for a ping run")
    discovery_timeout: float | None = Field(
        None, gt=0, description="Timeout for the ARP command, None waits forever"
    )
    internet_probe_deadline: float = Field(
        6.0, gt=0, description="Overall deadline for one internet probe"
    )
    http_probe_timeout: float = Field(4.0, gt=0)
    tcp_dial_timeout: float = Field(3.0, gt=0)

    dns_hosts: list[str] = Field(default_factory=lambda: ["www.google.com"])
    dial_targets: list[str] = Field(
        default_factory=lambda: ["1.1.1.1:443", "8.8.8.8:443"]
    )
    http_probe_url: str = DEFAULT_HTTP_PROBE_URL
    arp_command: list[str] = Field(default_factory=lambda: ["arp", "-a"], min_length=1)

    host: str = "127.0.0.1"
    port: int = Field(8080, ge=1, le=65535)
    shutdown_delay: float = Field(
        0.1, ge=0, description="Pause before draining so the reply can flush"
    )
    shutdown_drain_timeout: float = Field(5.0, gt=0)

    @field_validator("dial_targets")
    @classmethod
    def _check_dial_targets(cls, targets: list[str]) -> list[str]:
        for target in targets:
            host, sep, port = target.rpartition(":")
            if not sep or not host or not port.isdigit():
                raise ValueError(f"dial target must be host:port, got {target!r}")
        return targets

    @classmethod
    def from_env(cls) -> DiagnosticsConfig:
        """Build a config from LANMON_* variables, falling back to defaults.

        Raises:
            EnvVarTypeError: If a variable cannot be converted.
            pydantic.ValidationError: If a converted value is out of range.
        """
        defaults = cls()
        return cls(
            probe_count=get_env(
                "LANMON_PROBE_COUNT", default=defaults.probe_count, as_type=int
            ),
            ping_timeout=get_env(
                "LANMON_PING_TIMEOUT", default=defaults.ping_timeout, as_type=float
            ),
            discovery_timeout=get_env("LANMON_DISCOVERY_TIMEOUT", as_type=float),
            internet_probe_deadline=get_env(
                "LANMON_INTERNET_DEADLINE",
                default=defaults.internet_probe_deadline,
                as_type=float,
            ),
            http_probe_timeout=get_env(
                "LANMON_HTTP_TIMEOUT",
                default=defaults.http_probe_timeout,
                as_type=float,
            ),
            tcp_dial_timeout=get_env(
                "LANMON_TCP_TIMEOUT", default=defaults.tcp_dial_timeout, as_type=float
            ),
            dns_hosts=get_env(
                "LANMON_DNS_HOSTS", default=defaults.dns_hosts, as_type=list
            ),
            dial_targets=get_env(
                "LANMON_DIAL_TARGETS", default=defaults.dial_targets, as_type=list
            ),
            http_probe_url=get_env(
                "LANMON_HTTP_PROBE_URL", default=defaults.http_probe_url
            ),
            arp_command=get_env(
                "LANMON_ARP_COMMAND", default=defaults.arp_command, as_type=list
            ),
            host=get_env("LANMON_HOST", default=defaults.host),
            port=get_env("LANMON_PORT", default=defaults.port, as_type=int),
            shutdown_delay=get_env(
                "LANMON_SHUTDOWN_DELAY", default=defaults.shutdown_delay, as_type=float
            ),
            shutdown_drain_timeout=get_env(
                "LANMON_SHUTDOWN_DRAIN_TIMEOUT",
                default=defaults.shutdown_drain_timeout,
                as_type=float,
            ),
        )
