"""Internet reachability backend: DNS, TCP connect and one HTTP request.

The three phases run one after another inside a shared ``Deadline``. Every
failure, including running out of time, is recorded as a sentinel in the
result; ``InternetProber.probe`` never raises.
"""

from __future__ import annotations

import socket
import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, TypeVar

import requests

from lanmon.config import DEFAULT_HTTP_PROBE_URL
from lanmon.models.network_models import FAILED_MS, InternetProbeResult
from lanmon.utils.logger import Logger

T = TypeVar("T")


class ProbeTimeoutError(TimeoutError):
    """Raised when the overall probe deadline has passed."""


class Deadline:
    """A point in time after which no new probe operation may start."""

    def __init__(
        self, seconds: float, clock: Callable[[], float] = time.monotonic
    ) -> None:
        self._clock = clock
        self._expires_at = clock() + seconds

    def remaining(self) -> float:
        """Seconds left, never negative."""
        return max(0.0, self._expires_at - self._clock())

    def expired(self) -> bool:
        return self.remaining() <= 0

    def bound(self, timeout: float | None = None) -> float:
        """Clamp ``timeout`` to the time left.

        Raises:
            ProbeTimeoutError: If the deadline has already passed.
        """
        remaining = self.remaining()
        if remaining <= 0:
            raise ProbeTimeoutError("probe deadline exceeded")
        if timeout is None:
            return remaining
        return min(timeout, remaining)


def _elapsed_ms(start: float) -> float:
    # whole milliseconds, truncated
    return float(int((time.monotonic() - start) * 1000))


def _split_target(target: str) -> tuple[str, int]:
    host, _, port = target.rpartition(":")
    return host.strip("[]"), int(port)


def _call_with_timeout(func: Callable[..., T], timeout: float, *args: Any) -> T:
    """Run ``func(*args)`` on a helper thread and wait at most ``timeout``.

    The helper thread is abandoned, not interrupted, when time runs out.

    Raises:
        ProbeTimeoutError: If ``func`` has not returned within ``timeout``.
    """
    executor = ThreadPoolExecutor(max_workers=1)
    try:
        future = executor.submit(func, *args)
        return future.result(timeout=timeout)
    except FutureTimeoutError as e:
        raise ProbeTimeoutError(f"timed out after {timeout:.2f}s") from e
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


class InternetProber:
    """Measures how well this device reaches well-known public endpoints."""

    def __init__(
        self,
        dns_hosts: Sequence[str] = ("www.google.com",),
        dial_targets: Sequence[str] = ("1.1.1.1:443", "8.8.8.8:443"),
        http_url: str = DEFAULT_HTTP_PROBE_URL,
        tcp_timeout: float = 3.0,
        http_timeout: float = 4.0,
    ) -> None:
        self.dns_hosts = list(dns_hosts)
        self.dial_targets = list(dial_targets)
        self.http_url = http_url
        self.tcp_timeout = tcp_timeout
        self.http_timeout = http_timeout

    def probe(self, deadline: Deadline) -> InternetProbeResult:
        """Run the DNS, TCP and HTTP phases in order within ``deadline``."""
        log = Logger.get("backends.internet")

        start = time.monotonic()
        resolved = {host: self._resolve(host, deadline) for host in self.dns_hosts}
        resolve_time_ms = _elapsed_ms(start)
        log.debug(f"DNS phase took {resolve_time_ms:.0f} ms: {resolved}")

        connect_times = {
            target: self._connect(target, deadline) for target in self.dial_targets
        }
        log.debug(f"TCP phase: {connect_times}")

        start = time.monotonic()
        try:
            timeout = deadline.bound(self.http_timeout)
            # requests only bounds each connect and read, so the whole
            # exchange is bounded here
            status = _call_with_timeout(self._http_status, timeout, timeout)
        except (requests.RequestException, ProbeTimeoutError) as e:
            log.warning(f"HTTP probe of {self.http_url} failed: {e}")
            return InternetProbeResult(
                resolved_hosts=resolved,
                resolve_time_ms=resolve_time_ms,
                connect_times_ms=connect_times,
                http_status=0,
                http_duration_ms=FAILED_MS,
                error_message=str(e) or type(e).__name__,
            )

        return InternetProbeResult(
            resolved_hosts=resolved,
            resolve_time_ms=resolve_time_ms,
            connect_times_ms=connect_times,
            http_status=status,
            http_duration_ms=_elapsed_ms(start),
        )

    def _http_status(self, timeout: float) -> int:
        with requests.get(self.http_url, timeout=timeout, stream=True) as response:
            return response.status_code

    @staticmethod
    def _resolve(host: str, deadline: Deadline) -> bool:
        """Resolve ``host`` with the system resolver, giving up at the deadline.

        getaddrinfo has no timeout of its own, so the lookup runs on a helper
        thread that is abandoned if the deadline passes first.
        """
        try:
            addresses = _call_with_timeout(
                socket.getaddrinfo, deadline.bound(), host, None
            )
        except OSError as e:
            Logger.get("backends.internet").warning(f"Cannot resolve {host}: {e}")
            return False
        return len(addresses) > 0

    def _connect(self, target: str, deadline: Deadline) -> float:
        """Time a TCP connect to ``host:port``; -1 if it fails."""
        start = time.monotonic()
        try:
            with socket.create_connection(
                _split_target(target), timeout=deadline.bound(self.tcp_timeout)
            ):
                return _elapsed_ms(start)
        except (OSError, ValueError) as e:
            Logger.get("backends.internet").warning(f"Connect to {target} failed: {e}")
            return FAILED_MS
