"""ICMP ping backend built on pythonping.

Raw ICMP sockets need elevated privileges (root, CAP_NET_RAW or an
administrator shell on Windows). Without them the run fails and the failure
is reported in ``PingResult.error_message`` rather than raised.
"""

from __future__ import annotations

import math
import socket
import statistics
import time
from collections.abc import Iterable
from typing import Any

from pythonping import ping

from lanmon.models.network_models import PingResult
from lanmon.utils.logger import Logger


def normalize_ping_result(result: PingResult) -> PingResult:
    """Clean up statistics so a run with no replies never looks healthy.

    Applied in order:
      1. a NaN or infinite loss becomes 0
      2. nothing sent, nothing received and 0 loss becomes 100% loss
      3. packets sent but none received is 100% loss
      4. no replies means every RTT is 0

    The function is idempotent.
    """
    loss = result.packet_loss
    if math.isnan(loss) or math.isinf(loss):
        loss = 0.0

    if result.packets_sent == 0 and result.packets_recv == 0 and loss == 0:
        loss = 100.0

    if result.packets_sent > 0 and result.packets_recv == 0:
        loss = 100.0

    update: dict[str, Any] = {"packet_loss": loss}
    if result.packets_recv == 0:
        update.update(min_rtt_ms=0.0, max_rtt_ms=0.0, avg_rtt_ms=0.0, stddev_rtt_ms=0.0)

    return result.model_copy(update=update)


class Pinger:
    """Send a short burst of ICMP echoes and summarize the replies."""

    def __init__(self, count: int = 3, timeout: float = 5.0) -> None:
        """Initialize the pinger.

        Args:
            count: Number of echo requests per run.
            timeout: Budget in seconds for the whole run.
        """
        self.count = count
        self.timeout = timeout

    def ping(self, target: str) -> PingResult:
        """Ping ``target`` and return normalized statistics.

        A target that does not resolve returns immediately with only
        ``target`` and ``error_message`` set.
        """
        log = Logger.get("backends.ping")

        try:
            address = socket.gethostbyname(target)
        except OSError as e:
            log.warning(f"Cannot resolve ping target {target}: {e}")
            return PingResult(target=target, error_message=f"cannot resolve {target}: {e}")

        log.debug(f"Pinging {target} ({address}) x{self.count}, timeout {self.timeout}s")

        responses: list[Any] = []
        error_message = None
        start = time.monotonic()
        try:
            # pythonping's timeout applies to each echo
            responses = list(
                ping(
                    address,
                    count=self.count,
                    timeout=self.timeout / self.count,
                    verbose=False,
                )
            )
        except OSError as e:
            log.warning(f"Ping run against {target} failed: {e}")
            error_message = str(e)
        duration_ms = (time.monotonic() - start) * 1000

        result = self._summarize(target, responses, duration_ms, error_message)
        return normalize_ping_result(result)

    @staticmethod
    def _summarize(
        target: str,
        responses: Iterable[Any],
        duration_ms: float,
        error_message: str | None,
    ) -> PingResult:
        """Build raw statistics from pythonping responses.

        Loss is NaN when nothing was sent; normalization takes care of it.
        """
        responses = list(responses)
        sent = len(responses)
        rtts = [r.time_elapsed * 1000 for r in responses if r.success]
        recv = len(rtts)

        loss = (sent - recv) / sent * 100 if sent else math.nan

        return PingResult(
            target=target,
            packets_sent=sent,
            packets_recv=recv,
            packet_loss=loss,
            min_rtt_ms=min(rtts) if rtts else 0.0,
            max_rtt_ms=max(rtts) if rtts else 0.0,
            avg_rtt_ms=statistics.fmean(rtts) if rtts else 0.0,
            stddev_rtt_ms=statistics.pstdev(rtts) if rtts else 0.0,
            duration_ms=duration_ms,
            error_message=error_message,
        )
