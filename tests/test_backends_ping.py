"""Tests for the ping backend and its statistics normalization."""

import math
import socket
import types

import pytest

from lanmon.backends import ping as ping_module
from lanmon.backends.ping import Pinger, normalize_ping_result
from lanmon.models import PingResult


def _reply(seconds):
    return types.SimpleNamespace(success=True, time_elapsed=seconds)


def _timeout():
    return types.SimpleNamespace(success=False, time_elapsed=2.0)


@pytest.fixture
def resolvable(monkeypatch):
    monkeypatch.setattr(socket, "gethostbyname", lambda host: "192.0.2.10")


def _fake_ping(responses, calls=None):
    def fake(address, count, timeout, verbose):
        if calls is not None:
            calls.append((address, count, timeout, verbose))
        return iter(responses)

    return fake


@pytest.mark.parametrize("loss", [math.nan, math.inf, -math.inf])
def test_non_finite_loss_is_sanitized(loss):
    raw = PingResult(
        target="h", packets_sent=3, packets_recv=3, packet_loss=loss, avg_rtt_ms=5.0
    )

    result = normalize_ping_result(raw)
    assert result.packet_loss == 0.0
    assert result.avg_rtt_ms == 5.0


def test_nothing_sent_counts_as_total_loss():
    result = normalize_ping_result(PingResult(target="h", packet_loss=math.nan))
    assert result.packet_loss == 100.0


def test_sent_but_nothing_received_overrides_library_loss():
    raw = PingResult(
        target="h",
        packets_sent=3,
        packets_recv=0,
        packet_loss=12.5,
        min_rtt_ms=1.0,
        max_rtt_ms=9.0,
        avg_rtt_ms=4.0,
        stddev_rtt_ms=2.0,
    )

    result = normalize_ping_result(raw)
    assert result.packet_loss == 100.0
    assert (
        result.min_rtt_ms,
        result.max_rtt_ms,
        result.avg_rtt_ms,
        result.stddev_rtt_ms,
    ) == (0.0, 0.0, 0.0, 0.0)


def test_normalization_is_idempotent():
    raw = PingResult(target="h", packets_sent=3, packets_recv=0, packet_loss=math.nan)

    once = normalize_ping_result(raw)
    assert normalize_ping_result(once) == once


def test_ping_success(resolvable, monkeypatch):
    calls = []
    monkeypatch.setattr(
        ping_module,
        "ping",
        _fake_ping([_reply(0.010), _reply(0.020), _reply(0.030)], calls),
    )

    result = Pinger(count=3, timeout=6.0).ping("router.local")

    assert calls == [("192.0.2.10", 3, 2.0, False)]
    assert result.target == "router.local"
    assert result.packets_sent == 3
    assert result.packets_recv == 3
    assert result.packet_loss == 0.0
    assert result.min_rtt_ms == pytest.approx(10.0)
    assert result.max_rtt_ms == pytest.approx(30.0)
    assert result.avg_rtt_ms == pytest.approx(20.0)
    assert result.stddev_rtt_ms == pytest.approx(8.16496, rel=1e-4)
    assert result.duration_ms >= 0
    assert result.error_message is None


def test_ping_partial_loss(resolvable, monkeypatch):
    monkeypatch.setattr(
        ping_module, "ping", _fake_ping([_reply(0.004), _timeout(), _timeout()])
    )

    result = Pinger().ping("192.0.2.10")

    assert result.packets_recv == 1
    assert result.packet_loss == pytest.approx(200 / 3)
    assert result.min_rtt_ms == result.max_rtt_ms == pytest.approx(4.0)
    assert result.stddev_rtt_ms == 0.0


def test_unreachable_target(resolvable, monkeypatch):
    """Every echo timing out means 100% loss and zero RTTs."""
    monkeypatch.setattr(
        ping_module, "ping", _fake_ping([_timeout(), _timeout(), _timeout()])
    )

    result = Pinger(count=3).ping("192.0.2.10")

    assert result.packets_sent >= 1
    assert result.packets_recv == 0
    assert result.packet_loss == 100.0
    assert result.min_rtt_ms == result.max_rtt_ms == 0.0
    assert result.avg_rtt_ms == result.stddev_rtt_ms == 0.0


def test_unresolvable_target_returns_early(monkeypatch):
    def fail(host):
        raise socket.gaierror(-2, "Name or service not known")

    def must_not_run(*args, **kwargs):
        raise AssertionError("ping should not run")

    monkeypatch.setattr(socket, "gethostbyname", fail)
    monkeypatch.setattr(ping_module, "ping", must_not_run)

    result = Pinger().ping("no-such-host.invalid")

    assert result.target == "no-such-host.invalid"
    assert "no-such-host.invalid" in result.error_message
    assert result.packets_sent == result.packets_recv == 0
    assert result.packet_loss == 0.0


def test_permission_error_is_reported(resolvable, monkeypatch):
    def denied(*args, **kwargs):
        raise PermissionError(1, "Operation not permitted")

    monkeypatch.setattr(ping_module, "ping", denied)

    result = Pinger().ping("192.0.2.10")

    assert "Operation not permitted" in result.error_message
    assert result.packets_sent == 0
    assert result.packet_loss == 100.0
    assert result.avg_rtt_ms == 0.0
