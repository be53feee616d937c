"""Tests for the acknowledge, delay, drain, exit shutdown sequence."""

import threading

import pytest

from lanmon.config import DiagnosticsConfig
from lanmon.server import ServerControl, ShutdownSequence, ShutdownState


class Recorder:
    """Collects the order of shutdown side effects."""

    def __init__(self):
        self.events = []
        self.exited = threading.Event()

    def sleep(self, seconds):
        self.events.append(("sleep", seconds))

    def stop_server(self):
        self.events.append(("stop",))

    def exit_process(self, code):
        self.events.append(("exit", code))
        self.exited.set()


def make_sequence(recorder, stop_server=None, drain_timeout=1.0):
    return ShutdownSequence(
        stop_server or recorder.stop_server,
        delay=0.1,
        drain_timeout=drain_timeout,
        exit_process=recorder.exit_process,
        sleep=recorder.sleep,
    )


def test_run_follows_state_order():
    recorder = Recorder()
    states = []

    def stop():
        states.append(sequence.state)
        recorder.stop_server()

    sequence = make_sequence(recorder, stop_server=stop)
    assert sequence.state is ShutdownState.IDLE

    assert sequence.acknowledge() is True
    assert sequence.state is ShutdownState.ACKNOWLEDGED

    sequence.run()

    assert states == [ShutdownState.DRAINING]
    assert sequence.state is ShutdownState.EXITED
    assert recorder.events == [("sleep", 0.1), ("stop",), ("exit", 0)]


def test_run_requires_acknowledgement():
    sequence = make_sequence(Recorder())

    with pytest.raises(RuntimeError):
        sequence.run()


def test_acknowledge_only_once():
    sequence = make_sequence(Recorder())

    assert sequence.acknowledge() is True
    assert sequence.acknowledge() is False


def test_request_runs_in_background():
    recorder = Recorder()
    sequence = make_sequence(recorder)

    assert sequence.request() is True
    assert sequence.request() is False

    sequence.join(timeout=5)
    assert recorder.exited.is_set()
    assert recorder.events.count(("exit", 0)) == 1


def test_exit_even_when_drain_hangs(configured_logger):
    recorder = Recorder()
    release = threading.Event()

    def hanging_stop():
        release.wait(5)

    sequence = make_sequence(recorder, stop_server=hanging_stop, drain_timeout=0.05)
    sequence.acknowledge()
    try:
        sequence.run()
    finally:
        release.set()

    assert recorder.events[-1] == ("exit", 0)
    assert "did not drain" in configured_logger.getvalue()


def test_exit_even_when_drain_fails(configured_logger):
    recorder = Recorder()

    def broken_stop():
        raise OSError("socket already closed")

    sequence = make_sequence(recorder, stop_server=broken_stop)
    sequence.acknowledge()
    sequence.run()

    assert recorder.events[-1] == ("exit", 0)
    assert "socket already closed" in configured_logger.getvalue()


def test_server_control_stops_attached_server():
    calls = []

    class FakeServer:
        def shutdown(self):
            calls.append("shutdown")

        def server_close(self):
            calls.append("close")

    recorder = Recorder()
    control = ServerControl(
        DiagnosticsConfig(shutdown_delay=0),
        exit_process=recorder.exit_process,
        sleep=recorder.sleep,
    )
    control.attach(FakeServer())

    control.shutdown.acknowledge()
    control.shutdown.run()

    assert calls == ["shutdown", "close"]
    assert recorder.events == [("sleep", 0), ("exit", 0)]


def test_server_control_without_server_still_exits():
    recorder = Recorder()
    control = ServerControl(exit_process=recorder.exit_process, sleep=recorder.sleep)

    control.shutdown.acknowledge()
    control.shutdown.run()

    assert recorder.events[-1] == ("exit", 0)
