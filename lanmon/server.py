"""Local HTTP API and web UI for lanmon.

Routes:
    GET /api/interfaces   interface table (500 text/plain on failure)
    GET /api/ping         ?target=<host>, 400 when target is missing
    GET /api/discover     ARP table (500 text/plain on failure)
    GET /api/internet     reachability probe, always 200
    GET /api/shutdown     acknowledge, then drain and exit
    GET /                 bundled UI from lanmon/web

Usage:
    lanmon serve
    python -m lanmon.server --port 8080
"""

from __future__ import annotations

import json
import logging
import os
import sys
import threading
import time
from collections.abc import Callable
from enum import StrEnum
from typing import Any

from flask import Flask, Response, request
from werkzeug.serving import BaseWSGIServer, make_server

from lanmon.backends.arp import ArpTable, DiscoveryError
from lanmon.backends.internet import Deadline, InternetProber
from lanmon.backends.network import Network
from lanmon.backends.ping import Pinger
from lanmon.config import DiagnosticsConfig
from lanmon.utils.env import get_env
from lanmon.utils.logger import Logger


class ShutdownState(StrEnum):
    """Stages of a shutdown requested over HTTP."""

    IDLE = "idle"
    ACKNOWLEDGED = "acknowledged"
    DRAINING = "draining"
    EXITED = "exited"


def _exit_process(code: int) -> None:
    logging.shutdown()
    os._exit(code)


class ShutdownSequence:
    """Acknowledge, wait, drain, exit.

    ``request()`` runs the sequence on a background thread so the HTTP reply
    can be sent first. ``run()`` performs the remaining steps synchronously.
    The process exits whether or not the drain finished in time.
    """

    def __init__(
        self,
        stop_server: Callable[[], None],
        delay: float = 0.1,
        drain_timeout: float = 5.0,
        exit_process: Callable[[int], None] = _exit_process,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._stop_server = stop_server
        self._delay = delay
        self._drain_timeout = drain_timeout
        self._exit_process = exit_process
        self._sleep = sleep
        self._lock = threading.Lock()
        self._state = ShutdownState.IDLE
        self._thread: threading.Thread | None = None

    @property
    def state(self) -> ShutdownState:
        return self._state

    def acknowledge(self) -> bool:
        """Move from idle to acknowledged. Returns False if already underway."""
        with self._lock:
            if self._state is not ShutdownState.IDLE:
                return False
            self._state = ShutdownState.ACKNOWLEDGED
            return True

    def request(self) -> bool:
        """Acknowledge and start the sequence on a background thread."""
        if not self.acknowledge():
            return False
        self._thread = threading.Thread(
            target=self.run, name="lanmon-shutdown", daemon=False
        )
        self._thread.start()
        return True

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def run(self) -> None:
        """Wait, drain the server within the timeout, then exit.

        Raises:
            RuntimeError: If the sequence was not acknowledged first.
        """
        if self._state is not ShutdownState.ACKNOWLEDGED:
            raise RuntimeError(f"cannot run shutdown from state {self._state}")

        log = Logger.get("server.shutdown")
        self._sleep(self._delay)
        log.info("Shutdown requested via web interface")

        self._state = ShutdownState.DRAINING
        if not self._drain():
            log.error(f"Server did not drain within {self._drain_timeout}s")

        self._state = ShutdownState.EXITED
        self._exit_process(0)

    def _drain(self) -> bool:
        errors: list[BaseException] = []

        def stop() -> None:
            try:
                self._stop_server()
            except Exception as e:
                errors.append(e)

        worker = threading.Thread(target=stop, name="lanmon-drain", daemon=True)
        worker.start()
        worker.join(self._drain_timeout)

        if worker.is_alive():
            return False
        if errors:
            Logger.get("server.shutdown").error(f"Server shutdown error: {errors[0]}")
            return False
        return True


class ServerControl:
    """Handle on the running server, shared with the request handlers."""

    def __init__(self, config: DiagnosticsConfig | None = None, **sequence_kwargs: Any):
        self.config = config or DiagnosticsConfig()
        self.server: BaseWSGIServer | None = None
        self.shutdown = ShutdownSequence(
            self._stop_server,
            delay=self.config.shutdown_delay,
            drain_timeout=self.config.shutdown_drain_timeout,
            **sequence_kwargs,
        )

    def attach(self, server: BaseWSGIServer) -> None:
        self.server = server

    def _stop_server(self) -> None:
        if self.server is None:
            return
        # serve_forever stops polling, then in-flight request threads are joined
        self.server.shutdown()
        self.server.server_close()


def _text_error(message: str, status: int) -> Response:
    return Response(message + "\n", status=status, mimetype="text/plain")


def _json_response(payload: Any) -> Response:
    # not jsonify: encoding failures must come back as a plain-text 500
    try:
        body = json.dumps(payload, allow_nan=False)
    except (TypeError, ValueError) as e:
        return _text_error(f"failed to encode: {e}", 500)
    return Response(body + "\n", status=200, mimetype="application/json")


def _dump(model: Any) -> dict[str, Any]:
    return model.model_dump(mode="json", exclude_none=True)


def create_app(
    config: DiagnosticsConfig | None = None,
    control: ServerControl | None = None,
    *,
    network: Network | None = None,
    pinger: Pinger | None = None,
    arp_table: ArpTable | None = None,
    prober: InternetProber | None = None,
) -> Flask:
    """Build the Flask application.

    Args:
        config: Settings; defaults to DiagnosticsConfig().
        control: Server handle used by /api/shutdown. One is created if omitted.
        network, pinger, arp_table, prober: Backend overrides, built from
            ``config`` when not given.
    """
    if not Logger.is_configured():
        Logger.configure(level=get_env("LANMON_LOG_LEVEL", default="INFO"))

    config = config or (control.config if control else DiagnosticsConfig())
    control = control or ServerControl(config)
    network = network or Network()
    pinger = pinger or Pinger(count=config.probe_count, timeout=config.ping_timeout)
    arp_table = arp_table or ArpTable(config.arp_command, config.discovery_timeout)
    prober = prober or InternetProber(
        dns_hosts=config.dns_hosts,
        dial_targets=config.dial_targets,
        http_url=config.http_probe_url,
        tcp_timeout=config.tcp_dial_timeout,
        http_timeout=config.http_probe_timeout,
    )
    log = Logger.get("server")

    app = Flask(__name__, static_folder="web", static_url_path="")
    app.extensions["lanmon"] = control

    @app.get("/")
    def index() -> Response:
        return app.send_static_file("index.html")

    @app.get("/api/interfaces")
    def interfaces() -> Response:
        try:
            result = network.list_interfaces()
        except OSError as e:
            log.error(f"Interface enumeration failed: {e}")
            return _text_error(str(e), 500)
        return _json_response([_dump(iface) for iface in result])

    @app.get("/api/ping")
    def ping() -> Response:
        target = request.args.get("target", "").strip()
        if not target:
            return _text_error("target is required", 400)
        return _json_response(_dump(pinger.ping(target)))

    @app.get("/api/discover")
    def discover() -> Response:
        try:
            entries = arp_table.discover()
        except DiscoveryError as e:
            log.error(f"ARP discovery failed: {e}")
            return _text_error(str(e), 500)
        return _json_response([_dump(entry) for entry in entries])

    @app.get("/api/internet")
    def internet() -> Response:
        deadline = Deadline(config.internet_probe_deadline)
        return _json_response(_dump(prober.probe(deadline)))

    @app.get("/api/shutdown")
    def shutdown() -> Response:
        if not control.shutdown.request():
            log.debug("Shutdown already in progress")
        return _json_response({"status": "shutting down"})

    return app


def run_server(config: DiagnosticsConfig | None = None) -> None:
    """Serve the API and UI until shut down.

    Exits the process with status 1 if the listening socket cannot be bound.
    """
    config = config or DiagnosticsConfig()
    log = Logger.get("server")
    control = ServerControl(config)
    app = create_app(config, control)

    try:
        server = make_server(config.host, config.port, app, threaded=True)
    except OSError as e:
        log.critical(f"Cannot listen on {config.host}:{config.port}: {e}")
        sys.exit(1)

    # request threads must be joinable so shutdown can drain them
    server.daemon_threads = False
    control.attach(server)

    log.info(f"Local Network Monitor listening on http://{config.host}:{config.port}")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        log.info("Shutting down server...")
        server.server_close()


def main() -> None:
    """Run the server with settings from the environment."""
    import argparse

    parser = argparse.ArgumentParser(description="lanmon local network monitor")
    parser.add_argument("--host", default=None, help="Address to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=None, help="Port (default: 8080)")
    args = parser.parse_args()

    Logger.configure(level=get_env("LANMON_LOG_LEVEL", default="INFO"))
    config = DiagnosticsConfig.from_env()
    overrides = {k: v for k, v in (("host", args.host), ("port", args.port)) if v}
    if overrides:
        config = config.model_copy(update=overrides)
    run_server(config)


if __name__ == "__main__":
    main()
