"""Tests for the centralized logging utility."""

from io import StringIO

import pytest

from lanmon.utils.logger import Logger, LoggerNotConfiguredError


def test_logger_unconfigured():
    """Using Logger before configuration raises."""
    Logger._configured = False

    with pytest.raises(LoggerNotConfiguredError):
        Logger.get("test")


def test_logger_configuration():
    """Configured logger writes level, name and message."""
    output = StringIO()
    Logger.configure(level="DEBUG", output=output, timestamps=False)

    assert Logger.is_configured()

    Logger.get("backends.arp").debug("Parsed 3 ARP entries")

    content = output.getvalue()
    assert "DEBUG" in content
    assert "[lanmon.backends.arp]" in content
    assert "Parsed 3 ARP entries" in content


def test_logger_set_level():
    """set_level changes what gets through."""
    output = StringIO()
    Logger.configure(level="INFO", output=output, timestamps=False)

    log = Logger.get("test_level")
    log.debug("Hidden")
    assert "Hidden" not in output.getvalue()

    Logger.set_level("DEBUG")
    log.debug("Visible")
    assert "Visible" in output.getvalue()


def test_logger_rejects_unknown_level():
    with pytest.raises(ValueError):
        Logger.configure(level="LOUD", output=StringIO())


def test_logger_stderr_output_name(tmp_path, monkeypatch, capsys):
    """The "stderr" name selects the stream, not a file called stderr."""
    monkeypatch.chdir(tmp_path)
    Logger.configure(level="INFO", output="stderr", timestamps=False)

    Logger.get("server").info("listening on 127.0.0.1:8080")

    assert "listening on 127.0.0.1:8080" in capsys.readouterr().err
    assert not (tmp_path / "stderr").exists()
