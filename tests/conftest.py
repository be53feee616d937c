"""Shared fixtures."""

from io import StringIO

import pytest

from lanmon.utils.logger import Logger


@pytest.fixture(autouse=True)
def configured_logger():
    """Send log output to a buffer so backends can log during tests."""
    output = StringIO()
    Logger.configure(level="DEBUG", output=output, timestamps=False)
    return output
