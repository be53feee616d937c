"""lanmon - Local network diagnostics behind a small HTTP API and web UI."""

from lanmon.version import LANMON_VERSION, Version

__version__ = str(LANMON_VERSION)
__version_info__ = LANMON_VERSION

__all__ = [
    "LANMON_VERSION",
    "Version",
    "__version__",
    "__version_info__",
]
