from lanmon.version.lanmon_version import LANMON_VERSION, Version

__all__ = ["LANMON_VERSION", "Version"]
