"""Shared helpers: logging and environment access."""

from lanmon.utils.env import EnvVarError, EnvVarTypeError, env_is_set, get_env
from lanmon.utils.logger import Logger, LoggerNotConfiguredError, LogLevel

__all__ = [
    "EnvVarError",
    "EnvVarTypeError",
    "LogLevel",
    "Logger",
    "LoggerNotConfiguredError",
    "env_is_set",
    "get_env",
]
