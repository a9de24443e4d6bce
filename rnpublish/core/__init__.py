"""Core types: configuration, exit codes and the Result type."""

from .config import ConfigError, PublishConfig, PublishEnv, load_config
from .errors import ErrorCode
from .result import Err, Ok, Result

__all__ = [
    # config
    "ConfigError",
    "PublishConfig",
    "PublishEnv",
    "load_config",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
]
