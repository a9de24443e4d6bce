"""npm and Maven publishing for react-native."""

from .errors import InvalidVersionError, PublishError
from .model import BUILD_TYPES, BuildType, NpmInfo, ParsedVersion
from .service import publish_npm

__all__ = [
    "BUILD_TYPES",
    "BuildType",
    "InvalidVersionError",
    "NpmInfo",
    "ParsedVersion",
    "PublishError",
    "publish_npm",
]
