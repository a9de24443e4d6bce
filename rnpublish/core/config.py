"""Typed publish configuration.

Defaults describe the react-native monorepo. A ``publish.toml`` at the
repository root can override them:

    [npm]
    package = "react-native"
    package_dir = "packages/react-native"
    set_version_script = "scripts/set-rn-version.js"
    placeholder_version = "1000.0.0"

    [maven]
    local_dir = "/tmp/maven-local"
    group_path = "com/facebook/react"
    artifact = "react-android"
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_table

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "MavenConfig",
    "NpmConfig",
    "PublishConfig",
    "PublishEnv",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILENAME = "publish.toml"

# Environment variables read once per invocation
RELEASE_TAG_ENV = "CIRCLE_TAG"
OTP_ENV = "NPM_CONFIG_OTP"
SIGNING_KEY_ENV = "ORG_GRADLE_PROJECT_SIGNING_KEY_ENCODED"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class NpmConfig:
    """Where the npm package lives and how its version is stamped."""

    package: str = "react-native"
    package_dir: str = "packages/react-native"
    set_version_script: str = "scripts/set-rn-version.js"
    # Version used for dry-run builds off main
    placeholder_version: str = "1000.0.0"


@dataclass(frozen=True, slots=True)
class MavenConfig:
    """Android artifact layout in the local Maven repository."""

    local_dir: str = "/tmp/maven-local"
    group_path: str = "com/facebook/react"
    artifact: str = "react-android"


@dataclass(frozen=True, slots=True)
class PublishConfig:
    npm: NpmConfig = field(default_factory=NpmConfig)
    maven: MavenConfig = field(default_factory=MavenConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> PublishConfig:
        """Create PublishConfig from a mapping (parsed TOML)."""
        npm: StrDict = get_table(data, "npm") or {}
        maven: StrDict = get_table(data, "maven") or {}
        npm_defaults = NpmConfig()
        maven_defaults = MavenConfig()

        return cls(
            npm=NpmConfig(
                package=get_str(npm, "package") or npm_defaults.package,
                package_dir=get_str(npm, "package_dir") or npm_defaults.package_dir,
                set_version_script=get_str(npm, "set_version_script")
                or npm_defaults.set_version_script,
                placeholder_version=get_str(npm, "placeholder_version")
                or npm_defaults.placeholder_version,
            ),
            maven=MavenConfig(
                local_dir=get_str(maven, "local_dir") or maven_defaults.local_dir,
                group_path=get_str(maven, "group_path") or maven_defaults.group_path,
                artifact=get_str(maven, "artifact") or maven_defaults.artifact,
            ),
        )


@dataclass(frozen=True, slots=True)
class PublishEnv:
    """Snapshot of the environment variables the publish flow consumes."""

    release_tag: str | None = None
    otp: str | None = None
    signing_key_encoded: str | None = None

    @classmethod
    def from_environ(cls, environ: Mapping[str, str]) -> PublishEnv:
        def _get(name: str) -> str | None:
            value = environ.get(name, "").strip()
            return value or None

        return cls(
            release_tag=_get(RELEASE_TAG_ENV),
            otp=_get(OTP_ENV),
            signing_key_encoded=_get(SIGNING_KEY_ENV),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def load_config(path: Path) -> Result[PublishConfig, ConfigError]:
    """Load and parse ``publish.toml``.

    Args:
        path: Path to the config file

    Returns:
        Ok(PublishConfig) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result
    return Ok(PublishConfig.from_dict(result.value))


def load_config_or_default(path: Path) -> Result[PublishConfig, ConfigError]:
    """Like load_config, but a missing file means defaults."""
    if not path.exists():
        return Ok(PublishConfig())
    return load_config(path)
