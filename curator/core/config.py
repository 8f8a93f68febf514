"""Typed loading of ``curator.toml``.

The file is optional: a missing file yields the defaults below, while a file
that exists but cannot be parsed is a ConfigError.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_int, get_str, get_str_list, get_table

__all__ = [
    "AuthConfig",
    "BuildConfig",
    "Config",
    "ConfigError",
    "EnginesConfig",
    "ServersConfig",
    "CONFIG_FILE_NAME",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILE_NAME = "curator.toml"

DEFAULT_TOKEN_ENV = "CURATOR_AUTH_TOKEN"
DEFAULT_TOKEN_FILE = "/auth-token"
DEFAULT_CREDENTIALS_FILE = "/archive-creds"
DEFAULT_BUILD_JOBS = 8
DEFAULT_HEARTBEAT_SECONDS = 60.0
DEFAULT_PRODUCTION_SERVER = "https://snapshots.example.org"
DEFAULT_STAGING_SERVER = "https://staging.snapshots.example.org"
DEFAULT_ARCHIVE_SERVER = "https://archive.example.org"


@dataclass(frozen=True, slots=True)
class ConfigError:
    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class AuthConfig:
    """Where publish secrets come from."""

    token_env: str = DEFAULT_TOKEN_ENV
    token_file: Path = Path(DEFAULT_TOKEN_FILE)
    credentials_file: Path = Path(DEFAULT_CREDENTIALS_FILE)


@dataclass(frozen=True, slots=True)
class BuildConfig:
    jobs: int = DEFAULT_BUILD_JOBS
    heartbeat_seconds: float = DEFAULT_HEARTBEAT_SECONDS


@dataclass(frozen=True, slots=True)
class ServersConfig:
    production: str = DEFAULT_PRODUCTION_SERVER
    staging: str = DEFAULT_STAGING_SERVER
    archive: str = DEFAULT_ARCHIVE_SERVER


@dataclass(frozen=True, slots=True)
class EnginesConfig:
    """Command lines for the external plan/validate/build/bundle tools."""

    plan: tuple[str, ...] = ("curator-plan",)
    validate: tuple[str, ...] = ("curator-check",)
    build: tuple[str, ...] = ("curator-build",)
    bundle: tuple[str, ...] = ("curator-bundle",)


@dataclass(frozen=True, slots=True)
class Config:
    auth: AuthConfig = field(default_factory=AuthConfig)
    build: BuildConfig = field(default_factory=BuildConfig)
    servers: ServersConfig = field(default_factory=ServersConfig)
    engines: EnginesConfig = field(default_factory=EnginesConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a parsed TOML mapping.

        Raises ValueError for non-positive build counts or intervals.
        """
        auth: StrDict = get_table(data, "auth") or {}
        build: StrDict = get_table(data, "build") or {}
        servers: StrDict = get_table(data, "servers") or {}
        engines: StrDict = get_table(data, "engines") or {}

        token_file = get_str(auth, "token_file")
        creds_file = get_str(auth, "credentials_file")
        heartbeat = build.get("heartbeat_seconds")
        if isinstance(heartbeat, bool) or not isinstance(heartbeat, (int, float)):
            heartbeat = DEFAULT_HEARTBEAT_SECONDS
        if not heartbeat > 0:
            raise ValueError(f"build.heartbeat_seconds must be positive, got {heartbeat}")
        jobs = get_int(build, "jobs")
        if jobs is None:
            jobs = DEFAULT_BUILD_JOBS
        if jobs <= 0:
            raise ValueError(f"build.jobs must be positive, got {jobs}")

        defaults = EnginesConfig()
        return cls(
            auth=AuthConfig(
                token_env=get_str(auth, "token_env") or DEFAULT_TOKEN_ENV,
                token_file=Path(token_file or DEFAULT_TOKEN_FILE),
                credentials_file=Path(creds_file or DEFAULT_CREDENTIALS_FILE),
            ),
            build=BuildConfig(
                jobs=jobs,
                heartbeat_seconds=float(heartbeat),
            ),
            servers=ServersConfig(
                production=get_str(servers, "production") or DEFAULT_PRODUCTION_SERVER,
                staging=get_str(servers, "staging") or DEFAULT_STAGING_SERVER,
                archive=get_str(servers, "archive") or DEFAULT_ARCHIVE_SERVER,
            ),
            engines=EnginesConfig(
                plan=get_str_list(engines, "plan") or defaults.plan,
                validate=get_str_list(engines, "validate") or defaults.validate,
                build=get_str_list(engines, "build") or defaults.build,
                bundle=get_str_list(engines, "bundle") or defaults.bundle,
            ),
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


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file."""
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(root: Path) -> Result[Config, ConfigError]:
    """Load ``<root>/curator.toml`` if present, otherwise return defaults."""
    path = root / CONFIG_FILE_NAME
    if not path.exists():
        return Ok(Config())
    return load_config(path)
