"""
dockmigrate Configuration Module

Reads every environment override once into immutable settings objects. The
resulting ``MigrateConfig`` is embedded in the per-run ``RunConfig`` and
handed explicitly to each component.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from .core.exceptions.validation_exceptions import UsageError

logger = logging.getLogger(__name__)

ENV_PREFIX = "DOCKMIGRATE_"


class RuntimeFamily(str, Enum):
    DOCKER = "docker"
    PODMAN = "podman"

    @property
    def binary(self) -> str:
        return self.value

    @property
    def default_socket(self) -> str:
        if self is RuntimeFamily.PODMAN:
            return "unix:///run/podman/podman.sock"
        return "unix:///var/run/docker.sock"


@dataclass(frozen=True)
class RuntimeSettings:
    """Container runtime selection and helper images"""
    family: RuntimeFamily = RuntimeFamily.DOCKER
    # Ubuntu 24.04 ships GNU tar 1.35, which finds holes with SEEK_DATA/SEEK_HOLE
    helper_image: str = "ubuntu:24.04"
    compose_image: str = "ghcr.io/red5d/docker-autocompose"
    base_url: str = ""
    stop_timeout: int = 10

    @property
    def binary(self) -> str:
        return self.family.binary

    @property
    def engine_url(self) -> str:
        return self.base_url or self.family.default_socket

    @property
    def socket_path(self) -> str:
        """Filesystem path of the engine socket, for bind-mounting into helpers"""
        url = self.engine_url
        if url.startswith("unix://"):
            return url[len("unix://"):]
        return "/var/run/docker.sock"


@dataclass(frozen=True)
class SSHSettings:
    """Remote transport settings"""
    port: int = 22
    key_file: Optional[str] = None
    connect_timeout: int = 30
    batch_mode: bool = False


@dataclass(frozen=True)
class StagingSettings:
    local_dir: str = "migrate-temp"


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"
    format: str = "plain"


@dataclass(frozen=True)
class MigrateConfig:
    runtime: RuntimeSettings = field(default_factory=RuntimeSettings)
    ssh: SSHSettings = field(default_factory=SSHSettings)
    staging: StagingSettings = field(default_factory=StagingSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    def get_summary(self) -> dict:
        """Get a summary of configuration for debug output"""
        return {
            "runtime": {
                "family": self.runtime.family.value,
                "helper_image": self.runtime.helper_image,
                "compose_image": self.runtime.compose_image,
                "engine_url": self.runtime.engine_url,
                "stop_timeout": self.runtime.stop_timeout,
            },
            "ssh": {
                "port": self.ssh.port,
                "key_file": self.ssh.key_file,
                "connect_timeout": self.ssh.connect_timeout,
                "batch_mode": self.ssh.batch_mode,
            },
            "staging": {"local_dir": self.staging.local_dir},
            "logging": {"level": self.logging.level, "format": self.logging.format},
        }


class EnvironmentLoader:
    """Builds a ``MigrateConfig`` from an environment mapping"""

    VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
    VALID_LOG_FORMATS = ("plain", "json")

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = os.environ if environ is None else environ

    def load(self) -> MigrateConfig:
        runtime = RuntimeSettings(
            family=self._get_family("DOCKER"),
            helper_image=self._get_string("IMAGE", RuntimeSettings.helper_image),
            compose_image=self._get_string("COMPOSE_IMAGE", RuntimeSettings.compose_image),
            base_url=self._get_string("DOCKER_HOST_URL", ""),
            stop_timeout=self._get_int("STOP_TIMEOUT", RuntimeSettings.stop_timeout),
        )
        ssh = SSHSettings(
            port=self._get_int("SSH_PORT", SSHSettings.port),
            key_file=self._get_string("SSH_KEY_FILE", "") or None,
            connect_timeout=self._get_int("SSH_CONNECT_TIMEOUT", SSHSettings.connect_timeout),
            batch_mode=self._get_bool("SSH_BATCH_MODE", SSHSettings.batch_mode),
        )
        staging = StagingSettings(
            local_dir=self._get_string("LOCAL_TMP", StagingSettings.local_dir),
        )

        log_level = self._get_string("LOG_LEVEL", LoggingSettings.level).upper()
        if log_level not in self.VALID_LOG_LEVELS:
            logger.warning(f"Invalid log level: {log_level}, using INFO")
            log_level = "INFO"
        log_format = self._get_string("LOG_FORMAT", LoggingSettings.format).lower()
        if log_format not in self.VALID_LOG_FORMATS:
            logger.warning(f"Invalid log format: {log_format}, using plain")
            log_format = "plain"

        return MigrateConfig(
            runtime=runtime,
            ssh=ssh,
            staging=staging,
            logging=LoggingSettings(level=log_level, format=log_format),
        )

    def _get_string(self, key: str, default: str) -> str:
        """Get string value from environment, bare key first then prefixed"""
        for prefix in ["", ENV_PREFIX]:
            value = self._environ.get(f"{prefix}{key}")
            if value is not None:
                return value
        return default

    def _get_int(self, key: str, default: int) -> int:
        value = self._get_string(key, str(default))
        try:
            return int(value)
        except ValueError:
            logger.warning(f"Invalid integer value for {key}: {value}, using default: {default}")
            return default

    def _get_bool(self, key: str, default: bool) -> bool:
        value = self._get_string(key, str(default)).lower()
        return value in ("true", "1", "yes", "on")

    def _get_family(self, key: str) -> RuntimeFamily:
        value = self._get_string(key, RuntimeFamily.DOCKER.value).strip().lower()
        try:
            return RuntimeFamily(value)
        except ValueError:
            supported = ", ".join(f.value for f in RuntimeFamily)
            raise UsageError(f"Unsupported container runtime '{value}' (expected one of: {supported})",
                             field=key)


def load_dotenv_if_exists(search_dir: Optional[Path] = None) -> bool:
    """Load a .env file from the working directory if one is present"""
    env_file = (search_dir or Path.cwd()) / ".env"
    if not env_file.exists():
        return False
    # Values already in the environment win over the file
    load_dotenv(env_file, override=False)
    logger.debug(f"Environment variables loaded from: {env_file}")
    return True


def get_config(environ: Optional[Mapping[str, str]] = None) -> MigrateConfig:
    """Load configuration; reads .env only when using the real process environment"""
    if environ is None:
        load_dotenv_if_exists()
    return EnvironmentLoader(environ).load()
