"""Immutable per-run configuration"""

from dataclasses import dataclass
from pathlib import Path

from ...config import MigrateConfig
from .container_identity import ContainerIdentity


@dataclass(frozen=True)
class RunConfig:
    """Arguments and environment settings collected once per invocation"""

    identity: ContainerIdentity
    settings: MigrateConfig
    verbose: bool = False

    @property
    def container(self) -> str:
        return self.identity.name

    @property
    def local_staging(self) -> Path:
        return Path(self.settings.staging.local_dir).resolve()
