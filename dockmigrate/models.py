from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError

from .core.entities import ContainerSnapshot, NetworkSet, StagingLayout, VolumeMount, VolumeSet
from .core.exceptions import CheckpointError
from .core.value_objects import ContainerIdentity, HostConnection

CHECKPOINT_VERSION = 1


class MigrationOutcome(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    SUSPENDED = "suspended"
    CANCELLED = "cancelled"


class VolumeEntry(BaseModel):
    destination: str
    name: Optional[str] = None


class MigrationCheckpoint(BaseModel):
    """Everything needed to continue a run after the confirmation gate"""
    version: int = CHECKPOINT_VERSION
    container: str
    target_host: str
    target_user: str
    target_port: int = 22
    image_name: str
    volumes: List[VolumeEntry] = Field(default_factory=list)
    networks: List[str] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    local_staging: str
    remote_staging: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_run(cls, identity: ContainerIdentity, snapshot: ContainerSnapshot,
                 layout: StagingLayout) -> 'MigrationCheckpoint':
        return cls(
            container=identity.name,
            target_host=identity.target.hostname,
            target_user=identity.target.username,
            target_port=identity.target.port,
            image_name=snapshot.image_name,
            volumes=[VolumeEntry(destination=m.destination, name=m.name) for m in snapshot.volumes],
            networks=list(snapshot.networks),
            metadata=snapshot.metadata,
            local_staging=str(layout.local_dir),
            remote_staging=layout.remote_dir,
        )

    def identity(self) -> ContainerIdentity:
        target = HostConnection(self.target_host, self.target_user, self.target_port)
        return ContainerIdentity(name=self.container, target=target)

    def layout(self) -> StagingLayout:
        return StagingLayout(
            container=self.container,
            local_dir=Path(self.local_staging),
            remote_dir=self.remote_staging,
        )

    def snapshot(self) -> ContainerSnapshot:
        layout = self.layout()
        compose_file = layout.compose.local_path
        return ContainerSnapshot(
            container=self.container,
            image_name=self.image_name,
            metadata=self.metadata,
            volumes=VolumeSet.from_mounts(VolumeMount(v.destination, v.name) for v in self.volumes),
            networks=NetworkSet.from_names(self.networks),
            compose_document=compose_file.read_text() if compose_file.exists() else None,
        )

    def save(self, path: Path) -> Path:
        path.write_text(self.model_dump_json(indent=2))
        return path

    @classmethod
    def load(cls, path: Path) -> 'MigrationCheckpoint':
        try:
            checkpoint = cls.model_validate_json(Path(path).read_text())
        except OSError as e:
            raise CheckpointError(f"Cannot read checkpoint {path}: {e}", path=str(path))
        except ValidationError as e:
            raise CheckpointError(f"Invalid checkpoint {path}: {e}", path=str(path))
        if checkpoint.version != CHECKPOINT_VERSION:
            raise CheckpointError(
                f"Unsupported checkpoint version {checkpoint.version} in {path}", path=str(path)
            )
        return checkpoint

    def missing_artifacts(self) -> List[str]:
        layout = self.layout()
        return [
            str(artifact.local_path)
            for artifact in (layout.archive, layout.compose)
            if not artifact.local_path.exists()
        ]


class MigrationReport(BaseModel):
    container: str
    outcome: MigrationOutcome
    last_state: str
    completed_states: List[str] = Field(default_factory=list)
    failed_state: Optional[str] = None
    error_kind: Optional[str] = None
    error: Optional[str] = None
    checkpoint_path: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome in (MigrationOutcome.COMPLETED, MigrationOutcome.SUSPENDED)
