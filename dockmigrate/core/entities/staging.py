"""Staging directories and the artifacts placed in them"""

import posixpath
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ArchiveArtifact:
    """A staged file, addressed on both hosts"""
    local_path: Path
    remote_path: str

    @property
    def name(self) -> str:
        return self.local_path.name


@dataclass(frozen=True)
class StagingLayout:
    """Artifact naming for one container in a local and a remote staging directory"""
    container: str
    local_dir: Path
    remote_dir: str

    @property
    def archive_name(self) -> str:
        return f"{self.container}-volumes.tar.gz"

    @property
    def compose_name(self) -> str:
        return f"{self.container}.compose.yml"

    @property
    def checkpoint_name(self) -> str:
        return f"{self.container}.checkpoint.json"

    @property
    def archive(self) -> ArchiveArtifact:
        return ArchiveArtifact(
            local_path=self.local_dir / self.archive_name,
            remote_path=posixpath.join(self.remote_dir, self.archive_name),
        )

    @property
    def compose(self) -> ArchiveArtifact:
        return ArchiveArtifact(
            local_path=self.local_dir / self.compose_name,
            remote_path=posixpath.join(self.remote_dir, self.compose_name),
        )

    @property
    def checkpoint_path(self) -> Path:
        return self.local_dir / self.checkpoint_name
