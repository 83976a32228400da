"""Core domain entities"""

from .container_snapshot import VolumeMount, VolumeSet, NetworkSet, ContainerSnapshot
from .staging import ArchiveArtifact, StagingLayout

__all__ = [
    'VolumeMount',
    'VolumeSet',
    'NetworkSet',
    'ContainerSnapshot',
    'ArchiveArtifact',
    'StagingLayout',
]
