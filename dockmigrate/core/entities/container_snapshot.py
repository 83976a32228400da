"""Container snapshot entities"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, Optional, Tuple


HOST_NETWORK = "host"


@dataclass(frozen=True)
class VolumeMount:
    """A mount destination inside the container and its backing volume.

    ``name`` is None for bind mounts: their content is archived like any other
    mount but there is no named volume to provision on the destination host.
    """
    destination: str
    name: Optional[str] = None

    @property
    def is_named(self) -> bool:
        return bool(self.name)


@dataclass(frozen=True)
class VolumeSet:
    """Mounts of one container, ordered by destination and de-duplicated"""
    mounts: Tuple[VolumeMount, ...] = ()

    def __post_init__(self):
        destinations = [m.destination for m in self.mounts]
        if len(destinations) != len(set(destinations)):
            raise ValueError("Mount destinations must be unique within a container")

    @classmethod
    def from_mounts(cls, mounts: Iterable[VolumeMount]) -> 'VolumeSet':
        by_destination: Dict[str, VolumeMount] = {}
        for mount in mounts:
            # Repeated entries for one destination collapse to the first
            by_destination.setdefault(mount.destination, mount)
        ordered = sorted(by_destination.values(), key=lambda m: m.destination)
        return cls(tuple(ordered))

    @property
    def destinations(self) -> Tuple[str, ...]:
        return tuple(m.destination for m in self.mounts)

    @property
    def names(self) -> Tuple[str, ...]:
        """Named volumes in destination order, each listed once.

        One volume may back several destinations (``-v data:/a -v data:/b``).
        """
        return tuple(dict.fromkeys(m.name for m in self.mounts if m.is_named))

    def __len__(self) -> int:
        return len(self.mounts)

    def __iter__(self):
        return iter(self.mounts)

    def __bool__(self) -> bool:
        return bool(self.mounts)


@dataclass(frozen=True)
class NetworkSet:
    """Networks attached to a container, without the implicit host network"""
    names: Tuple[str, ...] = ()

    @classmethod
    def from_names(cls, names: Iterable[str]) -> 'NetworkSet':
        return cls(tuple(sorted({n for n in names if n and n != HOST_NETWORK})))

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def __len__(self) -> int:
        return len(self.names)

    def __iter__(self):
        return iter(self.names)


@dataclass(frozen=True)
class ContainerSnapshot:
    """Everything captured from the source container in one run"""
    container: str
    image_name: str
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False)
    volumes: VolumeSet = field(default_factory=VolumeSet)
    networks: NetworkSet = field(default_factory=NetworkSet)
    compose_document: Optional[str] = None

    def with_compose(self, document: str) -> 'ContainerSnapshot':
        return replace(self, compose_document=document)
