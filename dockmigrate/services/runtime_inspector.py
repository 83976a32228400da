import logging
from typing import Any, Dict, List, Union

from ..core.entities import ContainerSnapshot, NetworkSet, VolumeMount, VolumeSet
from ..core.exceptions import NotFoundError, RuntimeOperationError
from ..core.interfaces.container_runtime import SourceRuntime

logger = logging.getLogger(__name__)


class RuntimeInspector:
    """Reads the parts of a container's metadata a migration needs"""

    def __init__(self, runtime: SourceRuntime):
        self._runtime = runtime

    async def inspect(self, container: str) -> ContainerSnapshot:
        """Image reference, mounts and networks of ``container``.

        Containers without volumes or extra networks yield empty sets.
        """
        metadata = self._unwrap(await self._runtime.inspect(container), container)
        snapshot = ContainerSnapshot(
            container=container,
            image_name=self.image_reference(metadata, container),
            metadata=metadata,
            volumes=self.volume_set(metadata),
            networks=self.network_set(metadata),
        )
        logger.debug(
            f"Inspected {container}: image={snapshot.image_name} "
            f"volumes={list(snapshot.volumes.names)} networks={list(snapshot.networks)}"
        )
        return snapshot

    @staticmethod
    def _unwrap(metadata: Union[Dict[str, Any], List[Dict[str, Any]]], container: str) -> Dict[str, Any]:
        # The CLI prints a list, the engine API returns the object itself
        if isinstance(metadata, list):
            if not metadata:
                raise NotFoundError(f"Container {container} not found", resource=container)
            metadata = metadata[0]
        return metadata

    @staticmethod
    def image_reference(metadata: Dict[str, Any], container: str = "") -> str:
        image = (metadata.get("Config") or {}).get("Image")
        if not image:
            raise RuntimeOperationError(f"Container {container} has no image reference",
                                        container_id=container)
        return image

    @staticmethod
    def volume_set(metadata: Dict[str, Any]) -> VolumeSet:
        mounts = []
        for mount in metadata.get("Mounts") or []:
            destination = mount.get("Destination")
            if not destination:
                continue
            name = mount.get("Name") if mount.get("Type", "volume") == "volume" else None
            mounts.append(VolumeMount(destination=destination, name=name or None))
        return VolumeSet.from_mounts(mounts)

    @staticmethod
    def network_set(metadata: Dict[str, Any]) -> NetworkSet:
        networks = (metadata.get("NetworkSettings") or {}).get("Networks") or {}
        return NetworkSet.from_names(networks.keys())
