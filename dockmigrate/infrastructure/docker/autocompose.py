"""Compose document generation through the docker-autocompose image"""

import asyncio
import logging
from typing import Optional

import docker
import yaml
from docker.errors import ContainerError, DockerException

from ...config import RuntimeSettings
from ...core.exceptions import ComposeGenerationError
from ...core.interfaces.compose_generator import ComposeGenerator

logger = logging.getLogger(__name__)


def validate_compose_document(document: str, container: Optional[str] = None) -> dict:
    """Parse a compose document and check it describes at least one service"""
    try:
        data = yaml.safe_load(document)
    except yaml.YAMLError as e:
        raise ComposeGenerationError(f"Compose document is not valid YAML: {e}", container_id=container)

    if not isinstance(data, dict):
        raise ComposeGenerationError("Compose document is not a mapping", container_id=container)
    services = data.get("services")
    if not isinstance(services, dict) or not services:
        raise ComposeGenerationError("Compose document defines no services", container_id=container)
    return data


class AutocomposeGenerator(ComposeGenerator):
    """Runs the generator image against the engine socket and captures its output"""

    CONTAINER_SOCKET = "/var/run/docker.sock"

    def __init__(self, settings: RuntimeSettings, client: Optional[docker.DockerClient] = None):
        self._settings = settings
        self._client = client

    @property
    def client(self) -> docker.DockerClient:
        if self._client is None:
            try:
                self._client = docker.DockerClient(base_url=self._settings.engine_url)
            except DockerException as e:
                raise ComposeGenerationError(
                    f"Cannot connect to container engine at {self._settings.engine_url}: {e}"
                )
        return self._client

    async def generate(self, container: str) -> str:
        logger.debug(f"Generating compose document for {container} with {self._settings.compose_image}")
        try:
            output = await asyncio.to_thread(
                self.client.containers.run,
                self._settings.compose_image,
                command=[container],
                volumes={
                    self._settings.socket_path: {"bind": self.CONTAINER_SOCKET, "mode": "rw"}
                },
                remove=True,
                stdout=True,
                stderr=False,
            )
        except ContainerError as e:
            raise ComposeGenerationError(
                f"Compose generator exited with {e.exit_status}: {e.stderr}", container_id=container
            )
        except DockerException as e:
            raise ComposeGenerationError(f"Compose generator could not run: {e}", container_id=container)

        document = output.decode("utf-8") if isinstance(output, bytes) else str(output)
        validate_compose_document(document, container)
        return document
