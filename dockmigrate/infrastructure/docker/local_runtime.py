"""Source-side runtime backed by the docker SDK"""

import asyncio
import logging
from typing import Any, AsyncIterator, Dict, Optional, Sequence

import docker
from docker.errors import DockerException, NotFound

from ...config import RuntimeSettings
from ...core.exceptions import (
    CommitError,
    NotFoundError,
    RuntimeOperationError,
    TransferError,
)
from ...core.interfaces.command_executor import CommandResult, ICommandExecutor
from ...core.interfaces.container_runtime import BindMount, SourceRuntime
from .runtime_commands import RuntimeCommands, parse_image_reference

logger = logging.getLogger(__name__)


class DockerEngineRuntime(SourceRuntime):
    """Talks to the local engine over its API socket.

    SDK calls block, so each one runs in a worker thread. Helper containers
    are started through the CLI instead, because the tar path list is fed to
    them on stdin.
    """

    SAVE_CHUNK_SIZE = 2 * 1024 * 1024

    def __init__(self, settings: RuntimeSettings, executor: ICommandExecutor,
                 client: Optional[docker.DockerClient] = None):
        self._settings = settings
        self._executor = executor
        # Helpers must reach the same engine as the SDK client
        self._commands = RuntimeCommands(settings.binary, engine_url=settings.base_url or None)
        self._client = client

    @property
    def client(self) -> docker.DockerClient:
        if self._client is None:
            try:
                self._client = docker.DockerClient(base_url=self._settings.engine_url)
            except DockerException as e:
                raise RuntimeOperationError(
                    f"Cannot connect to container engine at {self._settings.engine_url}: {e}"
                )
        return self._client

    async def _get_container(self, container: str):
        try:
            return await asyncio.to_thread(self.client.containers.get, container)
        except NotFound:
            raise NotFoundError(f"Container {container} not found", resource=container)
        except DockerException as e:
            raise RuntimeOperationError(f"Failed to look up {container}: {e}", container_id=container)

    async def inspect(self, container: str) -> Dict[str, Any]:
        try:
            return await asyncio.to_thread(self.client.api.inspect_container, container)
        except NotFound:
            raise NotFoundError(f"Container {container} not found", resource=container)
        except DockerException as e:
            raise RuntimeOperationError(f"Failed to inspect {container}: {e}", container_id=container)

    async def stop(self, container: str, timeout: int = 10) -> None:
        target = await self._get_container(container)
        try:
            await asyncio.to_thread(target.stop, timeout=timeout)
        except DockerException as e:
            raise RuntimeOperationError(f"Failed to stop {container}: {e}", container_id=container)
        logger.info(f"Stopped container {container}")

    async def commit(self, container: str, image_name: str) -> None:
        target = await self._get_container(container)
        repository, tag = parse_image_reference(image_name)
        try:
            image = await asyncio.to_thread(target.commit, repository=repository, tag=tag)
        except DockerException as e:
            raise CommitError(f"Failed to commit {container} as {repository}:{tag}: {e}",
                              container_id=container, image=image_name)
        logger.info(f"Committed {container} as {repository}:{tag} ({image.short_id})")

    async def save(self, image_name: str) -> AsyncIterator[bytes]:
        repository, tag = parse_image_reference(image_name)
        reference = f"{repository}:{tag}"
        try:
            image = await asyncio.to_thread(self.client.images.get, reference)
        except NotFound:
            raise NotFoundError(f"Image {reference} not found", resource=reference)
        except DockerException as e:
            raise TransferError(f"Failed to look up image {reference}: {e}", source=reference)

        # Keep the tag in the archive so the loading side restores the name
        named = reference if reference in image.tags else True
        try:
            stream = await asyncio.to_thread(image.save, chunk_size=self.SAVE_CHUNK_SIZE, named=named)
            while True:
                chunk = await asyncio.to_thread(next, stream, None)
                if chunk is None:
                    break
                yield chunk
        except DockerException as e:
            raise TransferError(f"Failed to save image {reference}: {e}", source=reference)

    async def run_helper(self, command: Sequence[str], volumes_from: str,
                         binds: Sequence[BindMount] = (),
                         input: Optional[bytes] = None) -> CommandResult:
        argv = self._commands.helper_run(
            self._settings.helper_image, command, volumes_from, binds,
            interactive=input is not None,
        )
        return await self._executor.execute(argv, input=input)
