"""Destination-side runtime driven through the CLI over the remote executor"""

import logging
import shlex
from typing import AsyncIterator, List, Optional, Sequence

from ...config import RuntimeSettings
from ...core.exceptions import RemoteExecutionError, TransferError
from ...core.interfaces.command_executor import CommandResult
from ...core.interfaces.container_runtime import BindMount, TargetRuntime
from ...core.interfaces.remote_executor import IRemoteExecutor
from ...core.value_objects.host_connection import HostConnection
from .runtime_commands import RuntimeCommands

logger = logging.getLogger(__name__)

# ssh reserves this status for its own failures (connection, authentication)
SSH_ERROR_STATUS = 255


class RemoteCliRuntime(TargetRuntime):

    def __init__(self, host: HostConnection, remote: IRemoteExecutor, settings: RuntimeSettings):
        self._host = host
        self._remote = remote
        self._settings = settings
        self._commands = RuntimeCommands(settings.binary)

    async def _run(self, command: List[str], action: str) -> CommandResult:
        result = await self._remote.run(self._host, command)
        if not result.success:
            raise RemoteExecutionError(
                f"{action} failed on {self._host}: {result.stderr or 'exit status ' + str(result.returncode)}",
                command=shlex.join(command),
                returncode=result.returncode,
                stderr=result.stderr,
            )
        return result

    async def _probe(self, command: List[str]) -> bool:
        """True if the command succeeds; connection failures are still errors"""
        result = await self._remote.run(self._host, command)
        if result.returncode == SSH_ERROR_STATUS:
            raise RemoteExecutionError(
                f"Cannot reach {self._host}: {result.stderr}",
                command=shlex.join(command),
                returncode=result.returncode,
                stderr=result.stderr,
            )
        return result.success

    async def load(self, chunks: AsyncIterator[bytes]) -> None:
        command = self._commands.load()
        result = await self._remote.run_streaming(self._host, command, chunks)
        if not result.success:
            raise TransferError(
                f"Image load on {self._host} failed: {result.stderr or result.returncode}",
                target=str(self._host),
            )
        logger.info(f"{result.stdout or 'Image loaded'} on {self._host}")

    async def volume_exists(self, name: str) -> bool:
        return await self._probe(self._commands.volume_inspect(name))

    async def volume_create(self, name: str) -> None:
        await self._run(self._commands.volume_create(name), f"Creating volume {name}")

    async def network_exists(self, name: str) -> bool:
        return await self._probe(self._commands.network_inspect(name))

    async def network_create(self, name: str) -> None:
        await self._run(self._commands.network_create(name), f"Creating network {name}")

    async def compose_create(self, compose_file: str) -> None:
        await self._run(self._commands.compose_create(compose_file), f"Creating from {compose_file}")

    async def start(self, container: str) -> None:
        await self._run(self._commands.start(container), f"Starting {container}")

    async def run_helper(self, command: Sequence[str], volumes_from: str,
                         binds: Sequence[BindMount] = (),
                         input: Optional[bytes] = None) -> CommandResult:
        argv = self._commands.helper_run(
            self._settings.helper_image, command, volumes_from, binds,
            interactive=input is not None,
        )
        return await self._remote.run(self._host, argv, input=input)
