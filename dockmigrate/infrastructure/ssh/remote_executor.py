"""
Remote execution over the OpenSSH client tools.
"""
import logging
import shlex
from typing import AsyncIterator, List, Optional

from ...config import SSHSettings
from ...core.interfaces.command_executor import CommandResult, ICommandExecutor
from ...core.interfaces.remote_executor import IRemoteExecutor
from ...core.value_objects.host_connection import HostConnection

logger = logging.getLogger(__name__)


class SSHRemoteExecutor(IRemoteExecutor):
    """Wraps remote commands in ``ssh`` and file copies in ``scp``.

    Remote commands are quoted with ``shlex`` so arguments reach the remote
    shell exactly as given.
    """

    def __init__(self, executor: ICommandExecutor, settings: Optional[SSHSettings] = None):
        self._executor = executor
        self._settings = settings or SSHSettings()

    def _common_options(self) -> List[str]:
        options = ["-o", f"ConnectTimeout={self._settings.connect_timeout}"]
        if self._settings.batch_mode:
            # Don't prompt for passwords/passphrases
            options.extend(["-o", "BatchMode=yes"])
        if self._settings.key_file:
            options.extend(["-i", self._settings.key_file])
        return options

    def build_ssh_command(self, host: HostConnection, command: List[str]) -> List[str]:
        return [
            "ssh",
            "-p", str(host.port),
            *self._common_options(),
            host.destination,
            shlex.join(command),
        ]

    def build_scp_command(self, host: HostConnection, local_path: str, remote_path: str) -> List[str]:
        return [
            "scp",
            "-P", str(host.port),
            *self._common_options(),
            local_path,
            host.remote_path(remote_path),
        ]

    async def run(self, host: HostConnection, command: List[str],
                  input: Optional[bytes] = None) -> CommandResult:
        logger.debug(f"Running on {host}: {shlex.join(command)}")
        return await self._executor.execute(self.build_ssh_command(host, command), input=input)

    async def run_streaming(self, host: HostConnection, command: List[str],
                            chunks: AsyncIterator[bytes]) -> CommandResult:
        logger.debug(f"Streaming to {host}: {shlex.join(command)}")
        return await self._executor.execute_streaming(self.build_ssh_command(host, command), chunks)

    async def copy(self, host: HostConnection, local_path: str, remote_path: str) -> CommandResult:
        logger.debug(f"Copying {local_path} to {host}:{remote_path}")
        return await self._executor.execute(self.build_scp_command(host, local_path, remote_path))
