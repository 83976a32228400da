"""
Local command execution on top of asyncio subprocesses.
"""
import asyncio
import contextlib
import logging
from typing import AsyncIterator, List, Optional

from ..core.interfaces.command_executor import ICommandExecutor, CommandResult


class CommandExecutor(ICommandExecutor):
    """Runs commands on this host and captures their output."""

    def __init__(self, timeout: Optional[int] = None):
        # Image and volume transfers run for as long as they need unless a timeout is given
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

    async def execute(self, command: List[str], input: Optional[bytes] = None) -> CommandResult:
        """Run a command, feeding ``input`` on stdin when given."""
        try:
            self.logger.debug(f"Executing command: {' '.join(command)}")

            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.PIPE if input is not None else asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            self.logger.error(f"Command failed to start: {' '.join(command)} - {e}")
            return CommandResult(
                success=False,
                returncode=127,
                stdout="",
                stderr=f"Command execution failed: {e}"
            )

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(input=input),
                timeout=self.timeout
            )
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            return CommandResult(
                success=False,
                returncode=124,  # Timeout exit code
                stdout="",
                stderr=f"Command timed out after {self.timeout} seconds"
            )

        return self._to_result(process.returncode, stdout, stderr)

    async def execute_streaming(self, command: List[str],
                                chunks: AsyncIterator[bytes]) -> CommandResult:
        """Pipe ``chunks`` into the command's stdin as they are produced.

        The command plays the consumer side of a producer/consumer pipe: it
        blocks on its stdin until the next chunk arrives.
        """
        try:
            self.logger.debug(f"Streaming into command: {' '.join(command)}")
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            self.logger.error(f"Command failed to start: {' '.join(command)} - {e}")
            return CommandResult(
                success=False,
                returncode=127,
                stdout="",
                stderr=f"Command execution failed: {e}"
            )

        stdout_task = asyncio.ensure_future(process.stdout.read())
        stderr_task = asyncio.ensure_future(process.stderr.read())
        sent = 0
        try:
            async for chunk in chunks:
                process.stdin.write(chunk)
                await process.stdin.drain()
                sent += len(chunk)
        except (BrokenPipeError, ConnectionResetError):
            self.logger.warning(f"Consumer closed its input after {sent} bytes")
        except BaseException:
            # Producer failed: do not leave the consumer waiting for more input
            process.kill()
            await process.wait()
            stdout_task.cancel()
            stderr_task.cancel()
            raise

        with contextlib.suppress(BrokenPipeError, ConnectionResetError):
            process.stdin.close()
            await process.stdin.wait_closed()

        await process.wait()
        stdout, stderr = await stdout_task, await stderr_task
        self.logger.debug(f"Streamed {sent} bytes into {command[0]}")
        return self._to_result(process.returncode, stdout, stderr)

    def _to_result(self, returncode: Optional[int], stdout: bytes, stderr: bytes) -> CommandResult:
        stdout_str = stdout.decode('utf-8', errors='replace').strip()
        stderr_str = stderr.decode('utf-8', errors='replace').strip()
        # Ensure returncode is never None
        code = returncode if returncode is not None else 1
        if code != 0:
            self.logger.warning(f"Command failed with exit code {code}: {stderr_str}")
        return CommandResult(
            success=code == 0,
            returncode=code,
            stdout=stdout_str,
            stderr=stderr_str
        )
