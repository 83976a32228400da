"""
Recording test doubles for the runtime, remote and compose ports.

All doubles share one ``calls`` log so tests can assert on the order of
operations across the source and destination hosts.
"""

import copy
from pathlib import Path
from typing import AsyncIterator, List, Optional, Sequence

from dockmigrate.core.exceptions import CommitError, NotFoundError
from dockmigrate.core.interfaces.command_executor import CommandResult
from dockmigrate.core.interfaces.compose_generator import ComposeGenerator
from dockmigrate.core.interfaces.container_runtime import BindMount, SourceRuntime, TargetRuntime
from dockmigrate.core.interfaces.remote_executor import IRemoteExecutor
from tests.fixtures.test_data import WEB_COMPOSE, WEB_INSPECT

REMOTE_STAGING = "/tmp/tmp.Xq81rT"
IMAGE_CHUNKS = [b"layer-one", b"layer-two", b"manifest"]


def ok(stdout: str = "") -> CommandResult:
    return CommandResult(returncode=0, stdout=stdout, stderr="")


def failed(stderr: str = "boom", returncode: int = 1) -> CommandResult:
    return CommandResult(returncode=returncode, stdout="", stderr=stderr)


class RecordingSourceRuntime(SourceRuntime):
    """Local runtime double; ``fail_on`` names an operation that should raise"""

    def __init__(self, calls: List[tuple], inspect_doc: Optional[dict] = None,
                 fail_on: Optional[str] = None):
        self.calls = calls
        self.inspect_doc = copy.deepcopy(inspect_doc if inspect_doc is not None else WEB_INSPECT)
        self.fail_on = fail_on
        self.helper_result = ok()
        self.helper_inputs: List[Optional[bytes]] = []
        self.helper_binds: List[Sequence[BindMount]] = []

    async def inspect(self, container):
        self.calls.append(("source.inspect", container))
        if self.fail_on == "inspect":
            raise NotFoundError(f"Container {container} not found", resource=container)
        return self.inspect_doc

    async def stop(self, container, timeout=10):
        self.calls.append(("source.stop", container, timeout))

    async def commit(self, container, image_name):
        self.calls.append(("source.commit", container, image_name))
        if self.fail_on == "commit":
            raise CommitError(f"Failed to commit {container}", container_id=container)

    async def save(self, image_name) -> AsyncIterator[bytes]:
        self.calls.append(("source.save", image_name))
        for chunk in IMAGE_CHUNKS:
            yield chunk

    async def run_helper(self, command, volumes_from, binds=(), input=None):
        self.calls.append(("source.run_helper", tuple(command), volumes_from))
        self.helper_inputs.append(input)
        self.helper_binds.append(tuple(binds))
        return self.helper_result


class RecordingTargetRuntime(TargetRuntime):
    """Remote runtime double that remembers which volumes and networks exist"""

    def __init__(self, calls: List[tuple]):
        self.calls = calls
        self.volumes = set()
        self.networks = set()
        self.loaded = b""
        self.helper_result = ok()
        self.helper_binds: List[Sequence[BindMount]] = []

    async def load(self, chunks):
        self.calls.append(("target.load",))
        async for chunk in chunks:
            self.loaded += chunk

    async def volume_exists(self, name):
        return name in self.volumes

    async def volume_create(self, name):
        self.calls.append(("target.volume_create", name))
        self.volumes.add(name)

    async def network_exists(self, name):
        return name in self.networks

    async def network_create(self, name):
        self.calls.append(("target.network_create", name))
        self.networks.add(name)

    async def compose_create(self, compose_file):
        self.calls.append(("target.compose_create", compose_file))

    async def start(self, container):
        self.calls.append(("target.start", container))

    async def run_helper(self, command, volumes_from, binds=(), input=None):
        self.calls.append(("target.run_helper", tuple(command), volumes_from))
        self.helper_binds.append(tuple(binds))
        return self.helper_result


class FakeRemoteExecutor(IRemoteExecutor):
    def __init__(self, calls: List[tuple]):
        self.calls = calls
        self.mktemp_result = ok(REMOTE_STAGING)
        self.copy_result = ok()
        self.copied: List[tuple] = []

    async def run(self, host, command, input=None):
        self.calls.append(("remote.run", tuple(command)))
        if command == ["mktemp", "-d"]:
            return self.mktemp_result
        return ok()

    async def run_streaming(self, host, command, chunks):
        self.calls.append(("remote.run_streaming", tuple(command)))
        async for _ in chunks:
            pass
        return ok()

    async def copy(self, host, local_path, remote_path):
        self.calls.append(("remote.copy", Path(local_path).name, remote_path))
        self.copied.append((local_path, remote_path))
        return self.copy_result


class FakeComposeGenerator(ComposeGenerator):
    def __init__(self, calls: List[tuple], document: str = WEB_COMPOSE):
        self.calls = calls
        self.document = document

    async def generate(self, container):
        self.calls.append(("compose.generate", container))
        return self.document

