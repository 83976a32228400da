"""Wires the concrete runtimes, transports and codec into an orchestrator"""

from .core.interfaces.confirmation_gate import ConfirmationGate
from .core.value_objects import RunConfig
from .infrastructure.command_executor import CommandExecutor
from .infrastructure.docker import AutocomposeGenerator, DockerEngineRuntime, RemoteCliRuntime
from .infrastructure.ssh import SSHRemoteExecutor
from .services.archive_codec import ArchiveCodec
from .services.migration_orchestrator import MigrationOrchestrator


def build_orchestrator(run_config: RunConfig, gate: ConfirmationGate) -> MigrationOrchestrator:
    settings = run_config.settings
    executor = CommandExecutor()
    remote = SSHRemoteExecutor(executor, settings.ssh)

    return MigrationOrchestrator(
        config=run_config,
        source=DockerEngineRuntime(settings.runtime, executor),
        target=RemoteCliRuntime(run_config.identity.target, remote, settings.runtime),
        remote=remote,
        compose=AutocomposeGenerator(settings.runtime),
        gate=gate,
        codec=ArchiveCodec(verbose=run_config.verbose),
    )
