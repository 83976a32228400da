"""
Container migration pipeline.

Runs the states below strictly in order, one blocking step at a time. Every
step either succeeds or stops the run: nothing is rolled back or retried, so
a failed run leaves the source container stopped and staged artifacts in
place for the operator. The confirmation gate writes a checkpoint that a
later invocation can resume from.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Awaitable, Callable, Dict, List, Optional, Sequence

from ..core.entities import ContainerSnapshot, StagingLayout
from ..core.exceptions import (
    ArchiveIOError,
    CheckpointError,
    ComposeGenerationError,
    MigrationCancelledError,
    MigrationError,
    RemoteExecutionError,
    TransferError,
)
from ..core.interfaces.compose_generator import ComposeGenerator
from ..core.interfaces.confirmation_gate import ConfirmationGate, GateDecision
from ..core.interfaces.container_runtime import BindMount, SourceRuntime, TargetRuntime
from ..core.interfaces.remote_executor import IRemoteExecutor
from ..core.result import Result
from ..core.value_objects import ContainerIdentity, RunConfig
from ..models import MigrationCheckpoint, MigrationOutcome, MigrationReport
from .archive_codec import ArchiveCodec
from .runtime_inspector import RuntimeInspector

logger = logging.getLogger(__name__)


class MigrationState(str, Enum):
    INITIALIZING = "initializing"
    STOPPING = "stopping"
    SNAPSHOTTING = "snapshotting"
    TRANSFERRING_IMAGE = "transferring_image"
    EXPORTING_VOLUMES = "exporting_volumes"
    EXPORTING_CONFIG = "exporting_config"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    TRANSFERRING_ARTIFACTS = "transferring_artifacts"
    PROVISIONING_REMOTE = "provisioning_remote"
    RECREATING_CONTAINER = "recreating_container"
    IMPORTING_VOLUMES = "importing_volumes"
    STARTING_REMOTE = "starting_remote"
    COMPLETED = "completed"


BEFORE_GATE = (
    MigrationState.INITIALIZING,
    MigrationState.STOPPING,
    MigrationState.SNAPSHOTTING,
    MigrationState.TRANSFERRING_IMAGE,
    MigrationState.EXPORTING_VOLUMES,
    MigrationState.EXPORTING_CONFIG,
)
AFTER_GATE = (
    MigrationState.TRANSFERRING_ARTIFACTS,
    MigrationState.PROVISIONING_REMOTE,
    MigrationState.RECREATING_CONTAINER,
    MigrationState.IMPORTING_VOLUMES,
    MigrationState.STARTING_REMOTE,
)
PIPELINE = BEFORE_GATE + (MigrationState.AWAITING_CONFIRMATION,) + AFTER_GATE

DESCRIPTIONS = {
    MigrationState.INITIALIZING: "Preparing staging directories",
    MigrationState.STOPPING: "Stopping source container",
    MigrationState.SNAPSHOTTING: "Committing container to image",
    MigrationState.TRANSFERRING_IMAGE: "Saving image and loading it on the remote host, this may take a while",
    MigrationState.EXPORTING_VOLUMES: "Archiving volumes",
    MigrationState.EXPORTING_CONFIG: "Generating compose document",
    MigrationState.AWAITING_CONFIRMATION: "Waiting for confirmation",
    MigrationState.TRANSFERRING_ARTIFACTS: "Copying archive and compose document to remote host",
    MigrationState.PROVISIONING_REMOTE: "Creating volumes and networks on remote host",
    MigrationState.RECREATING_CONTAINER: "Creating container on remote host",
    MigrationState.IMPORTING_VOLUMES: "Loading volumes on remote host",
    MigrationState.STARTING_REMOTE: "Starting remote container",
}


@dataclass
class MigrationContext:
    """What the run has produced so far"""
    identity: ContainerIdentity
    layout: Optional[StagingLayout] = None
    snapshot: Optional[ContainerSnapshot] = None
    checkpoint_path: Optional[Path] = None
    completed: List[MigrationState] = field(default_factory=list)


class MigrationOrchestrator:
    """Sequences runtime, archive and remote calls to move one container"""

    def __init__(self,
                 config: RunConfig,
                 source: SourceRuntime,
                 target: TargetRuntime,
                 remote: IRemoteExecutor,
                 compose: ComposeGenerator,
                 gate: ConfirmationGate,
                 codec: Optional[ArchiveCodec] = None):
        self._config = config
        self._source = source
        self._target = target
        self._remote = remote
        self._compose = compose
        self._gate = gate
        self._codec = codec or ArchiveCodec(verbose=config.verbose)
        self._inspector = RuntimeInspector(source)
        self._steps: Dict[MigrationState, Callable[[MigrationContext], Awaitable[None]]] = {
            MigrationState.INITIALIZING: self._initialize,
            MigrationState.STOPPING: self._stop_source,
            MigrationState.SNAPSHOTTING: self._snapshot,
            MigrationState.TRANSFERRING_IMAGE: self._transfer_image,
            MigrationState.EXPORTING_VOLUMES: self._export_volumes,
            MigrationState.EXPORTING_CONFIG: self._export_config,
            MigrationState.TRANSFERRING_ARTIFACTS: self._transfer_artifacts,
            MigrationState.PROVISIONING_REMOTE: self._provision_remote,
            MigrationState.RECREATING_CONTAINER: self._recreate_container,
            MigrationState.IMPORTING_VOLUMES: self._import_volumes,
            MigrationState.STARTING_REMOTE: self._start_remote,
        }

    @property
    def identity(self) -> ContainerIdentity:
        return self._config.identity

    async def run(self) -> MigrationReport:
        """Migrate from the start; stops at the gate if the operator says so"""
        ctx = MigrationContext(identity=self.identity)
        logger.info(f"Migrating {self.identity}")

        failed = await self._run_states(ctx, BEFORE_GATE)
        if failed is not None:
            return failed

        decision = await self._execute_gate(ctx)
        if decision.is_failure:
            return self._report(ctx, MigrationOutcome.FAILED, MigrationState.AWAITING_CONFIRMATION,
                                decision.error)
        if decision.value is GateDecision.SUSPEND:
            logger.info(f"Suspended at checkpoint {ctx.checkpoint_path}")
            return self._report(ctx, MigrationOutcome.SUSPENDED, MigrationState.AWAITING_CONFIRMATION)
        if decision.value is GateDecision.CANCEL:
            error = MigrationCancelledError(
                "Cancelled at confirmation; source container is still stopped and artifacts remain staged",
                state=MigrationState.AWAITING_CONFIRMATION.value,
            )
            logger.warning(str(error))
            return self._report(ctx, MigrationOutcome.CANCELLED, MigrationState.AWAITING_CONFIRMATION, error)

        ctx.completed.append(MigrationState.AWAITING_CONFIRMATION)
        return await self._finish(ctx)

    async def resume(self, checkpoint: MigrationCheckpoint,
                     checkpoint_path: Optional[Path] = None) -> MigrationReport:
        """Continue a suspended run right after the confirmation gate"""
        ctx = MigrationContext(identity=self.identity, checkpoint_path=checkpoint_path,
                               completed=list(BEFORE_GATE) + [MigrationState.AWAITING_CONFIRMATION])

        if checkpoint.container != self.identity.name:
            error = CheckpointError(
                f"Checkpoint is for {checkpoint.container}, not {self.identity.name}",
                path=str(checkpoint_path) if checkpoint_path else None,
            )
            error.state = MigrationState.AWAITING_CONFIRMATION.value
            return self._report(ctx, MigrationOutcome.FAILED, MigrationState.AWAITING_CONFIRMATION, error)

        missing = checkpoint.missing_artifacts()
        if missing:
            error = CheckpointError(
                f"Staged artifacts are missing: {', '.join(missing)}",
                path=str(checkpoint_path) if checkpoint_path else None,
            )
            error.state = MigrationState.AWAITING_CONFIRMATION.value
            return self._report(ctx, MigrationOutcome.FAILED, MigrationState.AWAITING_CONFIRMATION, error)

        ctx.layout = checkpoint.layout()
        ctx.snapshot = checkpoint.snapshot()
        logger.info(f"Resuming migration of {self.identity} from {checkpoint_path or 'checkpoint'}")
        return await self._finish(ctx)

    async def _finish(self, ctx: MigrationContext) -> MigrationReport:
        failed = await self._run_states(ctx, AFTER_GATE)
        if failed is not None:
            return failed
        logger.info(f"Migration of {self.identity.name} to {self.identity.target} completed successfully")
        return self._report(ctx, MigrationOutcome.COMPLETED, MigrationState.COMPLETED)

    async def _run_states(self, ctx: MigrationContext,
                          states: Sequence[MigrationState]) -> Optional[MigrationReport]:
        for state in states:
            result = await self._execute(state, ctx)
            if result.is_failure:
                return self._report(ctx, MigrationOutcome.FAILED, state, result.error)
        return None

    async def _execute(self, state: MigrationState, ctx: MigrationContext) -> Result[None, MigrationError]:
        log_context = {"state": state.value, "container": self.identity.name}
        logger.info(f"[{PIPELINE.index(state) + 1}/{len(PIPELINE)}] {DESCRIPTIONS[state]}",
                    extra=log_context)
        try:
            await self._steps[state](ctx)
        except MigrationError as e:
            e.state = state.value
            logger.error(f"{state.value} failed: {e.kind}: {e}", extra=log_context)
            return Result.failure(e)
        ctx.completed.append(state)
        logger.debug(f"{state.value} done", extra=log_context)
        return Result.success()

    async def _execute_gate(self, ctx: MigrationContext) -> Result[GateDecision, MigrationError]:
        state = MigrationState.AWAITING_CONFIRMATION
        logger.info(f"[{PIPELINE.index(state) + 1}/{len(PIPELINE)}] {DESCRIPTIONS[state]}",
                    extra={"state": state.value, "container": self.identity.name})
        checkpoint = MigrationCheckpoint.from_run(self.identity, ctx.snapshot, ctx.layout)
        try:
            ctx.checkpoint_path = checkpoint.save(ctx.layout.checkpoint_path)
        except OSError as e:
            error = CheckpointError(f"Cannot write checkpoint: {e}", path=str(ctx.layout.checkpoint_path))
            error.state = state.value
            return Result.failure(error)
        logger.debug(f"Checkpoint written to {ctx.checkpoint_path}")
        return Result.success(await self._gate.decide(checkpoint))

    def _report(self, ctx: MigrationContext, outcome: MigrationOutcome, state: MigrationState,
                error: Optional[MigrationError] = None) -> MigrationReport:
        return MigrationReport(
            container=self.identity.name,
            outcome=outcome,
            last_state=state.value,
            completed_states=[s.value for s in ctx.completed],
            failed_state=state.value if outcome is MigrationOutcome.FAILED else None,
            error_kind=error.kind if error else None,
            error=str(error) if error else None,
            checkpoint_path=str(ctx.checkpoint_path) if ctx.checkpoint_path else None,
        )

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------
    async def _initialize(self, ctx: MigrationContext) -> None:
        local_dir = self._config.local_staging
        try:
            local_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
        except OSError as e:
            raise ArchiveIOError(f"Cannot create local staging directory {local_dir}: {e}",
                                 path=str(local_dir))

        result = await self._remote.run(self.identity.target, ["mktemp", "-d"])
        remote_dir = result.stdout.strip()
        if not result.success or not remote_dir:
            raise RemoteExecutionError(
                f"Cannot create remote staging directory on {self.identity.target}: {result.stderr}",
                command="mktemp -d",
                returncode=result.returncode,
                stderr=result.stderr,
            )

        ctx.layout = StagingLayout(container=self.identity.name, local_dir=local_dir, remote_dir=remote_dir)
        logger.info(f"Local temp dir: {local_dir}")
        logger.info(f"Remote temp dir: {remote_dir}")

    async def _stop_source(self, ctx: MigrationContext) -> None:
        await self._source.stop(self.identity.name, timeout=self._config.settings.runtime.stop_timeout)

    async def _snapshot(self, ctx: MigrationContext) -> None:
        snapshot = await self._inspector.inspect(self.identity.name)
        logger.info(f"Creating image {snapshot.image_name} for container {self.identity.name}")
        await self._source.commit(self.identity.name, snapshot.image_name)
        ctx.snapshot = snapshot

    async def _transfer_image(self, ctx: MigrationContext) -> None:
        await self._target.load(self._source.save(ctx.snapshot.image_name))

    async def _export_volumes(self, ctx: MigrationContext) -> None:
        artifact = ctx.layout.archive
        in_helper = self._codec.container_archive_path(artifact.name)

        async def run_in_helper(command, input):
            # Only the archive file is mounted, not the staging directory around it
            bind = BindMount(source=str(artifact.local_path), target=in_helper)
            return await self._source.run_helper(command, volumes_from=self.identity.name,
                                                 binds=[bind], input=input)

        await self._codec.export(ctx.snapshot.volumes.destinations, artifact.local_path,
                                 run_in_helper, runner_archive_path=in_helper)

    async def _export_config(self, ctx: MigrationContext) -> None:
        document = await self._compose.generate(self.identity.name)
        compose_file = ctx.layout.compose.local_path
        try:
            compose_file.write_text(document)
        except OSError as e:
            raise ComposeGenerationError(f"Cannot write {compose_file}: {e}",
                                         container_id=self.identity.name)
        ctx.snapshot = ctx.snapshot.with_compose(document)

    async def _transfer_artifacts(self, ctx: MigrationContext) -> None:
        for artifact in (ctx.layout.archive, ctx.layout.compose):
            result = await self._remote.copy(self.identity.target, str(artifact.local_path),
                                             artifact.remote_path)
            if not result.success:
                raise TransferError(
                    f"Copying {artifact.name} to {self.identity.target} failed: {result.stderr}",
                    source=str(artifact.local_path),
                    target=artifact.remote_path,
                )
            logger.debug(f"Copied {artifact.name} to {artifact.remote_path}")

    async def _provision_remote(self, ctx: MigrationContext) -> None:
        for name in ctx.snapshot.volumes.names:
            if await self._target.ensure_volume(name):
                logger.info(f"Created volume {name}")
            else:
                logger.info(f"Volume already exists: {name}")
        for name in ctx.snapshot.networks:
            if await self._target.ensure_network(name):
                logger.info(f"Created network {name}")
            else:
                logger.info(f"Network already exists: {name}")

    async def _recreate_container(self, ctx: MigrationContext) -> None:
        await self._target.compose_create(ctx.layout.compose.remote_path)

    async def _import_volumes(self, ctx: MigrationContext) -> None:
        if not ctx.snapshot.volumes:
            logger.info("Container has no volumes, nothing to import")
            return

        artifact = ctx.layout.archive
        in_helper = self._codec.container_archive_path(artifact.name)

        async def run_in_helper(command, input):
            bind = BindMount(source=artifact.remote_path, target=in_helper, read_only=True)
            return await self._target.run_helper(command, volumes_from=self.identity.name,
                                                 binds=[bind], input=input)

        await self._codec.extract(in_helper, run_in_helper, target_root="/")

    async def _start_remote(self, ctx: MigrationContext) -> None:
        await self._target.start(self.identity.name)
