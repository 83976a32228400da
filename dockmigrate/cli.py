"""
Command Line Interface for dockmigrate.
"""
import asyncio
import logging
from pathlib import Path

import click

from .config import get_config
from .core.exceptions import MigrationError
from .core.value_objects import ContainerIdentity, HostConnection, RunConfig
from .factory import build_orchestrator
from .logging_config import configure_logging
from .models import MigrationCheckpoint, MigrationOutcome, MigrationReport
from .services.confirmation import AutoApproveGate, InteractiveGate, SuspendGate

logger = logging.getLogger(__name__)

USAGE = "Usage: dockmigrate [-v|--verbose] CONTAINER USER HOST"


def _usage(ctx: click.Context, message: str = None) -> None:
    if message:
        click.echo(f"Error: {message}", err=True)
    click.echo(USAGE, err=True)
    ctx.exit(1)


def _fail(ctx: click.Context, kind: str, message: str, state: str = None) -> None:
    prefix = f"ERROR [{state}]" if state else "ERROR"
    click.echo(f"{prefix} {kind}: {message}", err=True)
    ctx.exit(1)


def _select_gate(yes: bool, detach: bool):
    if detach:
        return SuspendGate()
    if yes:
        return AutoApproveGate()
    return InteractiveGate()


def _print_report(ctx: click.Context, report: MigrationReport) -> None:
    if report.outcome is MigrationOutcome.COMPLETED:
        click.echo(f"Migration of {report.container} completed.")
    elif report.outcome is MigrationOutcome.SUSPENDED:
        click.echo(f"Migration of {report.container} suspended before touching the remote host.")
        click.echo(f"Resume with: dockmigrate --resume {report.checkpoint_path}")
    else:
        _fail(ctx, report.error_kind or "MigrationError", report.error or "migration failed",
              state=report.failed_state or report.last_state)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option('--verbose', '-v', is_flag=True, help='Debug logging and per-file tar output')
@click.option('--yes', '-y', is_flag=True, help='Skip the confirmation before remote creation')
@click.option('--detach', is_flag=True, help='Stop at the confirmation point and print a resume command')
@click.option('--resume', 'resume_path', type=click.Path(dir_okay=False), default=None,
              help='Continue a suspended migration from its checkpoint file')
@click.argument('args', nargs=-1)
@click.pass_context
def cli(ctx, verbose, yes, detach, resume_path, args):
    """
    Migrate CONTAINER to HOST, connecting over ssh as USER.

    The container is stopped and committed, its image and volumes are copied
    across, and it is recreated and started on the remote host.
    """
    if resume_path:
        if args:
            _usage(ctx, "--resume takes no positional arguments")
    elif len(args) != 3:
        _usage(ctx)
    if yes and detach:
        _usage(ctx, "--yes and --detach cannot be combined")

    try:
        settings = get_config()
    except MigrationError as e:
        _fail(ctx, e.kind, str(e))

    configure_logging("DEBUG" if verbose else settings.logging.level, settings.logging.format)
    logger.debug(f"Configuration: {settings.get_summary()}")

    checkpoint = None
    try:
        if resume_path:
            checkpoint = MigrationCheckpoint.load(Path(resume_path))
            identity = checkpoint.identity()
        else:
            container, user, host = args
            identity = ContainerIdentity(
                name=container,
                target=HostConnection(hostname=host, username=user, port=settings.ssh.port),
            )
    except MigrationError as e:
        _fail(ctx, e.kind, str(e))

    run_config = RunConfig(identity=identity, settings=settings, verbose=verbose)
    orchestrator = build_orchestrator(run_config, _select_gate(yes, detach))

    if checkpoint is not None:
        report = asyncio.run(orchestrator.resume(checkpoint, Path(resume_path)))
    else:
        report = asyncio.run(orchestrator.run())
    _print_report(ctx, report)


def main():
    """
    Main entry point for the CLI.
    """
    cli()


if __name__ == '__main__':
    main()
