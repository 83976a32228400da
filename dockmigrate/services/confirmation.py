"""Decisions taken at the checkpoint before the destination host is modified"""

import logging

import click

from ..core.interfaces.confirmation_gate import ConfirmationGate, GateDecision
from ..models import MigrationCheckpoint

logger = logging.getLogger(__name__)


class InteractiveGate(ConfirmationGate):
    """Asks the operator on the terminal; blocks until answered"""

    async def decide(self, checkpoint: MigrationCheckpoint) -> GateDecision:
        click.echo(
            f"Image {checkpoint.image_name} is loaded on {checkpoint.target_host} and "
            f"{len(checkpoint.volumes)} volume path(s) are staged in {checkpoint.local_staging}.",
            err=True,
        )
        try:
            proceed = click.confirm(
                f"Ready to create {checkpoint.container} on {checkpoint.target_host}?",
                default=True,
                err=True,
            )
        except click.Abort:
            proceed = False
        return GateDecision.PROCEED if proceed else GateDecision.CANCEL


class AutoApproveGate(ConfirmationGate):
    async def decide(self, checkpoint: MigrationCheckpoint) -> GateDecision:
        logger.info("Confirmation skipped, continuing with remote creation")
        return GateDecision.PROCEED


class SuspendGate(ConfirmationGate):
    """Stops at the checkpoint so a later invocation can resume from it"""

    async def decide(self, checkpoint: MigrationCheckpoint) -> GateDecision:
        return GateDecision.SUSPEND
