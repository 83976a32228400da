"""Capability interfaces the orchestrator depends on"""

from .command_executor import CommandResult, ICommandExecutor
from .remote_executor import IRemoteExecutor
from .container_runtime import BindMount, SourceRuntime, TargetRuntime
from .compose_generator import ComposeGenerator
from .confirmation_gate import ConfirmationGate, GateDecision

__all__ = [
    'CommandResult',
    'ICommandExecutor',
    'IRemoteExecutor',
    'BindMount',
    'SourceRuntime',
    'TargetRuntime',
    'ComposeGenerator',
    'ConfirmationGate',
    'GateDecision',
]
