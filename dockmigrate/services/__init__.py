from .runtime_inspector import RuntimeInspector
from .archive_codec import ArchiveCodec
from .confirmation import AutoApproveGate, InteractiveGate, SuspendGate
from .migration_orchestrator import MigrationOrchestrator, MigrationState

__all__ = [
    'RuntimeInspector',
    'ArchiveCodec',
    'AutoApproveGate',
    'InteractiveGate',
    'SuspendGate',
    'MigrationOrchestrator',
    'MigrationState',
]
