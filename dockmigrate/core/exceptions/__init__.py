"""Core domain exceptions"""

from .migration_exceptions import MigrationError, MigrationCancelledError, CheckpointError
from .validation_exceptions import UsageError, InvalidHostnameError, InvalidPortError
from .docker_exceptions import (
    NotFoundError,
    RuntimeOperationError,
    CommitError,
    ComposeGenerationError,
)
from .archive_exceptions import ArchiveError, ArchiveExistsError, ArchiveIOError
from .transfer_exceptions import TransferError, RemoteExecutionError

__all__ = [
    'MigrationError',
    'MigrationCancelledError',
    'CheckpointError',
    'UsageError',
    'InvalidHostnameError',
    'InvalidPortError',
    'NotFoundError',
    'RuntimeOperationError',
    'CommitError',
    'ComposeGenerationError',
    'ArchiveError',
    'ArchiveExistsError',
    'ArchiveIOError',
    'TransferError',
    'RemoteExecutionError',
]
