"""Migration domain exceptions"""

from typing import Optional


class MigrationError(Exception):
    """Base class for every failure raised while migrating a container.

    ``state`` is filled in by the orchestrator with the pipeline state that
    was running when the error surfaced.
    """

    def __init__(self, message: str, state: Optional[str] = None):
        super().__init__(message)
        self.state = state

    @property
    def kind(self) -> str:
        return type(self).__name__


class MigrationCancelledError(MigrationError):
    """Raised when the operator declines to continue at the confirmation gate"""
    pass


class CheckpointError(MigrationError):
    """Raised when a resume checkpoint cannot be read or no longer matches staged files"""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path
