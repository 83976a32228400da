"""Volume archive exceptions"""

from typing import Optional

from .migration_exceptions import MigrationError


class ArchiveError(MigrationError):
    """Base class for volume archive failures"""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class ArchiveExistsError(ArchiveError):
    """Raised when the destination archive is already present"""
    pass


class ArchiveIOError(ArchiveError):
    """Raised when reading or writing archive content fails"""
    pass
