"""Invocation and input validation exceptions"""

from typing import Optional

from .migration_exceptions import MigrationError


class UsageError(MigrationError, ValueError):
    """Raised when the tool is invoked with bad arguments or settings"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class InvalidHostnameError(UsageError):
    """Raised when hostname or username validation fails"""
    pass


class InvalidPortError(UsageError):
    """Raised when port validation fails"""
    pass
