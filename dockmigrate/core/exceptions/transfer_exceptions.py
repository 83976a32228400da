"""Transfer and remote execution exceptions"""

from typing import Optional

from .migration_exceptions import MigrationError


class TransferError(MigrationError):
    """Raised when copying a file or streaming an image to the remote host fails"""

    def __init__(self, message: str, source: Optional[str] = None, target: Optional[str] = None):
        super().__init__(message)
        self.source = source
        self.target = target


class RemoteExecutionError(MigrationError):
    """Raised when a command on the remote host exits with a non-zero status"""

    def __init__(self, message: str, command: Optional[str] = None,
                 returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
