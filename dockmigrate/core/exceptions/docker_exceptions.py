"""Container runtime exceptions"""

from typing import Optional

from .migration_exceptions import MigrationError


class NotFoundError(MigrationError):
    """Raised when a container, volume, network or image is absent when expected present"""

    def __init__(self, message: str, resource: Optional[str] = None):
        super().__init__(message)
        self.resource = resource


class RuntimeOperationError(MigrationError):
    """Raised when a container runtime operation fails"""

    def __init__(self, message: str, container_id: Optional[str] = None, image: Optional[str] = None):
        super().__init__(message)
        self.container_id = container_id
        self.image = image


class CommitError(RuntimeOperationError):
    """Raised when committing a container to an image fails"""
    pass


class ComposeGenerationError(RuntimeOperationError):
    """Raised when the compose document cannot be produced or is not valid"""
    pass
