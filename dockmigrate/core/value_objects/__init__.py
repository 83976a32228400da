"""Core domain value objects"""

from .host_connection import HostConnection
from .container_identity import ContainerIdentity
from .run_config import RunConfig

__all__ = ['HostConnection', 'ContainerIdentity', 'RunConfig']
