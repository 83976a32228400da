from .remote_executor import SSHRemoteExecutor

__all__ = ['SSHRemoteExecutor']
