from .runtime_commands import RuntimeCommands, parse_image_reference
from .local_runtime import DockerEngineRuntime
from .remote_runtime import RemoteCliRuntime
from .autocompose import AutocomposeGenerator, validate_compose_document

__all__ = [
    'RuntimeCommands',
    'parse_image_reference',
    'DockerEngineRuntime',
    'RemoteCliRuntime',
    'AutocomposeGenerator',
    'validate_compose_document',
]
