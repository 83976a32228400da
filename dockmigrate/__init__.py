"""dockmigrate - move a container with its image, volumes and networks to another host."""

__version__ = "0.1.0"
