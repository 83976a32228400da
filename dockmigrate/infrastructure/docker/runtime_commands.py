"""Command lines for the docker and podman CLIs, which share one syntax."""

from typing import List, Optional, Sequence, Tuple

from ...core.interfaces.container_runtime import BindMount

DEFAULT_TAG = "latest"


def parse_image_reference(reference: str) -> Tuple[str, str]:
    """Split an image reference into repository and tag.

    A colon only starts the tag when no slash follows it, so registry ports
    (``registry:5000/app``) stay in the repository. Digests are dropped since
    a committed image can only be addressed by tag.
    """
    name = reference.split("@", 1)[0]
    last_colon = name.rfind(":")
    if last_colon > name.rfind("/"):
        return name[:last_colon], name[last_colon + 1:] or DEFAULT_TAG
    return name, DEFAULT_TAG


class RuntimeCommands:
    """Builds argument vectors for one runtime binary.

    ``engine_url`` points the CLI at a non-default engine, the way the SDK
    client is pointed there by its ``base_url``.
    """

    HELPER_ENV = "LC_ALL=C.UTF-8"
    ENGINE_FLAGS = {"docker": "-H", "podman": "--url"}

    def __init__(self, binary: str = "docker", engine_url: Optional[str] = None):
        self.binary = binary
        self.engine_url = engine_url

    def _base(self) -> List[str]:
        if not self.engine_url:
            return [self.binary]
        return [self.binary, self.ENGINE_FLAGS.get(self.binary, "-H"), self.engine_url]

    def start(self, container: str) -> List[str]:
        return [*self._base(), "start", container]

    def load(self) -> List[str]:
        return [*self._base(), "load"]

    def volume_inspect(self, name: str) -> List[str]:
        return [*self._base(), "volume", "inspect", name]

    def volume_create(self, name: str) -> List[str]:
        return [*self._base(), "volume", "create", name]

    def network_inspect(self, name: str) -> List[str]:
        return [*self._base(), "network", "inspect", name]

    def network_create(self, name: str) -> List[str]:
        return [*self._base(), "network", "create", name]

    def compose_create(self, compose_file: str) -> List[str]:
        return [*self._base(), "compose", "-f", compose_file, "create"]

    def helper_run(self, image: str, command: Sequence[str], volumes_from: str,
                   binds: Sequence[BindMount] = (), interactive: bool = False) -> List[str]:
        """Throwaway container that sees ``volumes_from``'s mounts at their usual paths"""
        argv = [*self._base(), "run", "--rm"]
        if interactive:
            argv.append("-i")
        argv.extend(["--volumes-from", volumes_from, "-e", self.HELPER_ENV])
        for bind in binds:
            argv.extend(["-v", bind.to_volume_arg()])
        argv.append(image)
        argv.extend(command)
        return argv
