"""
Volume archive codec.

Volume content travels as one gzip-compressed GNU tar archive. Paths are
handed to tar as a NUL-delimited list on stdin so names with whitespace or
newlines survive. ``-S`` keeps sparse files sparse: tar finds holes with
SEEK_DATA/SEEK_HOLE when packing and recreates them on extraction, so both
ends need a GNU tar recent enough to agree on the sparse member format
(1.29 or later).
"""
import logging
import os
import posixpath
import tarfile
import uuid
from pathlib import Path
from typing import Awaitable, Callable, Iterable, List, Optional

from ..core.exceptions import ArchiveExistsError, ArchiveIOError
from ..core.interfaces.command_executor import CommandResult

logger = logging.getLogger(__name__)

CommandRunner = Callable[[List[str], Optional[bytes]], Awaitable[CommandResult]]


class ArchiveCodec:
    """Builds and runs the tar commands on whatever runner is supplied.

    The runner decides where tar executes: directly on a host, or inside a
    helper container that mounts the volumes being archived.
    """

    ARCHIVE_MODE = 0o600
    TAR = "tar"

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    @staticmethod
    def encode_path_list(paths: Iterable[str]) -> bytes:
        unique = sorted(set(paths))
        for path in unique:
            if "\0" in path:
                raise ArchiveIOError(f"Path contains a NUL byte: {path!r}", path=path)
        return b"".join(path.encode("utf-8", errors="surrogateescape") + b"\0" for path in unique)

    @staticmethod
    def container_archive_path(archive_name: str, token: Optional[str] = None) -> str:
        """Where a helper container sees the archive; a directory no volume will use"""
        return posixpath.join(f"/tmp.dockmigrate-{token or uuid.uuid4().hex[:12]}", archive_name)

    def export_command(self, archive_path: str) -> List[str]:
        # -a picks the compressor from the archive suffix
        command = [self.TAR, "-c", "-a", "-S", "--null", "-T", "-", "-f", archive_path]
        if self.verbose:
            command.insert(1, "-v")
        return command

    def import_command(self, archive_path: str, target_root: str = "/") -> List[str]:
        command = [self.TAR, "-x", "-p", "-S", "-f", archive_path, "-C", target_root, "--overwrite"]
        if self.verbose:
            command.insert(1, "-v")
        return command

    def reserve(self, archive_path: Path) -> Path:
        """Create the archive file empty, refusing to reuse an existing one"""
        try:
            fd = os.open(archive_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, self.ARCHIVE_MODE)
        except FileExistsError:
            raise ArchiveExistsError(f"{archive_path} already exists", path=str(archive_path))
        except OSError as e:
            raise ArchiveIOError(f"Cannot create {archive_path}: {e}", path=str(archive_path))
        os.close(fd)
        return archive_path

    def write_empty(self, archive_path: Path) -> None:
        """A valid gzip tar archive holding no members"""
        try:
            with tarfile.open(archive_path, "w:gz"):
                pass
        except OSError as e:
            raise ArchiveIOError(f"Cannot write {archive_path}: {e}", path=str(archive_path))

    async def export(self, paths: Iterable[str], archive_path: Path, run: CommandRunner,
                     runner_archive_path: Optional[str] = None) -> Path:
        """Pack ``paths`` into ``archive_path``.

        ``runner_archive_path`` is the archive's path as seen by the runner,
        when that differs from the host path.
        """
        archive_path = Path(archive_path)
        path_list = self.encode_path_list(paths)
        self.reserve(archive_path)

        if not path_list:
            logger.info(f"No volume paths, writing empty archive {archive_path.name}")
            self.write_empty(archive_path)
            return archive_path

        result = await run(self.export_command(runner_archive_path or str(archive_path)), path_list)
        if not result.success:
            # Only the file reserved above is removed, never an older artifact
            archive_path.unlink(missing_ok=True)
            raise ArchiveIOError(
                f"tar failed with exit status {result.returncode}: {result.stderr}",
                path=str(archive_path),
            )
        if result.stdout:
            logger.debug(result.stdout)
        count = path_list.count(b"\0")
        logger.info(f"Archived {count} path(s) into {archive_path.name}")
        return archive_path

    async def extract(self, archive_path: str, run: CommandRunner, target_root: str = "/") -> None:
        """Unpack into ``target_root``, overwriting whatever is already there"""
        result = await run(self.import_command(archive_path, target_root), None)
        if not result.success:
            raise ArchiveIOError(
                f"tar extraction failed with exit status {result.returncode}: {result.stderr}",
                path=archive_path,
            )
        if result.stdout:
            logger.debug(result.stdout)
