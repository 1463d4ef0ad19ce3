"""
Local storage directory that holds every uploaded file.

Files are written once and never modified. Each write goes to a private
staging area inside the root first and is then published under its final
name with a hard link, so a stored name is either fully written or absent.
"""

import os
import shutil
import logging
import tempfile
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union

from vault_api.errors import DirectoryUnreadable, FileNotFound, StoredNameCollision
from vault_api.utils.decorators import log_storage_write

logger = logging.getLogger(__name__)

STAGING_DIR_NAME = ".incoming"
COPY_CHUNK_SIZE = 1024 * 1024
STORED_FILE_MODE = 0o644


class StorageDirectory:
    """A single root directory on disk, shared by all requests."""

    def __init__(self, root: Union[str, os.PathLike]):
        self.root = Path(root).expanduser().resolve()
        self.staging = self.root / STAGING_DIR_NAME
        self._opened = False

    def __repr__(self) -> str:
        return f"StorageDirectory({str(self.root)!r})"

    @property
    def is_open(self) -> bool:
        return self._opened

    def ensure_exists(self) -> None:
        """Create the root and any missing parents. Safe to call concurrently."""
        # exist_ok covers the race where another process creates it first
        self.root.mkdir(parents=True, exist_ok=True)
        self.staging.mkdir(exist_ok=True)

    def open(self) -> "StorageDirectory":
        self.ensure_exists()
        self._opened = True
        logger.info(f"Storage directory ready at {self.root}")
        return self

    def close(self) -> None:
        self._opened = False
        logger.info(f"Storage directory {self.root} closed")

    @log_storage_write
    def write(self, stored_name: str, stream: BinaryIO) -> int:
        """
        Persist ``stream`` under ``stored_name``.

        :param stored_name: Final file name; must be a single path segment.
        :param stream: Binary file object, read to exhaustion.
        :return: Number of bytes written.
        :raises StoredNameCollision: if ``stored_name`` is already taken.
        """
        destination = self._child(stored_name)
        if destination is None:
            raise ValueError(f"Invalid stored name: {stored_name!r}")

        fd, staged = tempfile.mkstemp(dir=self.staging, suffix=".part")
        try:
            with os.fdopen(fd, "wb") as staged_file:
                shutil.copyfileobj(stream, staged_file, COPY_CHUNK_SIZE)
                staged_file.flush()
                os.fsync(staged_file.fileno())
                size = staged_file.tell()
            # mkstemp creates 0600 files
            os.chmod(staged, STORED_FILE_MODE)

            try:
                # link() refuses to replace an existing name, unlike rename()
                os.link(staged, destination)
            except FileExistsError as err:
                raise StoredNameCollision(detail=f"Stored name already exists: {stored_name}") from err
        finally:
            try:
                os.unlink(staged)
            except FileNotFoundError:
                pass

        return size

    def iter_files(self) -> Iterator[Path]:
        """Yield the regular files currently in the root, sorted by name."""
        try:
            entries = sorted(os.scandir(self.root), key=lambda entry: entry.name)
        except OSError as err:
            logger.error(f"Failed to enumerate {self.root}: {err}")
            raise DirectoryUnreadable(detail=str(err)) from err

        for entry in entries:
            try:
                if entry.is_file(follow_symlinks=False):
                    yield Path(entry.path)
            except OSError:
                # removed between scandir() and is_file()
                continue

    def resolve(self, name: str) -> Path:
        """
        Map a requested name to an existing file strictly inside the root.

        :raises FileNotFound: for unknown names and anything that would
            escape the root.
        """
        path = self._child(name)
        if path is None:
            logger.warning(f"Rejected stored name outside storage root: {name!r}")
            raise FileNotFound(detail=f"Invalid stored name: {name!r}")
        if not path.is_file():
            raise FileNotFound(detail=f"No stored file named {name!r}")
        return path

    def _child(self, name: str) -> Optional[Path]:
        """Path of ``name`` directly under the root, or None if it is not a plain segment."""
        if (
            not name
            or name.startswith(".")
            or "/" in name
            or "\\" in name
            or "\x00" in name
        ):
            return None

        path = (self.root / name).resolve()
        if path.parent != self.root:
            return None
        return path
