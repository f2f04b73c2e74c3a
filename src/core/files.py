"""Access to user-selected files on the host filesystem."""

from __future__ import annotations

import logging
import os
import stat
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator, Union

from core.errors import FileAccessError
from utils.format import format_size

logger = logging.getLogger(__name__)

FileReference = Union[str, "os.PathLike[str]"]

UNKNOWN_NAME = "unknown"


@dataclass(frozen=True)
class FileMetadata:
    """Display name and size of a selected file."""

    name: str = UNKNOWN_NAME
    size: int = 0

    @property
    def display_size(self) -> str:
        return format_size(self.size)


class FileAccessor:
    """Open and describe file references handed over by the host file picker."""

    @contextmanager
    def open(self, ref: FileReference) -> Iterator[BinaryIO]:
        """Yield a binary stream for ``ref``, closing it on every exit path.

        Any failure to obtain the stream (missing file, permission denied, a
        directory, a reference revoked since it was picked) is raised as
        :class:`~core.errors.FileAccessError`.
        """

        path = Path(ref)
        try:
            handle = path.open("rb")
        except OSError as exc:
            logger.warning("Unable to open %s: %s", path, exc)
            raise FileAccessError(f"Cannot open file: {exc.strerror or exc}") from exc
        try:
            yield handle
        finally:
            handle.close()

    def metadata(self, ref: FileReference) -> FileMetadata:
        """Return the display name and size of ``ref``, falling back to defaults."""

        try:
            path = Path(ref)
        except TypeError:
            logger.debug("Unsupported file reference %r", ref)
            return FileMetadata()

        name = path.name or UNKNOWN_NAME
        try:
            info = path.stat()
        except (OSError, ValueError) as exc:
            logger.debug("Size unavailable for %s: %s", path, exc)
            size = 0
        else:
            size = info.st_size if stat.S_ISREG(info.st_mode) else 0
        return FileMetadata(name=name, size=max(0, int(size)))


__all__ = ["FileAccessor", "FileMetadata", "FileReference", "UNKNOWN_NAME"]
