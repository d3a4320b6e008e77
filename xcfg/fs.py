"""Filesystem capability used by the config store.

The store never calls ``os``/``pathlib`` directly; everything goes through a
:class:`FileSystem` so tests (and embedders) can point it somewhere other than
the real home directory.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

log = logging.getLogger(__name__)

PathLike = Union[str, Path]


class FileSystem(ABC):
    """Interface for the handful of filesystem operations the store needs."""

    @abstractmethod
    def home(self) -> Path:
        raise NotImplementedError

    @abstractmethod
    def ensure_dir(self, path: PathLike, mode: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def exists(self, path: PathLike) -> bool:
        raise NotImplementedError

    @abstractmethod
    def create_file(self, path: PathLike, mode: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def write_text(self, path: PathLike, text: str, mode: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def read_text(self, path: PathLike) -> str:
        raise NotImplementedError


class LocalFileSystem(FileSystem):
    """:class:`FileSystem` backed by the local disk.

    ``home`` overrides ``Path.home()``; leave it unset to use the current
    user's home directory.
    """

    def __init__(self, home: Optional[PathLike] = None) -> None:
        self._home = Path(home) if home is not None else None

    def home(self) -> Path:
        return self._home if self._home is not None else Path.home()

    def ensure_dir(self, path: PathLike, mode: int) -> None:
        """``mkdir -p`` that applies ``mode`` to every directory it creates.

        ``Path.mkdir(parents=True)`` only applies the mode to the leaf, so the
        segments are walked explicitly.
        """

        path = Path(path)
        for segment in reversed((path, *path.parents)):
            if segment.is_dir():
                continue
            if segment.exists():
                raise NotADirectoryError(f"Not a directory: {segment}")
            log.debug("Creating directory %s (mode %o)", segment, mode)
            segment.mkdir(mode=mode)

    def exists(self, path: PathLike) -> bool:
        return Path(path).exists()

    def create_file(self, path: PathLike, mode: int) -> None:
        log.debug("Creating empty file %s (mode %o)", path, mode)
        fd = os.open(str(path), os.O_WRONLY | os.O_CREAT | os.O_EXCL, mode)
        os.close(fd)

    def write_text(self, path: PathLike, text: str, mode: int) -> None:
        # mode only takes effect when the file is created by this call
        fd = os.open(str(path), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)

    def read_text(self, path: PathLike) -> str:
        return Path(path).read_text(encoding="utf-8")


__all__ = ["FileSystem", "LocalFileSystem", "PathLike"]
