"""Depth-first directory traversal that never enters version control metadata."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional

from ..exceptions import WalkError

logger = logging.getLogger(__name__)

VCS_DIRECTORY = ".git"


@dataclass(frozen=True)
class FileSystemEntry:
    """A path discovered during a walk."""
    path: Path
    is_dir: bool

    @property
    def name(self) -> str:
        return self.path.name


class TreeWalker:
    """
    Walk a directory tree depth-first, parents before their contents.

    The root itself is not yielded. Entries whose name is in ``exclude``
    are neither yielded nor descended into. If a directory cannot be
    listed, ``onerror`` is called with a ``WalkError`` and the walk moves
    on; without ``onerror`` the error is raised.
    """

    def __init__(
        self,
        root: Path,
        exclude: Iterable[str] = (VCS_DIRECTORY,),
        onerror: Optional[Callable[[WalkError], None]] = None
    ):
        self.root = Path(root)
        self.exclude = frozenset(exclude)
        self.onerror = onerror

    def walk(self) -> Iterator[FileSystemEntry]:
        """Lazily yield every entry under the root."""
        yield from self._walk(self.root)

    def snapshot(self) -> List[FileSystemEntry]:
        """Read the whole tree before anything is changed."""
        return list(self.walk())

    def files(self) -> List[Path]:
        return [entry.path for entry in self.walk() if not entry.is_dir]

    def directories(self) -> List[Path]:
        return [entry.path for entry in self.walk() if entry.is_dir]

    def _walk(self, directory: Path) -> Iterator[FileSystemEntry]:
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            error = WalkError(directory, e)
            if self.onerror is None:
                raise error
            self.onerror(error)
            return

        for entry in entries:
            if entry.name in self.exclude:
                logger.debug(f"Skipping excluded entry: {entry.path}")
                continue

            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError:
                is_dir = False

            path = Path(entry.path)
            yield FileSystemEntry(path=path, is_dir=is_dir)

            if is_dir:
                yield from self._walk(path)
