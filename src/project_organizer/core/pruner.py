"""Removal of directories left empty by relocation."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Tuple

from .walker import TreeWalker, VCS_DIRECTORY

logger = logging.getLogger(__name__)


@dataclass
class PruneResult:
    """Outcome of one or more prune passes."""
    removed: List[Path] = field(default_factory=list)
    failures: List[Tuple[Path, str]] = field(default_factory=list)
    passes: int = 0

    def extend(self, other: "PruneResult") -> None:
        self.removed.extend(other.removed)
        self.failures.extend(other.failures)
        self.passes += other.passes


def is_directory_empty(path: Path) -> bool:
    """
    Check whether a directory has no entries.

    A directory that no longer exists is reported as not empty so callers
    leave it alone. Other errors propagate.
    """
    try:
        with os.scandir(path) as it:
            return next(it, None) is None
    except FileNotFoundError:
        return False


class EmptyDirectoryPruner:
    """
    Remove empty directories below a root, deepest first.

    A single call makes exactly one pass over the directories found when
    the pass starts, in reverse discovery order. Callers that need a fully
    collapsed tree call it again (see ``prune_repeatedly``). Failures are
    logged and recorded but never stop the pass.
    """

    def __init__(self, keep: Iterable[Path] = (), exclude: Iterable[str] = (VCS_DIRECTORY,)):
        self.keep = {Path(p) for p in keep}
        self.exclude = tuple(exclude)

    def prune(self, root: Path) -> PruneResult:
        """Run one pass over root."""
        root = Path(root)
        result = PruneResult(passes=1)

        def on_walk_error(error):
            logger.warning(str(error))
            result.failures.append((Path(error.path), str(error.error)))

        walker = TreeWalker(root, exclude=self.exclude, onerror=on_walk_error)
        directories = [entry.path for entry in walker.snapshot() if entry.is_dir]

        for directory in reversed(directories):
            if directory in self.keep:
                continue

            try:
                empty = is_directory_empty(directory)
            except OSError as e:
                logger.warning(f"Cannot inspect directory {directory}: {e}")
                result.failures.append((directory, str(e)))
                continue

            if not empty:
                continue

            try:
                directory.rmdir()
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.warning(f"Failed to remove directory {directory}: {e}")
                result.failures.append((directory, str(e)))
                continue

            logger.info(f"Removed empty directory: {directory}")
            result.removed.append(directory)

        return result

    def prune_repeatedly(self, root: Path, passes: int) -> PruneResult:
        """Run up to ``passes`` passes, stopping once a pass removes nothing."""
        total = PruneResult()
        for _ in range(passes):
            result = self.prune(root)
            total.extend(result)
            if not result.removed:
                break
        return total
