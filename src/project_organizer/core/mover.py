"""File operations for classifying and relocating project files."""

import fnmatch
import logging
import os
import re
import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Dict, Iterable, List, Optional, Tuple

from ..exceptions import FileOperationError
from .classifier import ExtensionClassifier
from .walker import TreeWalker, VCS_DIRECTORY

logger = logging.getLogger(__name__)


class CollisionPolicy(Enum):
    """What to do when a destination file already exists."""
    RENAME = "rename"
    OVERWRITE = "overwrite"
    FAIL = "fail"


@dataclass(frozen=True)
class Move:
    """A single relocation from source to destination."""
    source: Path
    destination: Path


@dataclass
class RelocationResult:
    """Outcome of a relocation pass."""
    moved: List[Move] = field(default_factory=list)
    renamed: List[Move] = field(default_factory=list)
    overwritten: List[Move] = field(default_factory=list)
    in_place: List[Path] = field(default_factory=list)
    ignored: List[Path] = field(default_factory=list)
    dry_run: bool = False

    @property
    def skipped(self) -> List[Path]:
        return self.in_place + self.ignored

    def by_bucket(self, root: Path) -> Dict[str, int]:
        """Count moved files per top-level destination folder."""
        counts: Dict[str, int] = {}
        for move in self.moved:
            bucket = move.destination.relative_to(root).parts[0]
            counts[bucket] = counts.get(bucket, 0) + 1
        return counts


def _is_within(path: Path, root: Path) -> bool:
    path = os.path.normpath(os.path.abspath(path))
    root = os.path.normpath(os.path.abspath(root))
    return os.path.commonpath([path, root]) == root and path != root


def normalize_filename(filename: str) -> str:
    """Lower-case a file name and replace whitespace and dashes with underscores."""
    filename = re.sub(r"[\s-]", "_", filename)
    filename = filename.lower()
    return re.sub(r"_+", "_", filename)


class FileRelocator:
    """Move every regular file under a root into its classified folder.

    Destinations are always taken relative to the root passed in, so files
    in nested folders end up in the top-level buckets. The tree is read
    completely before the first move.
    """

    def __init__(
        self,
        classifier: Optional[ExtensionClassifier] = None,
        collision: CollisionPolicy = CollisionPolicy.RENAME,
        normalize_names: bool = False,
        ignore: Iterable[str] = (),
        skip_sorted: bool = False,
        sorted_dirs: Iterable[str] = (),
        dry_run: bool = False,
        exclude: Iterable[str] = (VCS_DIRECTORY,)
    ):
        self.classifier = classifier or ExtensionClassifier()
        self.collision = CollisionPolicy(collision)
        self.normalize_names = normalize_names
        self.ignore = list(ignore)
        self.skip_sorted = skip_sorted
        self.sorted_dirs = set(self.classifier.profile.buckets) | set(sorted_dirs)
        self.dry_run = dry_run
        self.exclude = tuple(exclude)

    def plan(self, root: Path) -> Tuple[List[Move], List[Path]]:
        """Compute moves for every file under root.

        Returns:
            Tuple of (moves, ignored files). Moves whose destination equals
            the source are included; ``relocate`` treats them as in place.
        """
        root = Path(root)
        walker = TreeWalker(root, exclude=self.exclude)

        moves = []
        ignored = []
        for entry in walker.snapshot():
            if entry.is_dir:
                continue

            relative = PurePosixPath(entry.path.relative_to(root).as_posix())
            if self._is_ignored(relative):
                ignored.append(entry.path)
                continue

            moves.append(Move(entry.path, self.destination_for(root, entry.path)))

        return moves, ignored

    def destination_for(self, root: Path, file_path: Path) -> Path:
        """Return the full destination path of a file."""
        folder = self.classifier.classify_path(file_path)
        filename = file_path.name
        if self.normalize_names:
            filename = normalize_filename(filename)
        destination = Path(root).joinpath(*folder.parts) / filename
        if not _is_within(destination, root):
            raise FileOperationError(
                f"Destination {destination} for {file_path} is outside {root}"
            )
        return destination

    def relocate(self, root: Path) -> RelocationResult:
        """Move all files under root. Any filesystem error aborts the pass."""
        root = Path(root)
        moves, ignored = self.plan(root)
        result = RelocationResult(ignored=ignored, dry_run=self.dry_run)

        for move in moves:
            if move.source == move.destination:
                result.in_place.append(move.source)
                continue

            if self.dry_run:
                logger.info(f"Would move '{move.source}' to '{move.destination}'")
                result.moved.append(move)
                continue

            performed = self._move(move, result)
            result.moved.append(performed)

        logger.info(
            f"Relocated {len(result.moved)} files under {root} "
            f"({len(result.skipped)} skipped)"
        )
        return result

    def _is_ignored(self, relative: PurePosixPath) -> bool:
        for pattern in self.ignore:
            if fnmatch.fnmatch(relative.as_posix(), pattern):
                return True
        if self.skip_sorted and len(relative.parts) > 1 and relative.parts[0] in self.sorted_dirs:
            return True
        return False

    def _move(self, move: Move, result: RelocationResult) -> Move:
        destination = move.destination
        if destination.exists():
            if self.collision is CollisionPolicy.FAIL:
                raise FileOperationError(
                    f"Cannot move {move.source}: {destination} already exists"
                )
            if self.collision is CollisionPolicy.RENAME:
                destination = self._resolve_duplicate(destination)
                result.renamed.append(Move(move.source, destination))
            else:
                logger.warning(f"Overwriting existing file {destination}")
                result.overwritten.append(Move(move.source, destination))

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileOperationError(f"Failed to create directory {destination.parent}: {e}")

        try:
            if self.collision is CollisionPolicy.OVERWRITE:
                os.replace(move.source, destination)
            else:
                shutil.move(str(move.source), str(destination))
        except OSError as e:
            raise FileOperationError(f"Failed to move {move.source} to {destination}: {e}")

        logger.info(f"Moved '{move.source}' to '{destination}'")
        return Move(move.source, destination)

    def _resolve_duplicate(self, target_path: Path) -> Path:
        """Resolve duplicate filenames by adding a number."""
        base = target_path.stem
        ext = target_path.suffix
        parent = target_path.parent
        counter = 1

        while True:
            new_path = parent / f"{base} ({counter}){ext}"
            if not new_path.exists():
                return new_path
            counter += 1
