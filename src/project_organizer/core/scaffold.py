"""Creation of the standard project directory skeleton."""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ..exceptions import FileOperationError

logger = logging.getLogger(__name__)

DEFAULT_COMPONENTS = ["doc", "src", "job", "data", "ref", "eg", "media", "bin"]
REPORT_COMPONENTS = ["doc", "src", "job", "data", "ref", "eg"]
REPORT_DIRECTORY = "doc/report"
EXTRA_DIRECTORIES = ["doc/report/sty", "eg/notebook", "data/large"]


class ScaffoldBuilder:
    """Create and validate the project skeleton. Existing folders are left alone."""

    def __init__(
        self,
        components: Optional[Iterable[str]] = None,
        report_components: Optional[Iterable[str]] = None,
        extra: Optional[Iterable[str]] = None
    ):
        self.components = list(DEFAULT_COMPONENTS if components is None else components)
        self.report_components = list(
            REPORT_COMPONENTS if report_components is None else report_components
        )
        self.extra = list(EXTRA_DIRECTORIES if extra is None else extra)

    @classmethod
    def from_config(cls, config) -> "ScaffoldBuilder":
        return cls(
            components=config.components,
            report_components=config.report_components,
            extra=config.extra
        )

    def paths(self, root: Path) -> List[Path]:
        """List every skeleton directory, parents first."""
        root = Path(root)
        paths = [root / name for name in self.components]
        if self.report_components:
            report_dir = root.joinpath(*REPORT_DIRECTORY.split("/"))
            paths.append(report_dir)
            paths.extend(report_dir / name for name in self.report_components)
        paths.extend(root.joinpath(*relative.split("/")) for relative in self.extra)

        unique = []
        for path in paths:
            if path not in unique:
                unique.append(path)
        return unique

    def build(self, root: Path) -> List[Path]:
        """Create missing skeleton directories.

        Returns:
            The directories that were created by this call.
        """
        created = []
        for path in self.paths(root):
            if path.is_dir():
                continue
            try:
                path.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise FileOperationError(f"Failed to create directory {path}: {e}")
            logger.info(f"Created directory {path}")
            created.append(path)
        return created

    def validate(self, root: Path) -> Dict[str, bool]:
        """Report which skeleton directories exist."""
        root = Path(root)
        return {
            path.relative_to(root).as_posix(): path.is_dir()
            for path in self.paths(root)
        }

    def create_project(self, parent: Path, name: str) -> Path:
        """Create a new project folder and its skeleton."""
        project_dir = Path(parent) / name
        try:
            project_dir.mkdir(parents=True)
        except FileExistsError:
            raise FileOperationError(f"Project directory already exists: {project_dir}")
        except OSError as e:
            raise FileOperationError(f"Failed to create project directory {project_dir}: {e}")

        self.build(project_dir)
        return project_dir
