"""Boilerplate files written into new projects."""

import logging
from dataclasses import dataclass, field
from importlib.resources import files
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from ..exceptions import FileOperationError

logger = logging.getLogger(__name__)

TEMPLATE_PACKAGE = "project_organizer"
TEMPLATE_DIRECTORY = "templates"

STYLE_FILES = [
    "beamerthemelazy.sty",
    "beamercolorthemelazy.sty",
    "beamercolorthemelazyd.sty",
    "beamerfontthemelazy.sty",
    "beamerouterthemelazy.sty",
    "beamerinnerthemelazy.sty",
]

# (packaged resource, destination relative to the project root)
DEFAULT_TEMPLATES: List[Tuple[str, str]] = [
    ("README.md", "README.md"),
    ("examples_README.md", "eg/README.md"),
    ("report.tex", "doc/report/report.tex"),
    ("ref.bib", "doc/report/ref.bib"),
    *[(name, f"doc/report/sty/{name}") for name in STYLE_FILES],
    ("notebook.ipynb", "eg/notebook/notebook.ipynb"),
    ("gitignore", ".gitignore"),
]


@dataclass
class EmissionResult:
    """Which template files were written and which already existed."""
    written: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)


def read_template(name: str) -> bytes:
    """Read a packaged template by name."""
    resource = files(TEMPLATE_PACKAGE).joinpath(TEMPLATE_DIRECTORY).joinpath(name)
    try:
        return resource.read_bytes()
    except OSError as e:
        raise FileOperationError(f"Template '{name}' is not available: {e}")


class TemplateEmitter:
    """Write template files into a project, never replacing existing ones."""

    def __init__(self, templates: Optional[Iterable[Tuple[str, str]]] = None):
        self.templates = list(DEFAULT_TEMPLATES if templates is None else templates)

    def destinations(self, root: Path) -> List[Path]:
        root = Path(root)
        return [root.joinpath(*relative.split("/")) for _, relative in self.templates]

    def emit(self, root: Path) -> EmissionResult:
        """Write every template that is missing under root."""
        result = EmissionResult()
        for (name, _), destination in zip(self.templates, self.destinations(root)):
            if destination.exists():
                logger.info(f"{destination} already exists, skipping")
                result.skipped.append(destination)
                continue

            content = read_template(name)
            try:
                destination.parent.mkdir(parents=True, exist_ok=True)
                destination.write_bytes(content)
            except OSError as e:
                raise FileOperationError(f"Failed to write {destination}: {e}")

            logger.info(f"Created {destination}")
            result.written.append(destination)

        return result
