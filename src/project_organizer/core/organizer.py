"""Main orchestration logic for project organization."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from ..exceptions import DirectorySelectionError
from ..models.config import Config
from ..models.profile import Profile, get_profile
from .classifier import ExtensionClassifier
from .mover import FileRelocator, RelocationResult, CollisionPolicy
from .profile_schema import load_profile
from .pruner import EmptyDirectoryPruner, PruneResult
from .repository import GitRepositoryInitializer
from .scaffold import ScaffoldBuilder
from .selection import DirectoryProvider, resolve_target, validate_target
from .templates import TemplateEmitter, EmissionResult

logger = logging.getLogger(__name__)


@dataclass
class RunReport:
    """Everything one organizer run did."""
    root: Path
    scaffold_created: List[Path] = field(default_factory=list)
    stale_pruned: PruneResult = field(default_factory=PruneResult)
    relocation: RelocationResult = field(default_factory=RelocationResult)
    pruned: PruneResult = field(default_factory=PruneResult)
    templates: EmissionResult = field(default_factory=EmissionResult)
    repository_initialized: bool = False
    dry_run: bool = False


def build_profile(config: Config) -> Profile:
    """Pick the sorting profile a configuration asks for."""
    if config.sorting.profile_file:
        return load_profile(config.sorting.profile_file)
    return get_profile(config.sorting.profile)


class ProjectOrganizer:
    """
    Run the phases of a project clean-up in a fixed order.

    scaffold -> prune -> relocate -> prune (repeated) -> templates -> git init

    The directory provider and the repository initializer are injected so
    the run can be driven without a dialog or a git binary.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        provider: Optional[DirectoryProvider] = None,
        repository_initializer: Optional[Callable[[Path], bool]] = None,
        scaffold: Optional[ScaffoldBuilder] = None,
        templates: Optional[TemplateEmitter] = None
    ):
        self.config = config or Config.default()
        self.provider = provider
        self.repository_initializer = repository_initializer or GitRepositoryInitializer(
            self.config.git_executable
        )
        self.scaffold = scaffold or ScaffoldBuilder.from_config(self.config.scaffold)
        self.templates = templates or TemplateEmitter()
        self.profile = build_profile(self.config)
        self.classifier = ExtensionClassifier(self.profile)

    @property
    def dry_run(self) -> bool:
        return self.config.dry_run

    def make_relocator(self) -> FileRelocator:
        sorting = self.config.sorting
        return FileRelocator(
            classifier=self.classifier,
            collision=CollisionPolicy(sorting.collision),
            normalize_names=sorting.normalize_names,
            ignore=sorting.ignore,
            skip_sorted=sorting.skip_sorted,
            sorted_dirs=self.scaffold.components,
            dry_run=self.dry_run
        )

    def resolve(self, target=None) -> Path:
        """Turn an explicit path or the provider's answer into a project root."""
        if target is not None:
            return validate_target(target)
        if self.provider is None:
            raise DirectorySelectionError("No target directory given and no directory provider configured")
        return resolve_target(self.provider)

    def run(self, target=None) -> RunReport:
        """Organize a project directory."""
        root = self.resolve(target)
        report = RunReport(root=root, dry_run=self.dry_run)
        relocator = self.make_relocator()

        if self.dry_run:
            report.relocation = relocator.relocate(root)
            return report

        logger.info(f"Organizing project in {root}")
        report.scaffold_created = self.scaffold.build(root)

        pruner = EmptyDirectoryPruner(keep=self.scaffold.paths(root))
        report.stale_pruned = pruner.prune(root)

        report.relocation = relocator.relocate(root)
        report.pruned = pruner.prune_repeatedly(root, self.config.prune_passes)

        if self.config.templates:
            report.templates = self.templates.emit(root)

        if self.config.git_init:
            report.repository_initialized = bool(self.repository_initializer(root))

        return report

    def sort(self, target) -> RunReport:
        """Relocate and prune only, without scaffold, templates or git."""
        root = validate_target(target)
        report = RunReport(root=root, dry_run=self.dry_run)
        report.relocation = self.make_relocator().relocate(root)
        if not self.dry_run:
            report.pruned = EmptyDirectoryPruner().prune_repeatedly(
                root, self.config.prune_passes
            )
        return report

    def new_project(self, parent: Path, name: str) -> RunReport:
        """Create a fresh project folder with skeleton, templates and repository."""
        root = self.scaffold.create_project(parent, name).resolve()
        report = RunReport(root=root, scaffold_created=self.scaffold.paths(root))
        if self.config.templates:
            report.templates = self.templates.emit(root)
        if self.config.git_init:
            report.repository_initialized = bool(self.repository_initializer(root))
        return report
