"""Core project organizer modules."""

from .classifier import ExtensionClassifier
from .walker import TreeWalker, FileSystemEntry
from .mover import FileRelocator, CollisionPolicy, Move, RelocationResult
from .pruner import EmptyDirectoryPruner, PruneResult, is_directory_empty
from .scaffold import ScaffoldBuilder
from .templates import TemplateEmitter, EmissionResult
from .repository import GitRepositoryInitializer
from .organizer import ProjectOrganizer, RunReport

__all__ = [
    'ExtensionClassifier',
    'TreeWalker',
    'FileSystemEntry',
    'FileRelocator',
    'CollisionPolicy',
    'Move',
    'RelocationResult',
    'EmptyDirectoryPruner',
    'PruneResult',
    'is_directory_empty',
    'ScaffoldBuilder',
    'TemplateEmitter',
    'EmissionResult',
    'GitRepositoryInitializer',
    'ProjectOrganizer',
    'RunReport'
]
