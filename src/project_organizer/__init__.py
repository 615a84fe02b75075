"""Project Organizer

A tool for scaffolding project folders and sorting loose files into them.
"""

__version__ = "0.1.0"

from .core.classifier import ExtensionClassifier
from .core.mover import FileRelocator, CollisionPolicy
from .core.pruner import EmptyDirectoryPruner
from .core.scaffold import ScaffoldBuilder
from .core.organizer import ProjectOrganizer
from .models.config import Config
from .models.profile import Profile, ExtensionRule, CURRENT_PROFILE, LEGACY_PROFILE

__all__ = [
    # Core components
    "ExtensionClassifier",
    "FileRelocator",
    "EmptyDirectoryPruner",
    "ScaffoldBuilder",
    "ProjectOrganizer",

    # Types and configuration
    "CollisionPolicy",
    "Config",
    "Profile",
    "ExtensionRule",
    "CURRENT_PROFILE",
    "LEGACY_PROFILE",
]
