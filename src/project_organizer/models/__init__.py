"""Data models for project organizer."""

from .config import Config, SortingConfig, ScaffoldConfig
from .profile import ExtensionRule, Profile, CURRENT_PROFILE, LEGACY_PROFILE, get_profile

__all__ = [
    "Config",
    "SortingConfig",
    "ScaffoldConfig",
    "ExtensionRule",
    "Profile",
    "CURRENT_PROFILE",
    "LEGACY_PROFILE",
    "get_profile",
]
