"""Custom exceptions for project organizer."""


class ProjectOrganizerError(Exception):
    """Base exception for project organizer errors."""
    pass


class FileOperationError(ProjectOrganizerError):
    """Raised when file operations fail."""
    pass


class WalkError(FileOperationError):
    """Raised when a directory cannot be listed during a tree walk."""

    def __init__(self, path, error: OSError):
        self.path = path
        self.error = error
        super().__init__(f"Cannot read directory {path}: {error}")


class ClassificationError(ProjectOrganizerError):
    """Raised when a file cannot be classified."""
    pass


class ConfigurationError(ProjectOrganizerError):
    """Raised when there's an error in configuration."""
    pass


class DirectorySelectionError(ProjectOrganizerError):
    """Raised when directory selection is cancelled or fails."""
    pass


class DirectoryNotFoundError(ProjectOrganizerError):
    """Raised when the target directory does not exist."""
    pass


class RepositoryInitError(ProjectOrganizerError):
    """Raised when the version control repository cannot be initialized."""
    pass
