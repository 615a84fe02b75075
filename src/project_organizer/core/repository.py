"""Version control initialization for project directories."""

import logging
import subprocess
from pathlib import Path

from ..exceptions import RepositoryInitError
from .walker import VCS_DIRECTORY

logger = logging.getLogger(__name__)


class GitRepositoryInitializer:
    """Run ``git -C <path> init`` when the project has no repository yet."""

    def __init__(self, executable: str = "git"):
        self.executable = executable

    def needs_init(self, root: Path) -> bool:
        return not (Path(root) / VCS_DIRECTORY).exists()

    def __call__(self, root: Path) -> bool:
        """
        Initialize a repository in root.

        Returns:
            True if a repository was created, False if one already existed.

        Raises:
            RepositoryInitError: git is missing or exited with an error.
        """
        root = Path(root)
        if not self.needs_init(root):
            logger.info(f"Git repository already exists in {root}")
            return False

        command = [self.executable, "-C", str(root), "init"]
        try:
            completed = subprocess.run(command, capture_output=True, text=True, check=False)
        except OSError as e:
            raise RepositoryInitError(f"Cannot run {self.executable}: {e}")

        if completed.returncode != 0:
            message = (completed.stderr or completed.stdout or "").strip()
            raise RepositoryInitError(
                f"'{' '.join(command)}' failed with exit code {completed.returncode}: {message}"
            )

        logger.info(f"Git repository initialized in {root}")
        return True
