"""Extension based classification of project files."""

from pathlib import Path, PurePosixPath
from typing import Optional, Union

from ..models.profile import Profile, CURRENT_PROFILE, normalize_extension
from ..exceptions import ClassificationError


class ExtensionClassifier:
    """Map a file extension to a destination folder under the project root."""

    def __init__(self, profile: Optional[Profile] = None):
        self.profile = profile or CURRENT_PROFILE

    def classify(self, extension: str, stem: str) -> PurePosixPath:
        """
        Classify a file by its extension.

        Args:
            extension: File extension, with or without the leading dot.
                Matching ignores case.
            stem: File name without extension, used by per-file rules.

        Returns:
            Relative destination folder. Unknown or empty extensions map
            to the profile default. A stem of '.' or '..' is left out of
            per-file folders.
        """
        if extension is None:
            extension = ""

        rule = self.profile.rule_for(extension)
        if rule is None:
            return PurePosixPath(self.profile.default)

        if rule.per_file and not stem:
            raise ClassificationError(
                f"Rule '{rule.destination}' needs a file name, got an empty stem"
            )
        folder = rule.expand(stem)
        if not folder.parts:
            return PurePosixPath(self.profile.default)
        return folder

    def classify_path(self, path: Union[str, Path]) -> PurePosixPath:
        """Classify a file by its name."""
        path = Path(path)
        return self.classify(path.suffix, path.stem)

    def extension_of(self, path: Union[str, Path]) -> str:
        return normalize_extension(Path(path).suffix)
