"""Extension rule tables used to sort files into project folders."""

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from ..exceptions import ConfigurationError

STEM_PLACEHOLDER = "{stem}"


def normalize_extension(extension: str) -> str:
    """Lower-case an extension and make sure it carries the leading dot."""
    extension = extension.strip().lower()
    if extension and not extension.startswith("."):
        extension = "." + extension
    return extension


@dataclass(frozen=True)
class ExtensionRule:
    """Map a set of extensions to a destination folder template.

    The destination is a POSIX-style relative path. It may contain the
    ``{stem}`` placeholder, which is replaced by the file's base name so
    that each file gets a folder of its own (``src/{stem}``).
    """
    extensions: FrozenSet[str]
    destination: str

    def __post_init__(self):
        object.__setattr__(
            self, "extensions", frozenset(normalize_extension(e) for e in self.extensions)
        )
        _check_destination(self.destination)

    @classmethod
    def of(cls, destination: str, *extensions: str) -> "ExtensionRule":
        return cls(frozenset(extensions), destination)

    @property
    def per_file(self) -> bool:
        return STEM_PLACEHOLDER in self.destination

    @property
    def bucket(self) -> str:
        """Top-level folder this rule sorts into."""
        return PurePosixPath(self.destination).parts[0]

    def matches(self, extension: str) -> bool:
        return normalize_extension(extension) in self.extensions

    def expand(self, stem: str) -> PurePosixPath:
        """Fill in the stem. Segments that would be '.' or '..' are dropped."""
        expanded = self.destination.replace(STEM_PLACEHOLDER, stem)
        return PurePosixPath(*[part for part in expanded.split("/") if part not in ("", ".", "..")])


@dataclass(frozen=True)
class Profile:
    """A named, ordered rule table with a fallback destination."""
    name: str
    rules: Tuple[ExtensionRule, ...]
    default: str = "data"
    description: str = ""

    def __post_init__(self):
        object.__setattr__(self, "rules", tuple(self.rules))
        _check_destination(self.default)

    @property
    def buckets(self) -> List[str]:
        """Top-level folders this profile can sort into, in rule order."""
        buckets = []
        for destination in [r.destination for r in self.rules] + [self.default]:
            bucket = PurePosixPath(destination).parts[0]
            if bucket not in buckets:
                buckets.append(bucket)
        return buckets

    def rule_for(self, extension: str) -> Optional[ExtensionRule]:
        """Return the first rule matching the extension, if any."""
        extension = normalize_extension(extension)
        if not extension:
            return None
        for rule in self.rules:
            if extension in rule.extensions:
                return rule
        return None

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "description": self.description,
            "default": self.default,
            "rules": [
                {"extensions": sorted(rule.extensions), "destination": rule.destination}
                for rule in self.rules
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Profile":
        try:
            rules = tuple(
                ExtensionRule(frozenset(item["extensions"]), item["destination"])
                for item in data["rules"]
            )
            return cls(
                name=data["name"],
                rules=rules,
                default=data.get("default", "data"),
                description=data.get("description", ""),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid profile definition: {e}")


def _check_destination(destination: str) -> None:
    path = PurePosixPath(destination)
    if not destination or path.is_absolute() or ".." in path.parts:
        raise ValueError(f"Destination must be a relative folder path: {destination!r}")


CURRENT_PROFILE = Profile(
    name="current",
    description="doc, job, media, src, bin and data buckets",
    rules=(
        ExtensionRule.of("doc", ".pdf", ".djvu", ".epub", ".html", ".docx", ".md",
                         ".tex", ".txt", ".doc", ".pptx", ".ipynb"),
        ExtensionRule.of("job", ".rst", ".rth", ".cdb", ".ls-dyna", ".db", ".dbb",
                         ".esav", ".out"),
        ExtensionRule.of("media/{stem}", ".mkv", ".mp4", ".aac", ".flac", ".wav", ".avi",
                         ".png", ".jpeg", ".mov", ".wmv", ".jpg", ".mp3"),
        ExtensionRule.of("src/{stem}", ".py", ".go", ".ans", ".inp", ".c", ".m", ".for",
                         ".cpp", ".java", ".scala", ".php", ".sh", ".asm", ".h", ".dat"),
        ExtensionRule.of("bin", ".exe"),
    ),
)

LEGACY_PROFILE = Profile(
    name="legacy",
    description="ref, doc, eg, src and data buckets",
    rules=(
        ExtensionRule.of("ref/{stem}", ".pdf", ".djvu", ".epub", ".html", ".mkv", ".mp4"),
        ExtensionRule.of("doc", ".docx", ".md", ".tex", ".txt", ".doc", ".pptx"),
        ExtensionRule.of("eg/{stem}", ".ipynb"),
        ExtensionRule.of("src/{stem}", ".py", ".go", ".inp", ".c", ".m", ".for", ".cpp", ".java"),
    ),
)

BUILTIN_PROFILES: Dict[str, Profile] = {
    CURRENT_PROFILE.name: CURRENT_PROFILE,
    LEGACY_PROFILE.name: LEGACY_PROFILE,
}


def get_profile(name: str) -> Profile:
    """Look up a built-in profile by name."""
    try:
        return BUILTIN_PROFILES[name]
    except KeyError:
        available = ", ".join(sorted(BUILTIN_PROFILES))
        raise ConfigurationError(f"Unknown profile '{name}' (available: {available})")


def list_profiles() -> Iterable[Profile]:
    return BUILTIN_PROFILES.values()
