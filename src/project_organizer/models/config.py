"""Configuration model for project organizer."""

from pathlib import Path
from typing import List, Optional
import json
from dataclasses import dataclass, field

from ..exceptions import ConfigurationError

COLLISION_POLICIES = ("rename", "overwrite", "fail")


@dataclass
class SortingConfig:
    """Configuration for file classification and relocation."""
    profile: str = "current"
    profile_file: Optional[Path] = None
    collision: str = "rename"  # "rename", "overwrite" or "fail"
    normalize_names: bool = False
    # Generated templates stay where they were written
    ignore: List[str] = field(default_factory=lambda: [
        "README.md", ".gitignore", "eg/README.md", "doc/report/*", "eg/notebook/*"
    ])
    skip_sorted: bool = False


@dataclass
class ScaffoldConfig:
    """Configuration for the project skeleton."""
    components: List[str] = field(
        default_factory=lambda: ["doc", "src", "job", "data", "ref", "eg", "media", "bin"]
    )
    report_components: List[str] = field(
        default_factory=lambda: ["doc", "src", "job", "data", "ref", "eg"]
    )
    extra: List[str] = field(
        default_factory=lambda: ["doc/report/sty", "eg/notebook", "data/large"]
    )


@dataclass
class Config:
    """Main configuration model."""
    sorting: SortingConfig = field(default_factory=SortingConfig)
    scaffold: ScaffoldConfig = field(default_factory=ScaffoldConfig)
    prune_passes: int = 3
    templates: bool = True
    git_init: bool = True
    git_executable: str = "git"
    dry_run: bool = False

    def __post_init__(self):
        if self.sorting.collision not in COLLISION_POLICIES:
            raise ConfigurationError(
                f"Unknown collision policy '{self.sorting.collision}' "
                f"(expected one of: {', '.join(COLLISION_POLICIES)})"
            )
        if self.prune_passes < 1:
            raise ConfigurationError("prune_passes must be at least 1")

    @classmethod
    def default(cls) -> "Config":
        return cls()


def _dataclass_to_dict(obj):
    """Convert dataclass to dict recursively."""
    from dataclasses import is_dataclass, asdict
    if is_dataclass(obj):
        result = {}
        for key, value in asdict(obj).items():
            result[key] = _dataclass_to_dict(value)
        return result
    elif isinstance(obj, Path):
        return str(obj)
    elif isinstance(obj, dict):
        return {key: _dataclass_to_dict(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [_dataclass_to_dict(item) for item in obj]
    else:
        return obj


def _dict_to_dataclass(data, dataclass_type):
    """Convert dict to dataclass recursively."""
    from dataclasses import is_dataclass, fields
    if not is_dataclass(dataclass_type):
        return data

    field_types = {f.name: f.type for f in fields(dataclass_type)}

    kwargs = {}
    for field_name, field_type in field_types.items():
        if field_name not in data:
            continue
        value = data[field_name]
        if hasattr(field_type, '__dataclass_fields__'):
            kwargs[field_name] = _dict_to_dataclass(value, field_type)
        elif field_type in (Path, Optional[Path]) and value is not None:
            kwargs[field_name] = Path(value)
        else:
            kwargs[field_name] = value

    return dataclass_type(**kwargs)


def load_config(config_path: Path) -> Config:
    """Load configuration from JSON file."""
    try:
        with open(config_path, 'r') as f:
            config_data = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {config_path}: {e}")
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Invalid JSON in {config_path}: {e.msg} at line {e.lineno}, column {e.colno}"
        )

    if not isinstance(config_data, dict):
        raise ConfigurationError(f"Config file {config_path} must contain a JSON object")

    try:
        return _dict_to_dataclass(config_data, Config)
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration in {config_path}: {e}")


def save_config(config: Config, config_path: Path) -> None:
    """Save configuration to JSON file."""
    config_dict = _dataclass_to_dict(config)

    with open(config_path, 'w') as f:
        json.dump(config_dict, f, indent=2)


def create_default_config(config_path: Path) -> None:
    """Create a default configuration file."""
    save_config(Config.default(), config_path)
