"""JSON schema and validation for custom sorting profiles."""

import json
import jsonschema
from pathlib import Path
from typing import Any, Dict, List

from ..exceptions import ConfigurationError
from ..models.profile import Profile, CURRENT_PROFILE

DESTINATION_PATTERN = r"^(?!/)(?!.*(^|/)\.\.(/|$))[^\\]+$"

PROFILE_SCHEMA = {
    "type": "object",
    "required": ["name", "rules"],
    "properties": {
        "name": {
            "type": "string",
            "minLength": 1,
            "description": "Unique name for the profile"
        },
        "description": {
            "type": "string",
            "description": "Optional description of the profile"
        },
        "default": {
            "type": "string",
            "minLength": 1,
            "pattern": DESTINATION_PATTERN,
            "default": "data",
            "description": "Folder for files no rule matches"
        },
        "rules": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["extensions", "destination"],
                "additionalProperties": False,
                "properties": {
                    "extensions": {
                        "type": "array",
                        "minItems": 1,
                        "items": {
                            "type": "string",
                            "pattern": r"^\.?[^./\\\s][^/\\\s]*$"
                        },
                        "description": "Extensions, with or without the leading dot"
                    },
                    "destination": {
                        "type": "string",
                        "minLength": 1,
                        "pattern": DESTINATION_PATTERN,
                        "description": "Relative folder; {stem} expands to the file name"
                    }
                }
            }
        }
    }
}


def validate_profile_json(profile_data: Dict[str, Any]) -> List[str]:
    """Validate a profile definition.

    Args:
        profile_data: The decoded JSON document

    Returns:
        List of validation error messages, empty when valid
    """
    validator = jsonschema.Draft7Validator(PROFILE_SCHEMA)
    errors = []
    for error in sorted(validator.iter_errors(profile_data), key=lambda e: list(e.absolute_path)):
        path = " -> ".join(str(p) for p in error.absolute_path) if error.absolute_path else "root"
        errors.append(f"Validation error at {path}: {error.message}")
    return errors


def validate_profile_file(file_path: Path) -> List[str]:
    """Validate a profile definition JSON file."""
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            profile_data = json.load(f)
    except json.JSONDecodeError as e:
        return [f"JSON parsing error: {e.msg} at line {e.lineno}, column {e.colno}"]
    except OSError as e:
        return [f"Error reading file: {e}"]
    return validate_profile_json(profile_data)


def load_profile(file_path: Path) -> Profile:
    """Load and validate a custom profile."""
    errors = validate_profile_file(file_path)
    if errors:
        raise ConfigurationError(
            f"Invalid profile file {file_path}:\n" + "\n".join(errors)
        )

    with open(file_path, 'r', encoding='utf-8') as f:
        return Profile.from_dict(json.load(f))


def create_example_profile() -> Dict[str, Any]:
    """Build an example profile document from the built-in table."""
    example = CURRENT_PROFILE.to_dict()
    example["name"] = "custom"
    example["description"] = "Copy of the current profile, edit to taste"
    return example
