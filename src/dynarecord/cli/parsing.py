"""Input parsing utilities for CLI commands."""

import json
from pathlib import Path
from typing import Any


def parse_attributes(data_json: str) -> dict[str, Any]:
    """Parse a JSON object of attributes.

    Args:
        data_json: JSON text, e.g. '{"title": "Le Wagon"}'

    Returns:
        Attribute mapping in document order

    Raises:
        ValueError: If the text is not valid JSON or not an object
    """
    try:
        data = json.loads(data_json)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def parse_identity(raw: str) -> Any:
    """Parse an identity argument.

    Numbers become int/float so they match integer keys; anything that is
    not JSON stays as text.

    Examples:
        "3"       → 3
        "abc"     → "abc"
        '"007"'   → "007"
    """
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return raw
    if isinstance(value, (dict, list, bool)) or value is None:
        return raw
    return value


def read_json_file(path: str) -> dict[str, Any]:
    """Read single JSON object from file.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON object

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If file does not hold a JSON object
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with file_path.open("r") as f:
        return parse_attributes(f.read())
