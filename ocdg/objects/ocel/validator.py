import json
import logging

from pathlib import Path
from typing import Any, Dict, List, Tuple

from jsonschema import Draft7Validator

from ocdg.objects.ocel.importer import parse_timestamp

"""
    Structural validation of OCEL 1.0 JSON logs.

    A violation is a (message, location) pair. The location is the path inside the JSON document,
    joined with '/', e.g. 'ocel:events/e1'. The whole document is addressed as 'root'.
"""

SCHEMA_PATH = Path(__file__).parent / "schemas" / "ocel.schema.json"
ROOT = "root"

logger = logging.getLogger(__name__)

Violation = Tuple[str, str]


def _load_schema() -> dict:
    with open(SCHEMA_PATH, encoding="utf-8") as f:
        return json.load(f)


def _location(path) -> str:
    return "/".join(str(p) for p in path) if path else ROOT


def check_structure(content: Any) -> List[Violation]:
    """Checks the document against the OCEL 1.0 JSON schema."""
    validator = Draft7Validator(_load_schema())
    return [(error.message, _location(error.absolute_path)) for error in validator.iter_errors(content)]


def check_references(content: Dict[str, Any]) -> List[Violation]:
    """
    Checks what the schema cannot express: timestamps must parse and every object in an omap must be defined.
    Only meaningful on a document without structural violations.
    """
    violations = []
    objects = content["ocel:objects"]
    for event_id, event in content["ocel:events"].items():
        try:
            parse_timestamp(event["ocel:timestamp"])
        except ValueError:
            violations.append((f"'{event['ocel:timestamp']}' is no valid timestamp",
                               _location(["ocel:events", event_id, "ocel:timestamp"])))
        for idx, object_id in enumerate(event["ocel:omap"]):
            if object_id not in objects:
                violations.append((f"Object '{object_id}' is referenced but not defined",
                                   _location(["ocel:events", event_id, "ocel:omap", idx])))
    return violations


def validate_content(content: Any) -> List[Violation]:
    violations = check_structure(content)
    if not violations:
        violations = check_references(content)
    return sorted(violations, key=lambda v: (v[1], v[0]))


def validate_ocel_verbose(filepath: str) -> List[Violation]:
    """
    Validates an OCEL 1.0 JSON file and reports every violation.

    Args:
        filepath: Path to the .jsonocel file

    Returns:
        The violations ordered by location, an empty list for a valid log

    Raises:
        OSError: If the file cannot be read
    """
    with open(filepath, encoding="utf-8") as f:
        try:
            content = json.load(f)
        except json.JSONDecodeError as e:
            return [(f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})", ROOT)]
        except UnicodeDecodeError as e:
            return [(f"Invalid UTF-8: {e.reason} at byte {e.start}", ROOT)]

    violations = validate_content(content)
    logger.debug(f"Validated {filepath}: {len(violations)} violation(s).")
    return violations


def validate_ocel(filepath: str) -> bool:
    """Returns whether the file is a structurally valid OCEL 1.0 JSON log."""
    return not validate_ocel_verbose(filepath)
