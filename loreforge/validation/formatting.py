"""Human-readable rendering of JSON Schema errors.

Errors are grouped by instance path and numbered in one running sequence.
Each line names the field with a friendly label, states what was wrong with
a short summary of the offending value, and ends with a ``Fix:`` hint where
the keyword has an obvious remedy.
"""

import re
from collections import OrderedDict
from typing import Any, Dict, Iterable, List

from jsonschema.exceptions import ValidationError as SchemaViolation

FIELD_LABELS: Dict[str, str] = {
    "armor_class": "Armor Class",
    "hit_points": "Hit Points",
    "ability_scores": "Ability Scores",
    "class_levels": "Class Levels",
    "saving_throws": "Saving Throws",
    "skill_proficiencies": "Skill Proficiencies",
    "creature_type": "Creature Type",
    "challenge_rating": "Challenge Rating",
    "experience_points": "Experience Points",
    "proficiency_bonus": "Proficiency Bonus",
    "schema_version": "Schema Version",
    "magic_items": "Magic Items",
    "properties_v2": "Item Properties",
    "key_features": "Key Features",
    "party_level": "Party Level",
    "party_size": "Party Size",
}

SUMMARY_MAX = 60
ARMOR_CLASS_FIX = "Enter a number like 18, or use parentheses like 18 (plate armor)."

_REQUIRED_RX = re.compile(r"^'(.+)' is a required property$")


def instance_path(error: SchemaViolation) -> str:
    return "/" + "/".join(str(part) for part in error.absolute_path)


def path_to_field(path: str) -> str:
    return (path or "/").lstrip("/").replace("/", ".")


def label_for_path(path: str) -> str:
    field = path_to_field(path)
    return FIELD_LABELS.get(field) or field or "root object"


def describe_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def summarize_value(value: Any) -> str:
    """Short quoted preview; strings are trimmed and cut at 60 characters."""
    if isinstance(value, str):
        trimmed = value.strip()
        snippet = f"{trimmed[:SUMMARY_MAX]}..." if len(trimmed) > SUMMARY_MAX else trimmed
        return f'"{snippet}"'
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, list):
        return f"[array({len(value)})]"
    if isinstance(value, dict):
        return "[object]"
    return str(value)


def _expected_types(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [str(item) for item in value]
    return []


def _missing_property(error: SchemaViolation) -> str:
    match = _REQUIRED_RX.match(error.message)
    if match:
        return match.group(1)
    instance = error.instance if isinstance(error.instance, dict) else {}
    missing = [name for name in error.validator_value if name not in instance]
    return missing[0] if missing else "unknown"


def _unexpected_properties(error: SchemaViolation) -> List[str]:
    instance = error.instance if isinstance(error.instance, dict) else {}
    allowed = set((error.schema or {}).get("properties", {}))
    patterns = [re.compile(p) for p in (error.schema or {}).get("patternProperties", {})]
    return [
        key for key in instance
        if key not in allowed and not any(p.search(key) for p in patterns)
    ] or ["unknown"]


def _format_branch_failure(error: SchemaViolation, label: str, field: str) -> str:
    """oneOf / anyOf: report the expected types when the branches failed on type alone."""
    type_errors = [sub for sub in (error.context or []) if sub.validator == "type" and not sub.relative_path]
    actual_type = describe_type(error.instance)
    actual_value = summarize_value(error.instance)

    if type_errors:
        expected: List[str] = []
        for sub in type_errors:
            for name in _expected_types(sub.validator_value):
                if name not in expected:
                    expected.append(name)
        fix = "Use the correct format for this field."
        if field == "armor_class":
            fix = ARMOR_CLASS_FIX + (" Avoid free-form text." if actual_type == "string" else "")
        expected_text = " or ".join(expected) if expected else "one of the allowed formats"
        return f"{label}: invalid format. Expected {expected_text}, got {actual_type} ({actual_value}). Fix: {fix}"

    return (
        f"{label}: invalid format. Value is {actual_type} ({actual_value}). "
        "Fix: Choose one of the supported formats for this field."
    )


def format_error(error: SchemaViolation, path: str) -> List[str]:
    label = label_for_path(path)
    field = path_to_field(path)
    keyword = error.validator

    if keyword in ("oneOf", "anyOf"):
        return [_format_branch_failure(error, label, field)]

    if keyword == "required":
        return [f'{label}: missing required field "{_missing_property(error)}". Fix: add this field.']

    if keyword == "additionalProperties":
        return [
            f'{label}: unexpected field "{extra}". Fix: remove it or correct the spelling.'
            for extra in _unexpected_properties(error)
        ]

    if keyword == "type":
        expected = " or ".join(_expected_types(error.validator_value)) or "unknown"
        actual_type = describe_type(error.instance)
        fix = f"Make sure this is a {expected}."
        if field == "armor_class" and actual_type == "string":
            fix = ARMOR_CLASS_FIX + " Avoid free-form text."
        return [
            f"{label}: must be {expected} (expected {expected}, got {actual_type}: "
            f"{summarize_value(error.instance)}). Fix: {fix}"
        ]

    if keyword == "enum":
        allowed = ", ".join(str(v) for v in error.validator_value) if isinstance(error.validator_value, list) else "see schema"
        return [f"{label}: {error.message}. Allowed values: {allowed}. Fix: use one of the allowed values."]

    if keyword == "pattern":
        return [f"{label}: {error.message}. Required pattern: {error.validator_value}. Fix: match the required pattern."]

    return [f"{label}: {error.message}"]


def format_validation_errors(errors: Iterable[SchemaViolation]) -> str:
    by_path: "OrderedDict[str, List[SchemaViolation]]" = OrderedDict()
    for error in errors:
        by_path.setdefault(instance_path(error), []).append(error)

    lines: List[str] = []
    for path, group in by_path.items():
        for error in group:
            for text in format_error(error, path):
                lines.append(f"{len(lines) + 1}. {text}")
    return "\n".join(lines)
