"""Helpers for manual edits of normalized records.

Edit forms show list fields as one entry per line with ``|`` separating the
parts (``name | description | notes``). The ``*_to_multiline`` helpers produce
that text and the ``multiline_to_*`` helpers parse it back into canonical
entries. Blank lines are ignored.
"""

import json
import re
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel

from loreforge.content.schemas import ClassLevel, Feature, Relationship, ScoredEntry
from loreforge.core.config import get_settings

INVALID_JSON = "invalid_json"

_LEVEL_DIGITS_RX = re.compile(r"[^0-9-]")
_NOTES_PREFIX_RX = re.compile(r"^Notes:\s*", re.IGNORECASE)


class JsonEditResult(BaseModel):
    value: Any = None
    warning: Optional[str] = None


def apply_json_edit(previous: Any, text: str) -> JsonEditResult:
    """Parse an edited JSON field.

    Blank text clears the field. Text that fails to parse keeps ``previous``
    and flags ``invalid_json`` so the caller can surface it on save.
    """
    if not (text or "").strip():
        return JsonEditResult(value=None)
    try:
        return JsonEditResult(value=json.loads(text))
    except ValueError:
        return JsonEditResult(value=previous, warning=INVALID_JSON)


def _split(line: str, width: int) -> List[str]:
    parts = [part.strip() for part in line.split("|")]
    return (parts + [""] * width)[:width]


def list_to_multiline(values: Iterable[str]) -> str:
    return "\n".join(values)


def multiline_to_list(value: str) -> List[str]:
    return [entry.strip() for entry in (value or "").split("\n") if entry.strip()]


def features_to_multiline(items: Iterable[Feature]) -> str:
    return "\n".join(
        " | ".join(part for part in (item.name, item.description, item.notes or "") if part)
        for item in items
    )


def multiline_to_features(value: str) -> List[Feature]:
    max_name = get_settings().FEATURE_NAME_MAX
    features = []
    for line in multiline_to_list(value):
        name, description, notes = _split(line, 3)
        features.append(Feature(
            name=name or (description[:max_name] if description else "Feature"),
            description=description,
            notes=notes or None,
        ))
    return features


def relationships_to_multiline(items: Iterable[Relationship]) -> str:
    return "\n".join(
        " | ".join(part for part in (item.entity, item.relationship, item.notes or "") if part)
        for item in items
    )


def multiline_to_relationships(value: str) -> List[Relationship]:
    relationships = []
    for line in multiline_to_list(value):
        entity, relationship, notes = _split(line, 3)
        relationships.append(Relationship(entity=entity, relationship=relationship, notes=notes or None))
    return relationships


def class_levels_to_multiline(levels: Iterable[ClassLevel]) -> str:
    lines = []
    for index, level in enumerate(levels, start=1):
        parts = [level.class_name or f"Class {index}"]
        if level.level is not None:
            parts.append(f"Level {level.level}")
        if level.subclass:
            parts.append(level.subclass)
        if level.notes:
            parts.append(f"Notes: {level.notes}")
        lines.append(" | ".join(parts))
    return "\n".join(lines)


def multiline_to_class_levels(value: str) -> List[ClassLevel]:
    levels = []
    for line in multiline_to_list(value):
        class_part, level_part, subclass_part, notes_part = _split(line, 4)
        digits = _LEVEL_DIGITS_RX.sub("", level_part)
        try:
            level = int(digits) if digits else None
        except ValueError:
            level = None
        levels.append(ClassLevel(
            class_name=class_part,
            level=level,
            subclass=subclass_part or None,
            notes=_NOTES_PREFIX_RX.sub("", notes_part) or None,
        ))
    return levels


def scored_entries_to_multiline(entries: Iterable[ScoredEntry]) -> str:
    return "\n".join(
        " | ".join([entry.name, entry.value] + ([entry.notes] if entry.notes else []))
        for entry in entries
    )


def multiline_to_scored_entries(value: str) -> List[ScoredEntry]:
    entries = []
    for line in multiline_to_list(value):
        name, amount, notes = _split(line, 3)
        entries.append(ScoredEntry(name=name or amount or "Entry", value=amount or "—", notes=notes or None))
    return entries
