"""Field-variant mapping for character-style payloads.

Generators spell the same field many ways (``STR`` / ``strength`` /
``Strength``, ``canonical_name`` vs ``name``, ``equipment.carried`` vs
``gear``). ``FIELD_VARIATIONS`` is the single static table of accepted
variants per canonical path; every helper below reads from it so the guidance
text handed to generators and the mapping logic cannot drift apart.

Mapping is pure: the input dict is never mutated, and problems are reported in
``MappingResult.errors`` instead of being raised.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from loreforge.content.coercion import (
    ensure_array,
    ensure_int,
    ensure_object,
    ensure_string,
    ensure_string_array,
)
from loreforge.content.schemas import ABILITY_KEYS, NpcRecord

logger = logging.getLogger("loreforge.mapper")

FIELD_VARIATIONS: Dict[str, List[str]] = {
    "ability_scores.str": ["STR", "Str", "strength", "Strength", "STRENGTH"],
    "ability_scores.dex": ["DEX", "Dex", "dexterity", "Dexterity", "DEXTERITY"],
    "ability_scores.con": ["CON", "Con", "constitution", "Constitution", "CONSTITUTION"],
    "ability_scores.int": ["INT", "Int", "intelligence", "Intelligence", "INTELLIGENCE"],
    "ability_scores.wis": ["WIS", "Wis", "wisdom", "Wisdom", "WISDOM"],
    "ability_scores.cha": ["CHA", "Cha", "charisma", "Charisma", "CHARISMA"],
    "abilities": ["traits", "Traits", "special_abilities", "features"],
    "personality.traits": ["personality_traits", "character_traits"],
    "personality.ideals": ["ideals"],
    "personality.bonds": ["bonds"],
    "personality.flaws": ["flaws"],
    "name": ["canonical_name", "character_name", "npc_name"],
    "equipment": ["equipment.carried", "gear", "possessions"],
    "magic_items": ["magic_items", "magical_items", "magicItems"],
}

SCHEMA_VERSION_RX = re.compile(r"(?:^|\b|/)(?:v)?(\d+\.\d+)(?:\.\d+)?(?:$|\b)")
SUPPORTED_SCHEMA_VERSIONS = ("1.0", "1.1")


class MappingResult(BaseModel):
    success: bool = False
    mapped: Dict[str, Any] = Field(default_factory=dict)
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    unmapped_fields: List[str] = Field(default_factory=list)


def _get_path(obj: Dict[str, Any], path: str) -> Any:
    current: Any = obj
    for key in path.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def resolve_ability_scores(raw_scores: Any) -> Dict[str, int]:
    """Resolve whichever of the six scores are present, canonical key first."""
    source = ensure_object(raw_scores)
    resolved: Dict[str, int] = {}
    for key in ABILITY_KEYS:
        for candidate in [key] + FIELD_VARIATIONS[f"ability_scores.{key}"]:
            value = ensure_int(source.get(candidate))
            if value is not None:
                resolved[key] = value
                break
    return resolved


def complete_ability_scores(raw_scores: Any) -> Dict[str, int]:
    """Six scores, each missing key defaulted to 10 independently."""
    resolved = resolve_ability_scores(raw_scores)
    return {key: resolved.get(key, 10) for key in ABILITY_KEYS}


def normalize_schema_version(value: Any) -> Optional[str]:
    """``1.1`` / ``"v1.1"`` / ``"npc/v1.1.0"`` -> ``"1.1"``; unknown -> None."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        detected = f"{float(value):.1f}"
        return detected if detected in SUPPORTED_SCHEMA_VERSIONS else None
    if isinstance(value, str):
        match = SCHEMA_VERSION_RX.search(value.strip().lower())
        if match and match.group(1) in SUPPORTED_SCHEMA_VERSIONS:
            return match.group(1)
    return None


def collapse_magic_items(raw: Dict[str, Any]) -> List[str]:
    for key in FIELD_VARIATIONS["magic_items"]:
        entries = raw.get(key)
        if entries is None:
            continue

        def _name(entry: Any) -> Optional[str]:
            if isinstance(entry, dict):
                return ensure_string(entry.get("name")) or None
            return ensure_string(entry) or None

        return ensure_array(entries, _name)
    return []


def resolve_equipment(raw: Dict[str, Any]) -> List[str]:
    equipment = raw.get("equipment")
    if isinstance(equipment, dict):
        return ensure_string_array(equipment.get("carried"))
    if equipment is not None:
        return ensure_string_array(equipment)
    for variant in FIELD_VARIATIONS["equipment"][1:]:
        if raw.get(variant) is not None:
            return ensure_string_array(raw.get(variant))
    return []


def resolve_personality(raw: Dict[str, Any]) -> Dict[str, List[str]]:
    """Nested ``personality`` wins; top-level variants fill empty slots."""
    nested = ensure_object(raw.get("personality"))
    result: Dict[str, List[str]] = {}
    for slot in ("traits", "ideals", "bonds", "flaws"):
        values = ensure_string_array(nested.get(slot))
        if not values:
            for variant in FIELD_VARIATIONS[f"personality.{slot}"]:
                values = ensure_string_array(raw.get(variant))
                if values:
                    break
        result[slot] = values
    return result


def resolve_name(raw: Dict[str, Any]) -> str:
    for key in ["name"] + FIELD_VARIATIONS["name"]:
        name = ensure_string(raw.get(key))
        if name:
            return name
    return ""


def resolve_abilities_source(raw: Dict[str, Any]) -> Any:
    if raw.get("abilities") is not None:
        return raw.get("abilities")
    for variant in FIELD_VARIATIONS["abilities"]:
        if raw.get(variant) is not None:
            return raw.get(variant)
    return None


def _known_keys() -> set:
    known = set(NpcRecord.model_fields.keys())
    known.update({"deliverable", "content_type", "contentType", "draft", "schemaVersion", "ac", "hp",
                  "canonical_name", "physical_appearance", "summary", "combat_tactics", "skills", "spells"})
    for path, variants in FIELD_VARIATIONS.items():
        known.add(path.split(".")[0])
        known.update(v.split(".")[0] for v in variants)
    return known


def map_to_canonical_structure(raw_data: Any) -> MappingResult:
    """Map field variants onto canonical names without mutating the input."""
    raw = ensure_object(raw_data)
    result = MappingResult()
    mapped: Dict[str, Any] = dict(raw)

    version_source = raw.get("schema_version", raw.get("schemaVersion"))
    detected = normalize_schema_version(version_source)
    if detected:
        mapped["schema_version"] = detected
        if version_source != detected:
            result.warnings.append(f'Normalized schema_version from "{version_source}" to "{detected}"')

    if isinstance(raw.get("ability_scores"), dict):
        resolved = resolve_ability_scores(raw["ability_scores"])
        missing = [key for key in ABILITY_KEYS if key not in resolved]
        if missing:
            result.errors.append(f"Missing ability scores: {', '.join(missing)}")
        else:
            mapped["ability_scores"] = resolved

    if raw.get("abilities") is None:
        abilities = resolve_abilities_source(raw)
        if abilities is not None:
            mapped["abilities"] = abilities
            result.warnings.append('Mapped trait variant to canonical "abilities" field')

    equipment = resolve_equipment(raw)
    if equipment:
        mapped["equipment"] = equipment
        if isinstance(raw.get("equipment"), dict):
            result.warnings.append("Normalized nested equipment.carried to flat equipment array")

    magic_items = collapse_magic_items(raw)
    if magic_items:
        mapped["magic_items"] = magic_items
        source_items = ensure_array(raw.get("magic_items", raw.get("magical_items")))
        if any(isinstance(entry, dict) for entry in source_items):
            result.warnings.append("Extracted magic item names from object array")

    mapped["personality"] = resolve_personality(raw)
    if any(raw.get(key) is not None for key in ("personality_traits", "character_traits", "ideals", "bonds", "flaws")):
        result.warnings.append("Normalized top-level personality fields into personality object")

    if not ensure_string(raw.get("name")):
        name = resolve_name(raw)
        if name:
            mapped["name"] = name
            result.warnings.append('Mapped name variant to "name"')

    known = _known_keys()
    result.unmapped_fields = sorted(key for key in raw.keys() if key not in known)
    result.mapped = mapped
    result.success = not result.errors
    if result.errors:
        logger.debug("mapping_errors errors=%s", result.errors)
    return result


def generate_field_guidance() -> str:
    """Human-readable naming guidance built from FIELD_VARIATIONS."""
    lines = [
        "## Canonical NPC Field Names",
        "",
        "Use the canonical name on the left. The variants on the right are accepted",
        "but will be rewritten during mapping.",
        "",
    ]
    for path, variants in FIELD_VARIATIONS.items():
        lines.append(f"- `{path}` (accepts: {', '.join(variants)})")
    lines.append("")
    lines.append("`ability_scores` must contain all six of: " + ", ".join(ABILITY_KEYS) + ".")
    lines.append(f"`schema_version` should be one of: {', '.join(SUPPORTED_SCHEMA_VERSIONS)}.")
    return "\n".join(lines)
