"""Parsers for polymorphic fields shared by several domain normalizers.

Armor class and hit points arrive as bare numbers, annotated strings
("15 (natural armor)", "138 (12d12+60)"), objects or lists. Each parser below
handles one field and dispatches on the source shape; the result is always one
of the typed forms from ``loreforge.content.schemas``.
"""

import re
from typing import Any, List, Optional

from loreforge.content.coercion import (
    ensure_array,
    ensure_int,
    ensure_object,
    ensure_string,
    ensure_string_array,
    first_present,
)
from loreforge.content.schemas import (
    ArmorClass,
    ArmorClassEntry,
    ClassLevel,
    Feature,
    HitPoints,
    MonsterFeature,
    Relationship,
    ScoredEntry,
    SpellcastingSummary,
)
from loreforge.core.config import get_settings

AC_RX = re.compile(r"^\s*(\d+)\s*(?:\(([^)]*)\))?\s*(.*?)\s*$")
HP_WITH_FORMULA_RX = re.compile(r"^\s*(\d+)\s*\(([^)]*)\)\s*$")
DICE_RX = re.compile(r"^\s*\d+\s*d\s*\d+(\s*[+-]\s*\d+)?\s*$", re.IGNORECASE)
LEADING_INT_RX = re.compile(r"^\s*(\d+)")


def _optional(value: Any) -> Optional[str]:
    return ensure_string(value) or None


# ---------------------------------------------------------------------------
# Armor class
# ---------------------------------------------------------------------------

def _armor_class_from_string(text: str) -> List[ArmorClassEntry]:
    match = AC_RX.match(text)
    if not match:
        return [ArmorClassEntry(value=0, notes=text)]
    return [
        ArmorClassEntry(
            value=int(match.group(1)),
            type=_optional(match.group(2)),
            notes=_optional(match.group(3)),
        )
    ]


def _armor_class_entry(entry: Any) -> Optional[ArmorClassEntry]:
    if isinstance(entry, str):
        text = entry.strip()
        return _armor_class_from_string(text)[0] if text else None
    number = ensure_int(entry)
    if number is not None:
        return ArmorClassEntry(value=number)
    obj = ensure_object(entry)
    raw_value = first_present(obj.get("value"), obj.get("ac"), obj.get("modifier"), obj.get("bonus"), obj.get("score"))
    value = ensure_int(raw_value)
    if value is None and isinstance(raw_value, str):
        match = LEADING_INT_RX.match(raw_value)
        value = int(match.group(1)) if match else None
    type_ = ensure_string(first_present(obj.get("type"), obj.get("name"), obj.get("skill"), obj.get("title")))
    notes = ensure_string(obj.get("notes"))
    if value is None and not type_ and not notes:
        return None
    return ArmorClassEntry(value=value or 0, type=type_ or None, notes=notes or None)


def normalize_armor_class(value: Any) -> Optional[ArmorClass]:
    """Number passes through; strings/objects/lists become annotated entries."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return ensure_int(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        return _armor_class_from_string(text)
    entries = ensure_array(value, _armor_class_entry)
    return entries or None


def armor_class_display(value: Optional[ArmorClass]) -> str:
    if value is None:
        return ""
    if isinstance(value, int):
        return str(value)
    parts = []
    for entry in value:
        text = str(entry.value)
        if entry.type:
            text += f" ({entry.type})"
        parts.append(text)
    return ", ".join(parts)


# ---------------------------------------------------------------------------
# Hit points
# ---------------------------------------------------------------------------

def _hit_points_from_string(text: str) -> HitPoints:
    match = HP_WITH_FORMULA_RX.match(text)
    if match:
        return HitPoints(average=int(match.group(1)), formula=_optional(match.group(2)))
    if DICE_RX.match(text):
        return HitPoints(formula=text)
    match = LEADING_INT_RX.match(text)
    if match:
        average = int(match.group(1))
        if text == match.group(1):
            return HitPoints(average=average)
        return HitPoints(average=average, formula=text)
    return HitPoints(notes=text)


def _parse_hit_points(value: Any) -> Optional[HitPoints]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        number = ensure_int(value)
        return HitPoints(average=number) if number is not None else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        return _hit_points_from_string(text)
    obj = ensure_object(value)
    if not obj:
        return None
    average = ensure_int(obj.get("average"))
    formula = ensure_string(first_present(obj.get("formula"), obj.get("dice")))
    notes = ensure_string(obj.get("notes"))
    if average is None and not formula and not notes:
        return None
    return HitPoints(average=average, formula=formula or None, notes=notes or None)


def normalize_hit_points(value: Any, fallback_formula: str = "") -> Optional[HitPoints]:
    """Resolve hit points from any source shape.

    ``fallback_formula`` fills the formula whenever the value did not supply
    one, whatever its shape, so a stored ``{"notes": ...}`` object resolves the
    same as the string it came from.
    """
    parsed = _parse_hit_points(value)
    fallback = ensure_string(fallback_formula)
    if not fallback:
        return parsed
    if parsed is None:
        return _hit_points_from_string(fallback)
    if parsed.formula:
        return parsed
    return HitPoints(average=parsed.average, formula=fallback, notes=parsed.notes)


def hit_points_display(value: Optional[HitPoints]) -> str:
    if value is None:
        return ""
    if value.average is not None:
        return f"{value.average} ({value.formula})" if value.formula else str(value.average)
    return value.formula or value.notes or ""


# ---------------------------------------------------------------------------
# Feature / scored lists
# ---------------------------------------------------------------------------

def _feature_from_text(text: str, model=Feature):
    text = ensure_string(text)
    if not text:
        return None
    limit = get_settings().FEATURE_NAME_MAX
    return model(name=text[:limit] or "Feature", description=text)


def normalize_feature_list(value: Any) -> List[Feature]:
    def _one(entry: Any) -> Optional[Feature]:
        if isinstance(entry, str):
            return _feature_from_text(entry)
        obj = ensure_object(entry)
        name = ensure_string(first_present(obj.get("name"), obj.get("title")))
        description = ensure_string(first_present(obj.get("description"), obj.get("text"), obj.get("effect")))
        if not name and not description:
            return None
        return Feature(
            name=name or "Feature",
            description=description or "Details unavailable.",
            uses=_optional(obj.get("uses")),
            recharge=_optional(obj.get("recharge")),
            notes=_optional(obj.get("notes")),
        )

    return ensure_array(value, _one)


def normalize_monster_features(value: Any) -> List[MonsterFeature]:
    def _one(entry: Any) -> Optional[MonsterFeature]:
        if isinstance(entry, str):
            return _feature_from_text(entry, MonsterFeature)
        obj = ensure_object(entry)
        name = ensure_string(first_present(obj.get("name"), obj.get("title")))
        description = ensure_string(first_present(obj.get("description"), obj.get("text"), obj.get("effect")))
        if not name and not description:
            return None
        return MonsterFeature(
            name=name or "Feature",
            description=description or "No description.",
            attack_bonus=_optional(obj.get("attack_bonus")),
            damage=_optional(obj.get("damage")),
            uses=_optional(obj.get("uses")),
            recharge=_optional(obj.get("recharge")),
            cost=ensure_int(obj.get("cost")),
            notes=_optional(obj.get("notes")),
        )

    return ensure_array(value, _one)


def normalize_scored_list(value: Any, default_value: str = "—", require_name: bool = False) -> List[ScoredEntry]:
    """Saving throws / skills; a string entry is both name and value."""

    def _one(entry: Any) -> Optional[ScoredEntry]:
        if isinstance(entry, str):
            text = entry.strip()
            if not text:
                return None
            return ScoredEntry(name=text, value=text)
        obj = ensure_object(entry)
        name = ensure_string(obj.get("name") or obj.get("skill") or obj.get("title"))
        score = ensure_string(first_present(
            obj.get("value"), obj.get("modifier"), obj.get("bonus"), obj.get("score"),
        ))
        if require_name and not name:
            return None
        if not name and not score:
            return None
        return ScoredEntry(name=name or score, value=score or default_value, notes=_optional(obj.get("notes")))

    return ensure_array(value, _one)


def normalize_scored_mapping(value: Any, default_value: str = "—", require_name: bool = False) -> List[ScoredEntry]:
    """Also accept ``{"Dex": "+5", "Wis": "+3"}`` maps."""
    if isinstance(value, dict) and value and not any(k in value for k in ("name", "skill", "title", "value")):
        value = [{"name": k, "value": v} for k, v in value.items()]
    return normalize_scored_list(value, default_value=default_value, require_name=require_name)


def normalize_relationships(value: Any) -> List[Relationship]:
    def _one(entry: Any) -> Optional[Relationship]:
        obj = ensure_object(entry)
        entity = ensure_string(first_present(obj.get("entity"), obj.get("name")))
        relationship = ensure_string(first_present(obj.get("relationship"), obj.get("description"), obj.get("type")))
        if not entity and not relationship:
            return None
        return Relationship(entity=entity, relationship=relationship, notes=_optional(obj.get("notes")))

    return ensure_array(value, _one)


def normalize_class_levels(value: Any) -> List[ClassLevel]:
    def _one(entry: Any) -> Optional[ClassLevel]:
        obj = ensure_object(entry)
        class_name = ensure_string(first_present(obj.get("class"), obj.get("class_name"), obj.get("name")))
        level = ensure_int(obj.get("level"))
        if not class_name and level is None:
            return None
        return ClassLevel(
            class_name=class_name,
            level=level,
            subclass=_optional(first_present(obj.get("subclass"), obj.get("archetype"))),
            notes=_optional(obj.get("notes")),
        )

    return ensure_array(value, _one)


def normalize_spellcasting(value: Any) -> Optional[SpellcastingSummary]:
    obj = ensure_object(value)
    if not obj:
        return None
    return SpellcastingSummary(
        type=_optional(first_present(obj.get("type"), obj.get("tradition"))),
        ability=_optional(first_present(obj.get("ability"), obj.get("spellcasting_ability"))),
        save_dc=ensure_int(obj.get("save_dc")),
        attack_bonus=ensure_int(obj.get("attack_bonus")),
        notes=_optional(first_present(obj.get("notes"), obj.get("text"))),
        spell_slots=ensure_object(obj.get("spell_slots")),
        prepared_spells=ensure_object(obj.get("prepared_spells")),
        innate_spells=ensure_object(obj.get("innate_spells")),
        known_spells=ensure_string_array(obj.get("known_spells")),
    )
