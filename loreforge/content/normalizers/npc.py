"""NPC normalizer: raw character payload -> NpcRecord.

Most stat fields fall back to the nested ``stat_block`` when the top level
does not carry them. Armor class and hit points stay ``None`` when nothing
usable is present (the monster normalizer defaults them to 0 instead).
"""

from typing import Any

from loreforge.content.coercion import (
    ensure_array,
    ensure_int,
    ensure_number,
    ensure_object,
    ensure_string,
    ensure_string_array,
    first_filled,
    first_present,
    merge_draft,
    sub_object,
)
from loreforge.content.field_mapper import (
    collapse_magic_items,
    complete_ability_scores,
    normalize_schema_version,
    resolve_abilities_source,
    resolve_equipment,
    resolve_name,
    resolve_personality,
)
from loreforge.content.normalizers.common import (
    LEADING_INT_RX,
    normalize_armor_class,
    normalize_class_levels,
    normalize_feature_list,
    normalize_hit_points,
    normalize_relationships,
    normalize_scored_mapping,
    normalize_spellcasting,
)
from loreforge.content.schemas import NpcRecord, Personality

WRAPPER_KEYS = ("npc", "character")
ALIAS_KEYS = WRAPPER_KEYS + (
    "draft", "canonical_name", "character_name", "npc_name", "title_or_role", "summary",
    "physical_appearance", "combat_tactics", "ac", "hp", "skills", "spells", "schemaVersion",
    "traits", "Traits", "special_abilities", "features", "gear", "possessions",
    "magical_items", "magicItems", "personality_traits", "character_traits", "ideals", "bonds", "flaws",
)
_CONTENT_LABELS = {"npc", "character", "monster", "creature"}


def _proficiency_bonus(value: Any):
    number = ensure_number(value)
    if number is not None:
        return int(number)
    return ensure_string(value) or None


def _passive_perception(top: Any, stat_block_value: Any):
    value = ensure_int(top)
    if value is not None:
        return value
    match = LEADING_INT_RX.match(ensure_string(stat_block_value))
    return int(match.group(1)) if match else None


def _asi_choice(entry: Any):
    obj = ensure_object(entry)
    if not obj.get("level") and not obj.get("choice"):
        return None
    return obj


def normalize_npc(raw: Any) -> NpcRecord:
    source = sub_object(merge_draft(raw), *WRAPPER_KEYS)
    stat_block = ensure_object(source.get("stat_block"))

    def pick(key: str, *aliases: str) -> Any:
        return first_filled(source.get(key), *(source.get(a) for a in aliases), stat_block.get(key))

    creature_type = ensure_string(first_filled(source.get("creature_type"), stat_block.get("creature_type")))
    if not creature_type:
        fallback_type = ensure_string(source.get("type"))
        creature_type = "" if fallback_type.lower() in _CONTENT_LABELS else fallback_type

    return NpcRecord(
        name=resolve_name(source) or "Unknown NPC",
        title=ensure_string(first_present(source.get("title"), source.get("title_or_role"))),
        aliases=ensure_string_array(source.get("aliases")),
        role=ensure_string(source.get("role")),
        description=ensure_string(first_present(source.get("description"), source.get("summary"))),
        appearance=ensure_string(first_present(source.get("appearance"), source.get("physical_appearance"))),
        background=ensure_string(source.get("background")),
        race=ensure_string(source.get("race")),
        size=ensure_string(pick("size")),
        creature_type=creature_type,
        subtype=ensure_string(pick("subtype")),
        alignment=ensure_string(pick("alignment")),
        affiliation=ensure_string(source.get("affiliation")),
        location=ensure_string(source.get("location")),
        era=ensure_string(source.get("era")),
        challenge_rating=ensure_string(pick("challenge_rating")),
        experience_points=ensure_int(pick("experience_points")),
        hooks=ensure_string_array(source.get("hooks")),
        motivations=ensure_string_array(source.get("motivations")),
        tactics=ensure_string(first_present(source.get("tactics"), source.get("combat_tactics"))),
        class_levels=normalize_class_levels(source.get("class_levels")),
        ability_scores=complete_ability_scores(pick("ability_scores")),
        armor_class=normalize_armor_class(pick("armor_class", "ac")),
        hit_points=normalize_hit_points(
            pick("hit_points", "hp"),
            ensure_string(stat_block.get("hit_points_formula")),
        ),
        hit_dice=ensure_string(pick("hit_dice")),
        proficiency_bonus=_proficiency_bonus(pick("proficiency_bonus")),
        speed=_speed(pick("speed")),
        saving_throws=normalize_scored_mapping(pick("saving_throws")),
        skill_proficiencies=normalize_scored_mapping(
            first_filled(source.get("skill_proficiencies"), source.get("skills"), stat_block.get("skills"))
        ),
        senses=ensure_string_array(pick("senses")),
        passive_perception=_passive_perception(source.get("passive_perception"), stat_block.get("passive_perception")),
        languages=ensure_string_array(pick("languages")),
        damage_resistances=ensure_string_array(pick("damage_resistances")),
        damage_immunities=ensure_string_array(pick("damage_immunities")),
        damage_vulnerabilities=ensure_string_array(pick("damage_vulnerabilities")),
        condition_immunities=ensure_string_array(pick("condition_immunities")),
        class_features=normalize_feature_list(source.get("class_features")),
        subclass_features=normalize_feature_list(source.get("subclass_features")),
        racial_features=normalize_feature_list(source.get("racial_features")),
        feats=normalize_feature_list(source.get("feats")),
        asi_choices=ensure_array(source.get("asi_choices"), _asi_choice),
        background_feature=ensure_object(source.get("background_feature")) or None,
        abilities=normalize_feature_list(first_filled(resolve_abilities_source(source), stat_block.get("abilities"))),
        additional_traits=normalize_feature_list(source.get("additional_traits")),
        equipment=resolve_equipment(source),
        magic_items=collapse_magic_items(source),
        relationships=normalize_relationships(source.get("relationships")),
        allies=ensure_string_array(source.get("allies")),
        foes=ensure_string_array(source.get("foes")),
        personality=Personality(**resolve_personality(source)),
        spellcasting=normalize_spellcasting(first_present(source.get("spellcasting"), source.get("spells"))),
        actions=normalize_feature_list(pick("actions")),
        bonus_actions=normalize_feature_list(pick("bonus_actions")),
        reactions=normalize_feature_list(pick("reactions")),
        legendary_actions=ensure_object(pick("legendary_actions")),
        mythic_actions=ensure_object(pick("mythic_actions")),
        lair_actions=ensure_string_array(pick("lair_actions")),
        regional_effects=ensure_string_array(pick("regional_effects")),
        notes=ensure_string_array(source.get("notes")),
        sources=ensure_string_array(source.get("sources")),
        sources_used=ensure_string_array(source.get("sources_used")),
        assumptions=ensure_string_array(source.get("assumptions")),
        proposals=ensure_array(source.get("proposals")),
        schema_version=normalize_schema_version(first_present(source.get("schema_version"), source.get("schemaVersion"))),
        stat_block=stat_block,
    )


def _speed(value: Any):
    if isinstance(value, str) and value.strip():
        return {"walk": value.strip()}
    return ensure_object(value)
