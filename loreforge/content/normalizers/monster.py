"""Monster normalizer: raw creature payload -> MonsterRecord.

Unlike the NPC path, missing or unusable armor class and hit points default
to ``0`` / ``{"average": 0}``, and experience points, proficiency bonus and
passive Perception always carry a number.
"""

from typing import Any

from loreforge.content.coercion import (
    ensure_int,
    ensure_object,
    ensure_string,
    ensure_string_array,
    first_filled,
    first_present,
    merge_draft,
    sub_object,
)
from loreforge.content.field_mapper import complete_ability_scores
from loreforge.content.normalizers.common import (
    normalize_armor_class,
    normalize_hit_points,
    normalize_monster_features,
    normalize_scored_mapping,
)
from loreforge.content.schemas import ActionBlock, HitPoints, MonsterRecord

WRAPPER_KEYS = ("monster",)
ALIAS_KEYS = WRAPPER_KEYS + (
    "draft", "type", "cr", "ac", "hp", "skills", "traits", "habitat", "sources_used", "xp",
)


def _action_block(value: Any) -> ActionBlock:
    if isinstance(value, list):
        return ActionBlock(options=normalize_monster_features(value))
    obj = ensure_object(value)
    return ActionBlock(
        summary=ensure_string(first_present(obj.get("summary"), obj.get("description"))),
        options=normalize_monster_features(first_present(obj.get("options"), obj.get("actions"))),
    )


def _hit_points(value: Any) -> HitPoints:
    parsed = normalize_hit_points(value)
    if parsed is None:
        return HitPoints(average=0)
    if parsed.average is None and not parsed.formula:
        return HitPoints(average=0, notes=parsed.notes)
    return parsed


def _speed(value: Any):
    if isinstance(value, str) and value.strip():
        return {"walk": value.strip()}
    return ensure_object(value)


def normalize_monster(raw: Any) -> MonsterRecord:
    source = merge_draft(raw)
    monster = sub_object(source, *WRAPPER_KEYS)

    armor_class = normalize_armor_class(first_filled(monster.get("armor_class"), monster.get("ac")))
    experience = ensure_int(first_filled(monster.get("experience_points"), monster.get("xp")))
    proficiency = ensure_int(monster.get("proficiency_bonus"))
    passive = ensure_int(monster.get("passive_perception"))

    return MonsterRecord(
        name=ensure_string(monster.get("name")) or ensure_string(source.get("title")) or "Unnamed Monster",
        description=ensure_string(monster.get("description")),
        size=ensure_string(monster.get("size")),
        creature_type=ensure_string(first_filled(monster.get("creature_type"), monster.get("type"))),
        subtype=ensure_string(monster.get("subtype")),
        alignment=ensure_string(monster.get("alignment")),
        challenge_rating=ensure_string(first_filled(monster.get("challenge_rating"), monster.get("cr"))),
        experience_points=experience if experience is not None else 0,
        proficiency_bonus=proficiency if proficiency is not None else 2,
        ability_scores=complete_ability_scores(monster.get("ability_scores")),
        armor_class=armor_class if armor_class is not None else 0,
        hit_points=_hit_points(first_filled(monster.get("hit_points"), monster.get("hp"))),
        hit_dice=ensure_string(monster.get("hit_dice")),
        speed=_speed(monster.get("speed")),
        saving_throws=normalize_scored_mapping(monster.get("saving_throws"), default_value="+0", require_name=True),
        skill_proficiencies=normalize_scored_mapping(
            first_filled(monster.get("skill_proficiencies"), monster.get("skills")),
            default_value="+0",
            require_name=True,
        ),
        damage_vulnerabilities=ensure_string_array(monster.get("damage_vulnerabilities")),
        damage_resistances=ensure_string_array(monster.get("damage_resistances")),
        damage_immunities=ensure_string_array(monster.get("damage_immunities")),
        condition_immunities=ensure_string_array(monster.get("condition_immunities")),
        senses=ensure_string_array(monster.get("senses")),
        passive_perception=passive if passive is not None else 0,
        languages=ensure_string_array(monster.get("languages")),
        abilities=normalize_monster_features(first_filled(monster.get("abilities"), monster.get("traits"))),
        actions=normalize_monster_features(monster.get("actions")),
        bonus_actions=normalize_monster_features(monster.get("bonus_actions")),
        reactions=normalize_monster_features(monster.get("reactions")),
        multiattack=ensure_string(monster.get("multiattack")),
        spellcasting=ensure_object(monster.get("spellcasting")),
        legendary_actions=_action_block(monster.get("legendary_actions")),
        mythic_actions=_action_block(monster.get("mythic_actions")),
        lair_actions=ensure_string_array(monster.get("lair_actions")),
        regional_effects=ensure_string_array(monster.get("regional_effects")),
        location=ensure_string(first_filled(monster.get("location"), monster.get("habitat"))),
        ecology=ensure_string(monster.get("ecology")),
        lore=ensure_string(monster.get("lore")),
        tactics=ensure_string(monster.get("tactics")),
        notes=ensure_string_array(monster.get("notes")),
        sources=ensure_string_array(first_filled(monster.get("sources"), monster.get("sources_used"))),
    )
