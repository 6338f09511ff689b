"""Encounter normalizer.

``tactics`` and ``scaling`` may be a plain string in older payloads; the
string lands in ``opening_moves`` / ``easier``. Legacy ``environment`` and
``phases`` are derived from the terrain and the event clock.
"""

from typing import Any, Optional

from loreforge.content.coercion import (
    ensure_array,
    ensure_int,
    ensure_object,
    ensure_string,
    ensure_string_array,
    first_filled,
    merge_draft,
    sub_object,
)
from loreforge.content.schemas import (
    Consequences,
    Currency,
    EncounterEnemy,
    EncounterHazard,
    EncounterMonster,
    EncounterNpc,
    EncounterRecord,
    EncounterTactics,
    EncounterTrap,
    EventClock,
    EventClockPhase,
    Scaling,
    Terrain,
    TerrainFeature,
    Treasure,
    TreasureItem,
)

WRAPPER_KEYS = ("encounter", "encounter_details")
ALIAS_KEYS = WRAPPER_KEYS + ("draft", "difficulty", "NPCs")


def _optional(value: Any) -> Optional[str]:
    return ensure_string(value) or None


def _int_or(value: Any, default: int) -> int:
    number = ensure_int(value)
    return default if number is None else number


def _tactics(value: Any) -> EncounterTactics:
    obj = ensure_object(value)
    tactics = EncounterTactics(**{key: ensure_string(obj.get(key)) for key in EncounterTactics.model_fields})
    if isinstance(value, str) and value.strip() and not tactics.opening_moves:
        tactics.opening_moves = value.strip()
    return tactics


def _scaling(value: Any) -> Scaling:
    obj = ensure_object(value)
    scaling = Scaling(**{key: ensure_string(obj.get(key)) for key in Scaling.model_fields})
    if isinstance(value, str) and value.strip() and not scaling.easier:
        scaling.easier = value.strip()
    return scaling


def _terrain_feature(entry: Any) -> Optional[TerrainFeature]:
    obj = ensure_object(entry)
    name = ensure_string(obj.get("name"))
    effect = ensure_string(obj.get("effect"))
    if not name and not effect:
        return None
    return TerrainFeature(
        name=name,
        effect=effect,
        dc=ensure_int(obj.get("dc")),
        cover=_optional(obj.get("cover")),
        movement_cost=_optional(obj.get("movement_cost")),
    )


def _terrain(value: Any, environment: Any) -> Terrain:
    if isinstance(value, str):
        value = {"description": value}
    obj = ensure_object(value)
    return Terrain(
        description=ensure_string(first_filled(obj.get("description"), environment)),
        features=ensure_array(obj.get("features"), _terrain_feature),
        lighting=ensure_string(obj.get("lighting")),
        elevation=ensure_string(obj.get("elevation")),
        weather=ensure_string(obj.get("weather")),
        map_dimensions=ensure_string(obj.get("map_dimensions")),
    )


def _phase(entry: Any) -> Optional[EventClockPhase]:
    obj = ensure_object(entry)
    name = ensure_string(obj.get("name"))
    trigger = ensure_string(obj.get("trigger"))
    outcome = ensure_string(obj.get("outcome"))
    if not name and not trigger and not outcome:
        return None
    return EventClockPhase(name=name, trigger=trigger, outcome=outcome, round=ensure_int(obj.get("round")))


def _treasure(value: Any) -> Treasure:
    obj = ensure_object(value)
    currency = ensure_object(obj.get("currency"))

    def _item(entry: Any) -> Optional[TreasureItem]:
        if isinstance(entry, str):
            return TreasureItem(name=entry.strip()) if entry.strip() else None
        item = ensure_object(entry)
        name = ensure_string(item.get("name"))
        if not name:
            return None
        return TreasureItem(
            name=name,
            rarity=_optional(item.get("rarity")),
            description=_optional(item.get("description")),
            value=_optional(item.get("value")),
        )

    return Treasure(
        currency=Currency(**{coin: _int_or(currency.get(coin), 0) for coin in Currency.model_fields}),
        items=ensure_array(obj.get("items"), _item),
        boons=ensure_string_array(obj.get("boons")),
    )


def _consequences(value: Any) -> Consequences:
    obj = ensure_object(value)
    return Consequences(
        success=ensure_string(obj.get("success")),
        failure=ensure_string(obj.get("failure")),
        partial=ensure_string(obj.get("partial")),
        story_hooks=ensure_string_array(obj.get("story_hooks")),
    )


def _monster(entry: Any) -> Optional[EncounterMonster]:
    obj = ensure_object(entry)
    name = ensure_string(obj.get("name"))
    if not name:
        return None
    return EncounterMonster(
        name=name,
        count=_int_or(obj.get("count"), 1),
        cr=ensure_string(obj.get("cr")),
        xp=_int_or(obj.get("xp"), 0),
        ac=_int_or(obj.get("ac"), 0),
        hp=_int_or(obj.get("hp"), 0),
        speed=ensure_string(obj.get("speed")),
        role=ensure_string(obj.get("role")),
        positioning=ensure_string(obj.get("positioning")),
        key_abilities=ensure_string_array(obj.get("key_abilities")),
        source=ensure_string(obj.get("source")),
        notes=ensure_string(obj.get("notes")),
    )


def _npc(entry: Any) -> Optional[EncounterNpc]:
    obj = ensure_object(entry)
    name = ensure_string(obj.get("name"))
    if not name:
        return None
    return EncounterNpc(
        name=name,
        role=ensure_string(obj.get("role")),
        affiliation=ensure_string(obj.get("affiliation")),
        motivation=ensure_string(obj.get("motivation")),
        stat_reference=ensure_string(first_filled(obj.get("stat_reference"), obj.get("stat_block"))),
        notes=ensure_string(obj.get("notes")),
    )


def _hazard(entry: Any) -> Optional[EncounterHazard]:
    obj = ensure_object(entry)
    name = ensure_string(obj.get("name"))
    if not name:
        return None
    return EncounterHazard(
        name=name,
        description=ensure_string(obj.get("description")),
        impact=ensure_string(obj.get("impact")),
        dc=ensure_int(obj.get("dc")),
        damage=_optional(obj.get("damage")),
        trigger=_optional(obj.get("trigger")),
        mitigation=_optional(obj.get("mitigation")),
    )


def _trap(entry: Any) -> Optional[EncounterTrap]:
    obj = ensure_object(entry)
    name = ensure_string(obj.get("name"))
    if not name:
        return None
    return EncounterTrap(
        name=name,
        trigger=ensure_string(obj.get("trigger")),
        effect=ensure_string(obj.get("effect")),
        dc=_int_or(obj.get("dc"), 0),
        damage=_optional(obj.get("damage")),
        disarm=_optional(obj.get("disarm")),
        detection_dc=ensure_int(obj.get("detection_dc")),
    )


def _enemy(entry: Any) -> EncounterEnemy:
    obj = ensure_object(entry)
    name = ensure_string(first_filled(obj.get("name"), obj.get("creature_type"), obj.get("title")))
    return EncounterEnemy(
        name=name or "Unnamed enemy",
        role=ensure_string(obj.get("role")),
        tactics=ensure_string(obj.get("tactics")),
        quantity=_int_or(first_filled(obj.get("quantity"), obj.get("count")), 1),
        stat_block=ensure_object(obj.get("stat_block")),
    )


def _loot(entry: Any) -> Optional[str]:
    if isinstance(entry, str):
        return entry.strip() or None
    obj = ensure_object(entry)
    parts = [ensure_string(first_filled(obj.get("name"), obj.get("item"))), ensure_string(obj.get("description"))]
    return " - ".join(part for part in parts if part) or None


def normalize_encounter(raw: Any) -> EncounterRecord:
    source = merge_draft(raw)
    encounter = sub_object(source, *WRAPPER_KEYS)

    def pick(key: str) -> Any:
        return first_filled(encounter.get(key), source.get(key))

    terrain = _terrain(pick("terrain"), pick("environment"))
    event_clock_raw = ensure_object(pick("event_clock"))
    event_clock = EventClock(
        summary=ensure_string(event_clock_raw.get("summary")),
        phases=ensure_array(event_clock_raw.get("phases"), _phase),
    )

    return EncounterRecord(
        title=ensure_string(pick("title")) or "Untitled Encounter",
        description=ensure_string(pick("description")),
        encounter_type=ensure_string(encounter.get("encounter_type")),
        difficulty_tier=ensure_string(first_filled(encounter.get("difficulty_tier"), encounter.get("difficulty"))),
        party_level=ensure_int(encounter.get("party_level")),
        party_size=ensure_int(encounter.get("party_size")),
        xp_budget=ensure_int(encounter.get("xp_budget")),
        adjusted_xp=ensure_int(encounter.get("adjusted_xp")),
        expected_duration_rounds=ensure_int(encounter.get("expected_duration_rounds")),
        location=ensure_string(pick("location")),
        setting_context=ensure_string(encounter.get("setting_context")),
        objectives=ensure_string_array(pick("objectives")),
        failure_conditions=ensure_string_array(encounter.get("failure_conditions")),
        monsters=ensure_array(encounter.get("monsters"), _monster),
        npcs=ensure_array(first_filled(encounter.get("npcs"), encounter.get("NPCs")), _npc),
        terrain=terrain,
        hazards=ensure_array(encounter.get("hazards"), _hazard),
        traps=ensure_array(encounter.get("traps"), _trap),
        tactics=_tactics(pick("tactics")),
        event_clock=event_clock,
        treasure=_treasure(pick("treasure")),
        consequences=_consequences(pick("consequences")),
        scaling=_scaling(pick("scaling")),
        notes=ensure_string_array(pick("notes")),
        hooks=ensure_string_array(source.get("hooks")),
        environment=terrain.description,
        enemies=ensure_array(encounter.get("enemies"), _enemy),
        loot=ensure_array(pick("loot"), _loot),
        stat_blocks=ensure_array(source.get("stat_blocks"), lambda block: ensure_object(block) or None),
        phases=[f"{phase.name}: {phase.trigger} → {phase.outcome}" for phase in event_clock.phases],
    )
