"""JSON Schemas shipped with the package.

These seed ``BundledSchemaRegistry`` when no external registry is configured
and back ``map_and_validate_npc`` when the caller does not supply a validator.
They check the storage shape (``to_storage_shape`` / ``to_payload`` output),
not the raw generator payload, except for the NPC schemas which also accept
the field-mapped raw form.
"""

from typing import Any, Dict

DRAFT = "https://json-schema.org/draft/2020-12/schema"

_STRING = {"type": "string"}
_STRING_LIST = {"type": "array", "items": {"type": "string"}}
_INTEGER = {"type": "integer"}

ABILITY_SCORES = {
    "type": "object",
    "properties": {key: {"type": "integer", "minimum": 0, "maximum": 30} for key in ("str", "dex", "con", "int", "wis", "cha")},
    "required": ["str", "dex", "con", "int", "wis", "cha"],
    "additionalProperties": False,
}

ARMOR_CLASS = {
    "oneOf": [
        {"type": "integer"},
        {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {"value": _INTEGER, "type": _STRING, "notes": _STRING},
                "required": ["value"],
            },
        },
    ],
}

HIT_POINTS = {
    "oneOf": [
        {"type": "integer"},
        {
            "type": "object",
            "properties": {"average": _INTEGER, "formula": _STRING, "notes": _STRING},
            "additionalProperties": False,
        },
    ],
}

FEATURE = {
    "type": "object",
    "properties": {
        "name": _STRING,
        "description": _STRING,
        "uses": _STRING,
        "recharge": _STRING,
        "notes": _STRING,
        "attack_bonus": _STRING,
        "damage": _STRING,
        "cost": _INTEGER,
    },
    "required": ["name", "description"],
}
FEATURE_LIST = {"type": "array", "items": FEATURE}

SCORED_ENTRY_LIST = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {"name": _STRING, "value": _STRING, "notes": _STRING},
        "required": ["name", "value"],
    },
}

CLASS_LEVELS = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {"class": _STRING, "level": _INTEGER, "subclass": _STRING, "notes": _STRING},
    },
}

PERSONALITY = {
    "type": "object",
    "properties": {slot: _STRING_LIST for slot in ("traits", "ideals", "bonds", "flaws")},
}

_NPC_PROPERTIES: Dict[str, Any] = {
    "name": {"type": "string", "minLength": 1},
    "title": _STRING,
    "description": _STRING,
    "race": _STRING,
    "alignment": _STRING,
    "challenge_rating": {"type": ["string", "number"]},
    "ability_scores": ABILITY_SCORES,
    "armor_class": ARMOR_CLASS,
    "hit_points": HIT_POINTS,
    "proficiency_bonus": {"type": ["integer", "string"]},
    "class_levels": CLASS_LEVELS,
    "saving_throws": SCORED_ENTRY_LIST,
    "skill_proficiencies": SCORED_ENTRY_LIST,
    "personality": PERSONALITY,
    "motivations": _STRING_LIST,
    "hooks": _STRING_LIST,
    "equipment": _STRING_LIST,
    "magic_items": _STRING_LIST,
    "abilities": FEATURE_LIST,
    "actions": FEATURE_LIST,
    "bonus_actions": FEATURE_LIST,
    "reactions": FEATURE_LIST,
    "sources_used": _STRING_LIST,
    "assumptions": _STRING_LIST,
    "schema_version": {"type": "string", "enum": ["1.0", "1.1"]},
}

NPC_SCHEMA_V1_0 = {
    "$schema": DRAFT,
    "$id": "loreforge/npc/v1.0",
    "title": "NPC",
    "type": "object",
    "properties": _NPC_PROPERTIES,
    "required": ["name"],
}

NPC_SCHEMA_V1_1 = {
    "$schema": DRAFT,
    "$id": "loreforge/npc/v1.1",
    "title": "NPC",
    "type": "object",
    "properties": {
        **_NPC_PROPERTIES,
        "schema_version": {"const": "1.1"},
        "experience_points": {"type": "integer", "minimum": 0},
        "passive_perception": _INTEGER,
    },
    "required": ["name", "schema_version", "ability_scores"],
}

MONSTER_SCHEMA = {
    "$schema": DRAFT,
    "$id": "loreforge/monster/v1.0",
    "title": "Monster",
    "type": "object",
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "size": _STRING,
        "creature_type": _STRING,
        "alignment": _STRING,
        "challenge_rating": _STRING,
        "experience_points": {"type": "integer", "minimum": 0},
        "proficiency_bonus": _INTEGER,
        "ability_scores": ABILITY_SCORES,
        "armor_class": ARMOR_CLASS,
        "hit_points": HIT_POINTS,
        "speed": {"type": "object"},
        "saving_throws": SCORED_ENTRY_LIST,
        "skill_proficiencies": SCORED_ENTRY_LIST,
        "passive_perception": _INTEGER,
        "abilities": FEATURE_LIST,
        "actions": FEATURE_LIST,
        "bonus_actions": FEATURE_LIST,
        "reactions": FEATURE_LIST,
        "legendary_actions": {
            "type": "object",
            "properties": {"summary": _STRING, "options": FEATURE_LIST},
        },
        "mythic_actions": {
            "type": "object",
            "properties": {"summary": _STRING, "options": FEATURE_LIST},
        },
    },
    "required": ["name", "ability_scores", "armor_class", "hit_points"],
}

ITEM_SCHEMA = {
    "$schema": DRAFT,
    "$id": "loreforge/item/v1.0",
    "title": "Item",
    "type": "object",
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "item_type": _STRING,
        "rarity": _STRING,
        "attunement": {
            "type": "object",
            "properties": {"required": {"type": "boolean"}, "restrictions": _STRING},
            "required": ["required"],
        },
        "properties_v2": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {"name": _STRING, "description": _STRING, "save_dc": _INTEGER},
                "required": ["name", "description"],
            },
        },
        "charges": {
            "type": "object",
            "properties": {"maximum": {"type": "integer", "minimum": 0}, "recharge": _STRING, "on_last_charge": _STRING},
        },
        "spells": {
            "type": "array",
            "items": {"type": "object", "properties": {"name": _STRING, "level": _INTEGER}, "required": ["name"]},
        },
        "curse": {"type": "object", "properties": {"is_cursed": {"type": "boolean"}, "hidden": {"type": "boolean"}}},
        "sentience": {"type": "object", "properties": {"is_sentient": {"type": "boolean"}}},
        "properties": _STRING_LIST,
        "campaign_hooks": _STRING_LIST,
    },
    "required": ["name"],
}

LOCATION_SCHEMA = {
    "$schema": DRAFT,
    "$id": "loreforge/location/v1.0",
    "title": "Location",
    "type": "object",
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "region": _STRING,
        "description": _STRING,
        "history": _STRING,
        "key_features": _STRING_LIST,
        "inhabitants": _STRING_LIST,
        "hooks": _STRING_LIST,
    },
    "required": ["name"],
}

STORY_ARC_SCHEMA = {
    "$schema": DRAFT,
    "$id": "loreforge/story-arc/v1.0",
    "title": "Story Arc",
    "type": "object",
    "properties": {
        "title": {"type": "string", "minLength": 1},
        "synopsis": _STRING,
        "acts": {
            "type": "array",
            "items": {"type": "object", "properties": {"name": _STRING, "key_events": _STRING_LIST}, "required": ["name"]},
        },
        "beats": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {"name": _STRING, "required": {"type": "boolean"}},
                "required": ["name"],
            },
        },
        "characters": {
            "type": "array",
            "items": {"type": "object", "properties": {"name": _STRING, "motivation": {"type": "object"}}, "required": ["name"]},
        },
        "branching_paths": {
            "type": "array",
            "items": {"type": "object", "properties": {"decision_point": _STRING, "options": {"type": "array"}}, "required": ["decision_point"]},
        },
        "known_barriers": _STRING_LIST,
        "unknown_barriers": _STRING_LIST,
        "dm_notes": _STRING_LIST,
    },
    "required": ["title"],
}

ENCOUNTER_SCHEMA = {
    "$schema": DRAFT,
    "$id": "loreforge/encounter/v1.0",
    "title": "Encounter",
    "type": "object",
    "properties": {
        "title": {"type": "string", "minLength": 1},
        "difficulty_tier": _STRING,
        "party_level": {"type": "integer", "minimum": 1},
        "party_size": {"type": "integer", "minimum": 1},
        "xp_budget": {"type": "integer", "minimum": 0},
        "monsters": {
            "type": "array",
            "items": {"type": "object", "properties": {"name": _STRING, "count": {"type": "integer", "minimum": 0}}, "required": ["name"]},
        },
        "terrain": {"type": "object", "properties": {"description": _STRING, "features": {"type": "array"}}},
        "tactics": {"type": "object"},
        "event_clock": {"type": "object", "properties": {"summary": _STRING, "phases": {"type": "array"}}},
        "treasure": {"type": "object", "properties": {"currency": {"type": "object"}, "items": {"type": "array"}}},
        "objectives": _STRING_LIST,
        "phases": _STRING_LIST,
        "loot": _STRING_LIST,
    },
    "required": ["title"],
}

WRITING_SCHEMA = {
    "$schema": DRAFT,
    "$id": "loreforge/writing/v1.0",
    "title": "Writing",
    "type": "object",
    "properties": {
        "title": {"type": "string", "minLength": 1},
        "summary": _STRING,
        "outline": _STRING_LIST,
        "table_of_contents": _STRING_LIST,
        "text": _STRING,
    },
    "required": ["title"],
}

NONFICTION_SCHEMA = {
    "$schema": DRAFT,
    "$id": "loreforge/nonfiction/v1.0",
    "title": "Non-Fiction",
    "type": "object",
    "properties": {
        "title": {"type": "string", "minLength": 1},
        "medium": _STRING,
        "keywords": _STRING_LIST,
        "outline": _STRING_LIST,
        "formatted_manuscript": _STRING,
        "chapters": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {"title": _STRING, "summary": _STRING, "key_points": _STRING_LIST, "draft_text": _STRING},
            },
        },
    },
    "required": ["title"],
}

GENERIC_SCHEMA = {
    "$schema": DRAFT,
    "$id": "loreforge/generic/v1.0",
    "title": "Generic",
    "type": "object",
}

# domain -> (version, schema); the active entry per domain
BUNDLED_SCHEMAS: Dict[str, Any] = {
    "npc": ("1.0", NPC_SCHEMA_V1_0),
    "monster": ("1.0", MONSTER_SCHEMA),
    "item": ("1.0", ITEM_SCHEMA),
    "location": ("1.0", LOCATION_SCHEMA),
    "story-arc": ("1.0", STORY_ARC_SCHEMA),
    "encounter": ("1.0", ENCOUNTER_SCHEMA),
    "writing": ("1.0", WRITING_SCHEMA),
    "nonfiction": ("1.0", NONFICTION_SCHEMA),
    "generic": ("1.0", GENERIC_SCHEMA),
}

NPC_SCHEMAS_BY_VERSION = {
    "1.0": NPC_SCHEMA_V1_0,
    "1.1": NPC_SCHEMA_V1_1,
}
