import pytest

from loreforge.content.normalizers.common import (
    armor_class_display,
    hit_points_display,
    normalize_armor_class,
    normalize_feature_list,
    normalize_hit_points,
    normalize_scored_mapping,
)
from loreforge.content.normalizers.dispatch import normalize
from loreforge.content.normalizers.encounter import normalize_encounter
from loreforge.content.normalizers.item import normalize_item
from loreforge.content.normalizers.monster import normalize_monster
from loreforge.content.normalizers.npc import normalize_npc
from loreforge.content.normalizers.story_arc import normalize_story_arc
from loreforge.content.normalizers.writing import normalize_nonfiction, normalize_writing
from loreforge.content.schemas import ArmorClassEntry, DomainTag, HitPoints


def test_armor_class_number_passes_through():
    assert normalize_armor_class(15) == 15
    assert normalize_armor_class(15.0) == 15


def test_armor_class_annotated_string():
    assert normalize_armor_class("15 (natural armor)") == [ArmorClassEntry(value=15, type="natural armor")]


def test_armor_class_unparseable_string_keeps_text_as_notes():
    assert normalize_armor_class("weird") == [ArmorClassEntry(value=0, notes="weird")]


def test_armor_class_object_list():
    result = normalize_armor_class([{"value": "17", "type": "plate"}, {"ac": 19, "name": "with shield"}, {}])
    assert result == [ArmorClassEntry(value=17, type="plate"), ArmorClassEntry(value=19, type="with shield")]
    assert armor_class_display(result) == "17 (plate), 19 (with shield)"


def test_armor_class_empty_values():
    assert normalize_armor_class(None) is None
    assert normalize_armor_class("  ") is None
    assert normalize_armor_class(True) is None
    assert normalize_armor_class([]) is None


@pytest.mark.parametrize(
    "raw, expected",
    [
        (45, HitPoints(average=45)),
        ("138 (12d12+60)", HitPoints(average=138, formula="12d12+60")),
        ("4d8+4", HitPoints(formula="4d8+4")),
        ("27", HitPoints(average=27)),
        ("about twenty", HitPoints(notes="about twenty")),
        ({"average": "52", "dice": "8d10+8"}, HitPoints(average=52, formula="8d10+8")),
    ],
)
def test_hit_points_shapes(raw, expected):
    assert normalize_hit_points(raw) == expected


def test_hit_points_empty_object_uses_fallback_formula():
    assert normalize_hit_points({}, "3d6") == HitPoints(formula="3d6")
    assert normalize_hit_points({}) is None


def test_hit_points_fallback_formula_fills_any_shape():
    expected = HitPoints(formula="2d8", notes="weird")
    assert normalize_hit_points("weird", "2d8") == expected
    assert normalize_hit_points({"notes": "weird"}, "2d8") == expected
    assert normalize_hit_points("27", "5d8+5") == HitPoints(average=27, formula="5d8+5")
    assert normalize_hit_points("27 (6d8)", "5d8+5") == HitPoints(average=27, formula="6d8")


def test_hit_points_display():
    assert hit_points_display(HitPoints(average=138, formula="12d12+60")) == "138 (12d12+60)"
    assert hit_points_display(HitPoints(formula="2d6")) == "2d6"
    assert hit_points_display(None) == ""


def test_feature_list_mixed_entries():
    features = normalize_feature_list([
        "Keen Smell. Advantage on scent checks.",
        {"title": "Pack Tactics", "text": "Advantage when an ally is near."},
        {"name": "Rage"},
        {},
        "   ",
    ])
    assert [f.name for f in features] == ["Keen Smell. Advantage on scent checks.", "Pack Tactics", "Rage"]
    assert features[1].description == "Advantage when an ally is near."
    assert features[2].description == "Details unavailable."


def test_feature_from_long_text_truncates_name():
    text = "x" * 120
    feature = normalize_feature_list([text])[0]
    assert len(feature.name) == 80
    assert feature.description == text


def test_scored_mapping_accepts_plain_map():
    entries = normalize_scored_mapping({"Dex": "+5", "Wis": "+3"})
    assert [(e.name, e.value) for e in entries] == [("Dex", "+5"), ("Wis", "+3")]


def test_npc_defaults_ability_scores_and_leaves_ac_hp_unset():
    npc = normalize_npc({"name": "Mira", "ability_scores": {"STR": 16}})
    assert npc.ability_scores == {"str": 16, "dex": 10, "con": 10, "int": 10, "wis": 10, "cha": 10}
    assert npc.armor_class is None
    assert npc.hit_points is None


def test_npc_reads_stat_block_fallbacks():
    npc = normalize_npc({
        "draft": {"character_name": "Old Tam"},
        "stat_block": {"armor_class": 12, "hit_points": "9 (2d8)", "passive_perception": "13 (+3)", "speed": "30 ft."},
    })
    assert npc.name == "Old Tam"
    assert npc.armor_class == 12
    assert npc.hit_points == HitPoints(average=9, formula="2d8")
    assert npc.passive_perception == 13
    assert npc.speed == {"walk": "30 ft."}


def test_npc_content_label_is_not_a_creature_type():
    assert normalize_npc({"name": "A", "type": "npc"}).creature_type == ""
    assert normalize_npc({"name": "A", "type": "humanoid"}).creature_type == "humanoid"


def test_npc_missing_name_defaults():
    assert normalize_npc({}).name == "Unknown NPC"


def test_monster_defaults_ac_hp_and_numbers():
    monster = normalize_monster({"name": "Gloom Stalker"})
    assert monster.armor_class == 0
    assert monster.hit_points == HitPoints(average=0)
    assert monster.proficiency_bonus == 2
    assert monster.experience_points == 0
    assert monster.ability_scores["str"] == 10


def test_monster_reads_aliases():
    monster = normalize_monster({
        "monster": {
            "name": "Bog Wyrm",
            "ac": "15 (natural armor)",
            "hp": "138 (12d12+60)",
            "cr": "9",
            "xp": 5000,
            "traits": [{"name": "Amphibious", "description": "Breathes air and water."}],
            "skills": [{"name": "Stealth", "value": "+4"}, {"value": "+2"}],
        }
    })
    assert monster.armor_class == [ArmorClassEntry(value=15, type="natural armor")]
    assert monster.hit_points == HitPoints(average=138, formula="12d12+60")
    assert monster.challenge_rating == "9"
    assert monster.experience_points == 5000
    assert monster.abilities[0].name == "Amphibious"
    assert [s.name for s in monster.skill_proficiencies] == ["Stealth"]


def test_monster_legendary_actions_list_becomes_options():
    monster = normalize_monster({"name": "Lich", "legendary_actions": [{"name": "Cantrip", "description": "Casts."}]})
    assert monster.legendary_actions.options[0].name == "Cantrip"
    assert monster.legendary_actions.summary == ""


@pytest.mark.parametrize(
    "attunement, required, restrictions",
    [
        ("requires attunement by a wizard", True, "requires attunement by a wizard"),
        ("yes", True, ""),
        ("no", False, ""),
        (True, True, ""),
        ({"required": "true", "restrictions": "by a cleric"}, True, "by a cleric"),
        (None, False, ""),
    ],
)
def test_item_attunement_shapes(attunement, required, restrictions):
    item = normalize_item({"name": "Ring", "attunement": attunement})
    assert item.attunement.required is required
    assert item.attunement.restrictions == restrictions


def test_item_name_falls_back_to_title():
    assert normalize_item({"title": "Moonblade"}).name == "Moonblade"
    assert normalize_item({}).name == "Unnamed Item"


def test_story_arc_string_acts_are_kept_as_legacy():
    arc = normalize_story_arc({"title": "The Drowned King", "acts": ["Arrival", "", "Descent"], "milestones": ["Find the key"]})
    assert [act.name for act in arc.acts] == ["Arrival", "Descent"]
    assert arc.acts_legacy == ["Arrival", "Descent"]
    assert arc.beats[0].name == "Find the key"
    assert arc.beats_legacy == ["Find the key"]


def test_story_arc_structured_beats():
    arc = normalize_story_arc({"story_arc": {"beats": [{"name": "Betrayal", "required": False}, {"description": "no name"}]}})
    assert arc.title == "Untitled Story Arc"
    assert len(arc.beats) == 1
    assert arc.beats[0].type == "plot"
    assert arc.beats[0].required is False


def test_encounter_normalizes_nested_sections():
    encounter = normalize_encounter({
        "encounter": {
            "title": "Ambush at the Ford",
            "difficulty": "hard",
            "party_level": "5",
            "monsters": [{"name": "Bandit", "count": "4"}, {"count": 2}],
            "terrain": "Shallow river crossing",
            "event_clock": {"phases": [{"name": "Round 3", "trigger": "horn", "outcome": "reinforcements"}]},
            "treasure": {"currency": {"gp": "25"}, "items": ["Potion of Healing", {"rarity": "rare"}]},
        }
    })
    assert encounter.title == "Ambush at the Ford"
    assert encounter.difficulty_tier == "hard"
    assert encounter.party_level == 5
    assert [(m.name, m.count) for m in encounter.monsters] == [("Bandit", 4)]
    assert encounter.terrain.description == "Shallow river crossing"
    assert encounter.environment == "Shallow river crossing"
    assert encounter.phases == ["Round 3: horn → reinforcements"]
    assert encounter.treasure.currency.gp == 25
    assert [i.name for i in encounter.treasure.items] == ["Potion of Healing"]


def test_writing_text_precedence():
    record = normalize_writing({"chapter": {"title": "One", "draft_text": "chapter text"}, "text": "plain"})
    assert record.title == "One"
    assert record.text == "chapter text"


def test_writing_defaults():
    record = normalize_writing({})
    assert record.title == "Draft"
    assert record.text == ""


def test_nonfiction_splits_string_lists():
    record = normalize_nonfiction({
        "draft": {"working_title": "Salt Roads"},
        "keywords": "trade, history; salt",
        "chapters": [{"title": "Origins", "keyPoints": ["mines"]}, {}],
    })
    assert record.title == "Salt Roads"
    assert record.keywords == ["trade", "history", "salt"]
    assert len(record.chapters) == 1
    assert record.chapters[0].key_points == ["mines"]


def test_dispatch_generic_returns_dict_copy():
    raw = {"anything": 1}
    result = normalize(DomainTag.GENERIC, raw)
    assert result == raw
    assert result is not raw


def test_dispatch_accepts_string_tag():
    assert normalize("item", {"name": "Rope"}).name == "Rope"
