from loreforge.content.editing import (
    INVALID_JSON,
    apply_json_edit,
    class_levels_to_multiline,
    features_to_multiline,
    list_to_multiline,
    multiline_to_class_levels,
    multiline_to_features,
    multiline_to_list,
    multiline_to_relationships,
    multiline_to_scored_entries,
    relationships_to_multiline,
    scored_entries_to_multiline,
)
from loreforge.content.schemas import ClassLevel, Feature, Relationship, ScoredEntry


def test_json_edit_parses_valid_text():
    result = apply_json_edit({"old": True}, '{"walk": "30 ft."}')
    assert result.value == {"walk": "30 ft."}
    assert result.warning is None


def test_json_edit_invalid_text_keeps_previous():
    result = apply_json_edit({"old": True}, "{walk: 30")
    assert result.value == {"old": True}
    assert result.warning == INVALID_JSON


def test_json_edit_blank_text_clears():
    assert apply_json_edit({"old": True}, "   ").value is None


def test_list_lines():
    assert multiline_to_list(" a \n\n b\n") == ["a", "b"]
    assert list_to_multiline(["a", "b"]) == "a\nb"
    assert multiline_to_list(None) == []


def test_features_round_trip():
    features = [Feature(name="Rage", description="Bonus damage.", notes="2/day"), Feature(name="Dash", description="Move.")]
    text = features_to_multiline(features)
    assert text == "Rage | Bonus damage. | 2/day\nDash | Move."
    assert multiline_to_features(text) == features


def test_feature_without_name_uses_description():
    long_description = "d" * 100
    features = multiline_to_features(f" | {long_description}\n |  | ")
    assert features[0].name == "d" * 80
    assert features[0].description == long_description
    assert features[1].name == "Feature"
    assert features[1].notes is None


def test_relationships_parse():
    relationships = multiline_to_relationships("Guild | rival | old grudge\nMira")
    assert relationships == [
        Relationship(entity="Guild", relationship="rival", notes="old grudge"),
        Relationship(entity="Mira", relationship=""),
    ]
    assert relationships_to_multiline(relationships) == "Guild | rival | old grudge\nMira"


def test_class_levels_format_and_parse():
    levels = [
        ClassLevel(class_name="Rogue", level=3, subclass="Thief", notes="sneaky"),
        ClassLevel(class_name="", level=2),
    ]
    text = class_levels_to_multiline(levels)
    assert text == "Rogue | Level 3 | Thief | Notes: sneaky\nClass 2 | Level 2"

    parsed = multiline_to_class_levels("Rogue | Level 3 | Thief | Notes: sneaky\nWizard | lvl x")
    assert parsed[0] == ClassLevel(class_name="Rogue", level=3, subclass="Thief", notes="sneaky")
    assert parsed[1].class_name == "Wizard"
    assert parsed[1].level is None


def test_scored_entries_defaults():
    entries = multiline_to_scored_entries("Stealth | +4\n | +2\n | | quiet")
    assert entries[0] == ScoredEntry(name="Stealth", value="+4")
    assert entries[1] == ScoredEntry(name="+2", value="+2")
    assert entries[2] == ScoredEntry(name="Entry", value="—", notes="quiet")
    assert scored_entries_to_multiline(entries[:1]) == "Stealth | +4"
