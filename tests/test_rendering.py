import json

from loreforge.content.document_reader import read_document_blocks
from loreforge.content.normalizers.dispatch import normalize
from loreforge.content.rendering.base import Sections, feature_lines, format_list
from loreforge.content.rendering.dispatch import render
from loreforge.content.rendering.monster import ability_modifier
from loreforge.content.schemas import DomainTag, Feature


def test_format_list_fallback():
    assert format_list(["a", "", "b"]) == "- a\n- b"
    assert format_list([]) == "- None"
    assert format_list([], empty_fallback="Nothing") == "- Nothing"


def test_feature_lines_join_name_description_and_notes():
    lines = feature_lines([
        Feature(name="Rage", description="Bonus damage.", notes="2/day"),
        Feature(name="", description=""),
    ])
    assert lines == ["Rage: Bonus damage. 2/day"]


def test_sections_skip_empty_bodies():
    doc = Sections(["# Title"])
    doc.add("## Empty", "", "")
    doc.add_list("## Nothing", [])
    doc.add("## Body", "text")
    assert doc.render() == "# Title\n\n## Body\ntext"


def test_npc_partial_ability_scores_render_with_defaults():
    record = normalize(DomainTag.NPC, {"deliverable": "npc", "name": "Mira", "ability_scores": {"STR": 16}})
    text = render(DomainTag.NPC, record)
    assert text.startswith("## NPC: Mira")
    assert "### Ability Scores\n- STR 16 | DEX 10 | CON 10\n- INT 10 | WIS 10 | CHA 10" in text


def test_npc_render_suppresses_empty_sections():
    record = normalize(DomainTag.NPC, {"name": "Tam"})
    text = render(DomainTag.NPC, record, title="Tam the Quiet")
    assert text.startswith("## NPC: Tam the Quiet")
    assert "### Ability Scores" in text
    for heading in ("### Description", "### Personality", "### Motivations", "### Core Stats"):
        assert heading not in text
    assert "- None" not in text
    assert "N/A" not in text
    assert "### Appearance" not in text
    assert "### Equipment" not in text
    assert "### Stat Block" not in text


def test_npc_render_includes_stat_block_json():
    record = normalize(DomainTag.NPC, {"name": "Tam", "stat_block": {"armor_class": 12}})
    text = render(DomainTag.NPC, record)
    assert "### Stat Block\n```json\n{\n  \"armor_class\": 12\n}\n```" in text
    assert "- Armor Class: 12" in text


def test_ability_modifier():
    assert ability_modifier(10) == "+0"
    assert ability_modifier(26) == "+8"
    assert ability_modifier(9) == "-1"
    assert ability_modifier(1) == "-5"


def test_monster_render_stat_block():
    record = normalize(DomainTag.MONSTER, {
        "name": "Bog Wyrm",
        "size": "Huge",
        "type": "dragon",
        "alignment": "chaotic evil",
        "armor_class": "15 (natural armor)",
        "hit_points": "138 (12d12+60)",
        "speed": {"walk": "40 ft.", "swim": "40 ft."},
        "ability_scores": {"str": 26, "dex": 9},
        "challenge_rating": "9",
        "experience_points": 5000,
        "legendary_actions": {"summary": "Three per round.", "options": [{"name": "Wing", "description": "Gust.", "cost": 2}]},
    })
    text = render(DomainTag.MONSTER, record)
    assert text.startswith("## Bog Wyrm\n\n*Huge dragon, chaotic evil*")
    assert "**Armor Class** 15 (natural armor)" in text
    assert "**Hit Points** 138 (12d12+60)" in text
    assert "**Speed** 40 ft., swim 40 ft." in text
    assert "| 26 (+8) | 9 (-1) | 10 (+0)" in text
    assert "**Challenge** 9 (5,000 XP) **Proficiency Bonus** +2" in text
    assert "### Legendary Actions\nThree per round.\n\n**Wing (Costs 2 Actions).** Gust." in text
    assert "### Mythic Actions" not in text


def test_monster_render_defaults():
    text = render(DomainTag.MONSTER, normalize(DomainTag.MONSTER, {}))
    assert "*Medium creature, unaligned*" in text
    assert "**Armor Class** 0" in text
    assert "**Hit Points** 0" in text
    assert "**Speed** 30 ft." in text
    assert "**Languages** —" in text


def test_location_render():
    record = normalize(DomainTag.LOCATION, {"name": "Saltmarsh", "features": ["Harbor"]})
    text = render(DomainTag.LOCATION, record)
    assert text.startswith("## Location: Saltmarsh\n\n**Region:** Unknown")
    assert "### Key Features\n- Harbor" in text
    assert "### History" not in text


def test_writing_render():
    record = normalize(DomainTag.WRITING, {"title": "One", "summary": "Rain.", "text": "It was raining."})
    assert render(DomainTag.WRITING, record) == "# One\n\n## Summary\nRain.\n\n## Draft\nIt was raining."


def test_nonfiction_with_only_title_falls_back_to_json():
    record = normalize(DomainTag.NONFICTION, {"title": "Salt Roads"})
    text = render(DomainTag.NONFICTION, record)
    assert json.loads(text)["title"] == "Salt Roads"


def test_nonfiction_manuscript_wins_over_chapters():
    record = normalize(DomainTag.NONFICTION, {
        "title": "Salt Roads",
        "formatted_manuscript": "Full text.",
        "chapters": [{"title": "Origins"}],
    })
    text = render(DomainTag.NONFICTION, record)
    assert text.endswith("## Manuscript\nFull text.")
    assert "## Chapters" not in text


def test_nonfiction_chapters():
    record = normalize(DomainTag.NONFICTION, {
        "title": "Salt Roads",
        "chapters": [{"summary": "Mines.", "key_points": ["depth"]}],
    })
    text = render(DomainTag.NONFICTION, record)
    assert "## Chapters\n\n### Chapter 1\n\nMines.\n\n**Key Points**\n- depth" in text


def test_generic_render_is_pretty_json():
    assert render(DomainTag.GENERIC, {"a": 1}) == '{\n  "a": 1\n}'


def test_document_reader_blocks():
    blocks = read_document_blocks("\n\n# Title\nFirst line\nsecond line\n\n- one\n* two\n1. first\n2) second\n")
    kinds = [block.kind for block in blocks]
    assert kinds == ["heading", "paragraph", "spacer", "bullet_list", "numbered_list"]
    assert blocks[0].level == 1
    assert blocks[0].text == "Title"
    assert blocks[1].text == "First line second line"
    assert blocks[3].items == ["one", "two"]
    assert blocks[4].items == ["first", "second"]


def test_document_reader_empty_text():
    assert read_document_blocks("") == []
    assert read_document_blocks("   \n\n") == []


def test_npc_personality_lists_only_filled_slots():
    record = normalize(DomainTag.NPC, {"name": "Tam", "personality": {"traits": ["Wry"], "flaws": ["Greedy"]}, "motivations": ["Gold"]})
    text = render(DomainTag.NPC, record)
    assert "### Personality\n**Traits**\n- Wry\n**Flaws**\n- Greedy" in text
    assert "**Ideals**" not in text
    assert "### Motivations\n- Gold" in text


def test_npc_core_stats_show_only_resolved_values():
    record = normalize(DomainTag.NPC, {"name": "Tam", "hit_points": "9 (2d8)", "proficiency_bonus": 0})
    text = render(DomainTag.NPC, record)
    assert "### Core Stats\n- Hit Points: 9 (2d8)\n- Proficiency Bonus: 0" in text
    assert "Armor Class" not in text


def test_location_and_item_skip_empty_description():
    assert "### Description" not in render(DomainTag.LOCATION, normalize(DomainTag.LOCATION, {"name": "Saltmarsh"}))
    assert "### Description" not in render(DomainTag.ITEM, normalize(DomainTag.ITEM, {"name": "Rope"}))


def test_monster_zero_proficiency_bonus_is_shown():
    record = normalize(DomainTag.MONSTER, {"name": "Rat", "challenge_rating": "0", "proficiency_bonus": 0})
    assert "**Proficiency Bonus** +0" in render(DomainTag.MONSTER, record)
