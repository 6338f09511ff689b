import pytest

from loreforge.content.mapper import (
    build_common_metadata,
    infer_content_type,
    map_and_validate_npc,
    map_generated_content_to_content_block,
)
from loreforge.content.schemas import ContentType, DomainTag
from loreforge.validation.bundled_schemas import NPC_SCHEMA_V1_1
from loreforge.validation.validator import DomainValidator

FULL_SCORES = {"str": 12, "dex": 14, "con": 10, "int": 16, "wis": 11, "cha": 9}


@pytest.mark.parametrize(
    "domain, expected",
    [
        (DomainTag.MONSTER, ContentType.MONSTER),
        (DomainTag.NPC, ContentType.CHARACTER),
        (DomainTag.ITEM, ContentType.ITEM),
        (DomainTag.LOCATION, ContentType.LOCATION),
        (DomainTag.STORY_ARC, ContentType.STORY_ARC),
        (DomainTag.ENCOUNTER, ContentType.SECTION),
    ],
)
def test_content_type_follows_domain(domain, expected):
    assert infer_content_type(domain) is expected


def test_explicit_content_type_wins_and_invalid_is_ignored():
    assert infer_content_type(DomainTag.MONSTER, "outline") is ContentType.OUTLINE
    assert infer_content_type(DomainTag.MONSTER, "bogus") is ContentType.MONSTER


@pytest.mark.parametrize(
    "deliverable, expected",
    [
        ("book outline", ContentType.OUTLINE),
        ("chapter draft", ContentType.CHAPTER),
        ("opening scene", ContentType.SECTION),
        ("stat sheet", ContentType.STAT_BLOCK),
        ("world lore", ContentType.FACT),
        ("poem", ContentType.TEXT),
    ],
)
def test_content_type_from_deliverable(deliverable, expected):
    assert infer_content_type(DomainTag.WRITING, deliverable=deliverable) is expected


def test_content_type_reads_draft_deliverable():
    payload = {"draft": {"deliverable": "chapter"}}
    assert infer_content_type(DomainTag.GENERIC, generated_content=payload) is ContentType.CHAPTER


def test_common_metadata_optional_fields():
    metadata = build_common_metadata(
        {
            "deliverable": "npc",
            "sources_used": "PHB",
            "canon_alignment_score": 0,
            "logic_score": None,
            "validation_notes": "",
            "balance_notes": "Tuned for level 5",
            "conflicts": [],
            "proposals": {"field": "alignment"},
        },
        resolved_conflicts=[{"id": 1}],
    )
    assert metadata["deliverable"] == "npc"
    assert metadata["sources_used"] == ["PHB"]
    assert metadata["canon_alignment_score"] == 0
    assert "logic_score" not in metadata
    assert "validation_notes" not in metadata
    assert metadata["balance_notes"] == "Tuned for level 5"
    assert "conflicts" not in metadata
    assert metadata["proposals"] == [{"field": "alignment"}]
    assert metadata["resolved_conflicts"] == [{"id": 1}]
    assert metadata["resolved_proposals"] == []


def test_explicit_deliverable_overrides_payload_in_metadata():
    assert build_common_metadata({"deliverable": "npc"}, deliverable="villain")["deliverable"] == "villain"


def test_map_npc_block():
    raw = {"deliverable": "npc", "name": "Mira", "ability_scores": {"STR": 16}, "gear": ["Rope"]}
    block = map_generated_content_to_content_block(raw)

    assert block.title == "Mira"
    assert block.type is ContentType.CHARACTER
    assert block.content.startswith("## NPC: Mira")
    assert "- STR 16 | DEX 10 | CON 10" in block.content
    structured = block.structured_content
    assert structured["type"] == "npc"
    assert structured["data"]["ability_scores"]["str"] == 16
    assert structured["data"]["equipment"] == ["Rope"]
    assert block.metadata["raw"] == raw


def test_map_monster_block_with_title_override():
    raw = {"name": "Bog Wyrm", "challenge_rating": "9", "ability_scores": FULL_SCORES, "armor_class": 17}
    block = map_generated_content_to_content_block(raw, title="The Wyrm")
    assert block.type is ContentType.MONSTER
    assert block.title == "The Wyrm"
    assert block.structured_content["type"] == "monster"
    assert block.structured_content["data"]["armor_class"] == 17


def test_map_writing_block_uses_deliverable_type():
    block = map_generated_content_to_content_block(
        {"title": "One", "draft_text": "It was raining."},
        deliverable="chapter",
    )
    assert block.type is ContentType.CHAPTER
    assert block.title == "One"
    assert block.structured_content["type"] == "writing"
    assert "## Draft\nIt was raining." in block.content


def test_map_generic_block():
    block = map_generated_content_to_content_block({"foo": "bar"})
    assert block.type is ContentType.TEXT
    assert block.title == "Generated Content"
    assert block.structured_content == {"type": "generic", "data": {"foo": "bar"}}
    assert block.content == '{\n  "foo": "bar"\n}'


def test_map_and_validate_npc_success():
    result = map_and_validate_npc({"character_name": "Mira", "ability_scores": FULL_SCORES})
    assert result.success
    assert result.data["name"] == "Mira"
    assert result.schema_version == "1.0"
    assert 'Mapped name variant to "name"' in result.warnings


def test_map_and_validate_npc_uses_declared_schema_version():
    result = map_and_validate_npc({"name": "Mira", "schema_version": "v1.1", "ability_scores": FULL_SCORES})
    assert result.success
    assert result.schema_version == "1.1"
    assert result.data["schema_version"] == "1.1"


def test_map_and_validate_npc_mapping_failure():
    result = map_and_validate_npc({"name": "Mira", "ability_scores": {"str": 10}})
    assert not result.success
    assert result.data is None
    assert result.errors == ["Mapping failed", "Missing ability scores: dex, con, int, wis, cha"]


def test_map_and_validate_npc_validation_failure():
    result = map_and_validate_npc({"name": "Mira", "armor_class": "weird"})
    assert not result.success
    assert result.data["armor_class"] == "weird"
    assert result.errors == ["Schema validation failed"]
    assert result.validation_errors.startswith("1. Armor Class: invalid format. Expected integer or array, got string")
    assert "Avoid free-form text." in result.validation_errors
    assert result.raw_errors[0]["path"] == "/armor_class"
    assert result.raw_errors[0]["keyword"] == "oneOf"


def test_map_and_validate_npc_with_explicit_validator():
    validator = DomainValidator("npc", "1.1", NPC_SCHEMA_V1_1)
    result = map_and_validate_npc({"name": "Mira"}, validator=validator)
    assert not result.success
    assert result.schema_version == "1.1"
    assert 'missing required field "schema_version"' in result.validation_errors
