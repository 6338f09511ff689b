import math

from loreforge.content.coercion import (
    ensure_array,
    ensure_flag,
    ensure_int,
    ensure_number,
    ensure_object,
    ensure_string,
    ensure_string_array,
    first_filled,
    first_present,
    is_blank,
    merge_draft,
    sub_object,
)


def test_ensure_string_trims_and_formats_numbers():
    assert ensure_string("  Mira ") == "Mira"
    assert ensure_string(3) == "3"
    assert ensure_string(2.0) == "2"
    assert ensure_string(2.5) == "2.5"
    assert ensure_string(True) == "true"
    assert ensure_string(None, "fallback") == "fallback"
    assert ensure_string({"a": 1}) == ""
    assert ensure_string(math.inf, "x") == "x"


def test_ensure_number_rejects_bools_and_garbage():
    assert ensure_number(5) == 5
    assert ensure_number("7") == 7
    assert ensure_number("+2") == 2
    assert ensure_number("1.5") == 1.5
    assert ensure_number(True) is None
    assert ensure_number("12 (natural)") is None
    assert ensure_number(math.nan) is None
    assert ensure_int("3.0") == 3


def test_ensure_array_wraps_scalars_and_drops_mapper_none():
    assert ensure_array(None) == []
    assert ensure_array("x") == ["x"]
    assert ensure_array((1, 2)) == [1, 2]
    assert ensure_array([1, 2, 3], lambda v: v if v != 2 else None) == [1, 3]
    assert ensure_string_array(["a", "", None, 4, " b "]) == ["a", "4", "b"]


def test_ensure_object_and_flag():
    assert ensure_object([1]) == {}
    assert ensure_object({"a": 1}) == {"a": 1}
    assert ensure_flag("Yes") is True
    assert ensure_flag("no") is False
    assert ensure_flag(1) is False


def test_first_present_vs_first_filled():
    assert first_present(None, "", "x") == ""
    assert first_filled(None, "", "  ", [], "x") == "x"
    assert first_filled(None, 0) == 0
    assert first_filled(None, []) is None


def test_is_blank():
    assert is_blank(None)
    assert is_blank("   ")
    assert is_blank([])
    assert not is_blank({})
    assert not is_blank(0)
    assert not is_blank(False)


def test_merge_draft_overlays_without_mutating():
    raw = {"name": "old", "draft": {"name": "new", "race": "elf"}}
    merged = merge_draft(raw)
    assert merged["name"] == "new"
    assert merged["race"] == "elf"
    assert raw["name"] == "old"
    assert merge_draft("nope") == {}


def test_sub_object_prefers_first_non_empty_wrapper():
    source = {"npc": {}, "character": {"name": "Mira"}}
    assert sub_object(source, "npc", "character") == {"name": "Mira"}
    assert sub_object({"name": "x"}, "npc") == {"name": "x"}
