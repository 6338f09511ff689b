"""Prose normalizers (fiction drafts and non-fiction manuscripts).

Prose payloads nest their parts under ``chapter`` / ``scene`` / ``work`` and
use camelCase spellings interchangeably with snake_case.
"""

import re
from typing import Any, List, Optional

from loreforge.content.coercion import (
    ensure_array,
    ensure_object,
    ensure_string,
    ensure_string_array,
    first_filled,
    merge_draft,
)
from loreforge.content.schemas import NonfictionChapter, NonfictionRecord, WritingRecord

WRITING_ALIAS_KEYS = (
    "draft", "chapter_title", "chapterTitle", "chapter", "scene", "work", "synopsis", "abstract",
    "structure", "outline_structure", "outlineStructure", "tableOfContents", "formatted_text",
    "formattedText", "formatted_manuscript", "formattedManuscript", "draft_text", "draftText", "body",
)
NONFICTION_ALIAS_KEYS = (
    "draft", "tableOfContents", "formattedManuscript", "mission", "premise",
    "central_thesis", "centralThesis", "structure", "outline_structure", "outlineStructure",
)

_LIST_SPLIT_RX = re.compile(r"\r?\n|,|;|•|·")
_LIST_PREFIX_RX = re.compile(r"^[-*\d.\s]+")


def as_string_list(value: Any) -> List[str]:
    """Lists pass through; a string is split on newlines, commas, semicolons and bullets."""
    if isinstance(value, list):
        return ensure_string_array(value)
    if isinstance(value, str):
        parts = (_LIST_PREFIX_RX.sub("", part).strip() for part in _LIST_SPLIT_RX.split(value.strip()))
        return [part for part in parts if part]
    return []


def normalize_writing(raw: Any) -> WritingRecord:
    merged = merge_draft(raw)
    chapter = ensure_object(merged.get("chapter"))
    scene = ensure_object(merged.get("scene"))
    work = ensure_object(merged.get("work"))

    title = first_filled(
        ensure_string(merged.get("title")),
        ensure_string(first_filled(merged.get("chapter_title"), merged.get("chapterTitle"))),
        ensure_string(chapter.get("title")),
        ensure_string(scene.get("title")),
        ensure_string(work.get("title")),
    )
    text = first_filled(
        ensure_string(first_filled(merged.get("formatted_text"), merged.get("formattedText"))),
        ensure_string(first_filled(merged.get("formatted_manuscript"), merged.get("formattedManuscript"))),
        ensure_string(first_filled(merged.get("draft_text"), merged.get("draftText"))),
        ensure_string(first_filled(chapter.get("draft_text"), chapter.get("draftText"))),
        ensure_string(first_filled(scene.get("draft_text"), scene.get("draftText"))),
        ensure_string(merged.get("text")),
        ensure_string(merged.get("body")),
        ensure_string(merged.get("draft")),
    )

    return WritingRecord(
        title=title or "Draft",
        subtitle=ensure_string(first_filled(merged.get("subtitle"), work.get("subtitle"))),
        summary=ensure_string(first_filled(
            merged.get("summary"), merged.get("synopsis"), merged.get("abstract"),
            chapter.get("summary"), scene.get("summary"),
        )),
        outline=ensure_string_array(first_filled(
            merged.get("outline"), merged.get("structure"),
            merged.get("outline_structure"), merged.get("outlineStructure"),
        )),
        table_of_contents=ensure_string_array(first_filled(
            merged.get("table_of_contents"), merged.get("tableOfContents"),
            work.get("table_of_contents"), work.get("tableOfContents"),
        )),
        text=text or "",
    )


def _chapter(entry: Any) -> Optional[NonfictionChapter]:
    obj = ensure_object(entry)
    chapter = NonfictionChapter(
        title=ensure_string(obj.get("title")),
        summary=ensure_string(obj.get("summary")),
        key_points=ensure_string_array(first_filled(obj.get("key_points"), obj.get("keyPoints"))),
        draft_text=ensure_string(first_filled(obj.get("draft_text"), obj.get("draftText"))),
    )
    if not chapter.title and not chapter.summary and not chapter.draft_text:
        return None
    return chapter


def normalize_nonfiction(raw: Any) -> NonfictionRecord:
    content = merge_draft(raw)

    title = ensure_string(first_filled(content.get("title"), content.get("working_title")))
    return NonfictionRecord(
        title=title or "Non-Fiction",
        subtitle=ensure_string(content.get("subtitle")),
        medium=ensure_string(content.get("medium")),
        table_of_contents=as_string_list(first_filled(content.get("table_of_contents"), content.get("tableOfContents"))),
        purpose=ensure_string(first_filled(content.get("purpose"), content.get("mission"), content.get("premise"))),
        thesis=ensure_string(first_filled(
            content.get("thesis"), content.get("central_thesis"), content.get("centralThesis"),
        )),
        keywords=as_string_list(content.get("keywords")),
        outline=as_string_list(first_filled(
            content.get("outline"), content.get("structure"),
            content.get("outline_structure"), content.get("outlineStructure"),
        )),
        formatted_manuscript=ensure_string(first_filled(
            content.get("formatted_manuscript"), content.get("formattedManuscript"),
        )),
        chapters=ensure_array(content.get("chapters"), _chapter),
    )
