from loreforge.content.rendering.base import Sections, format_list, pretty_json
from loreforge.content.schemas import NonfictionRecord, WritingRecord


def render_writing(record: WritingRecord) -> str:
    doc = Sections([f"# {record.title}"])
    if record.subtitle:
        doc.line()
        doc.line(f"**{record.subtitle}**")
    doc.add("## Summary", record.summary)
    doc.add_list("## Outline", record.outline)
    doc.add_list("## Table of Contents", record.table_of_contents)
    doc.add("## Draft", record.text)
    return doc.render()


def render_nonfiction(record: NonfictionRecord) -> str:
    """Manuscript wins over chapters; a record with nothing but a title dumps as JSON."""
    doc = Sections([f"# {record.title}"])
    if record.subtitle:
        doc.line()
        doc.line(f"**{record.subtitle}**")
    if record.medium:
        doc.line()
        doc.line(f"*Medium:* {record.medium}")
    doc.add_list("## Table of Contents", record.table_of_contents)
    doc.add("## Purpose", record.purpose)
    doc.add("## Thesis", record.thesis)
    doc.add_list("## Keywords", record.keywords)
    doc.add_list("## Outline", record.outline)

    if record.formatted_manuscript:
        doc.add("## Manuscript", record.formatted_manuscript)
        return doc.render()

    if record.chapters:
        doc.line()
        doc.line("## Chapters")
        for index, chapter in enumerate(record.chapters, start=1):
            doc.line()
            doc.line(f"### {chapter.title or f'Chapter {index}'}")
            if chapter.summary:
                doc.lines.extend(["", chapter.summary])
            if chapter.key_points:
                doc.lines.extend(["", "**Key Points**", format_list(chapter.key_points)])
            if chapter.draft_text:
                doc.lines.extend(["", chapter.draft_text])

    if len(doc.lines) <= 3:
        return pretty_json(record.to_payload())
    return doc.render()
