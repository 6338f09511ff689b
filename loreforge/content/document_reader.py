"""Markdown-like reader for free-form draft text.

Turns draft text back into display blocks. Only four block kinds exist
(heading, bullet list, numbered list, paragraph); anything that is not one of
the first three is paragraph text. Blank lines become ``spacer`` blocks, but
never before the first real block.
"""

import re
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

HEADING_RX = re.compile(r"^(#{1,6})\s+(.*)$")
BULLET_RX = re.compile(r"^[-*]\s+")
NUMBERED_RX = re.compile(r"^\d+[.)]")
ITEM_PREFIX_RX = re.compile(r"^([-*]|\d+\.|\d+\))\s+")

BlockKind = Literal["heading", "bullet_list", "numbered_list", "paragraph", "spacer"]


class DocumentBlock(BaseModel):
    kind: BlockKind
    text: str = ""
    level: Optional[int] = None
    items: List[str] = Field(default_factory=list)


def _list_kind(line: str) -> Optional[str]:
    if BULLET_RX.match(line):
        return "bullet_list"
    if NUMBERED_RX.match(line):
        return "numbered_list"
    return None


def read_document_blocks(text: str) -> List[DocumentBlock]:
    lines = (text or "").splitlines()
    blocks: List[DocumentBlock] = []
    index = 0

    while index < len(lines):
        line = lines[index].strip()

        if not line:
            index += 1
            if blocks:
                blocks.append(DocumentBlock(kind="spacer"))
            continue

        heading = HEADING_RX.match(line)
        if heading:
            blocks.append(DocumentBlock(kind="heading", level=len(heading.group(1)), text=heading.group(2).strip()))
            index += 1
            continue

        kind = _list_kind(line)
        if kind:
            items = []
            while index < len(lines):
                candidate = lines[index].strip()
                if not candidate or _list_kind(candidate) != kind:
                    break
                items.append(ITEM_PREFIX_RX.sub("", candidate, count=1).strip())
                index += 1
            blocks.append(DocumentBlock(kind=kind, items=items))
            continue

        paragraph = []
        while index < len(lines):
            raw = lines[index]
            candidate = raw.strip()
            if not candidate or HEADING_RX.match(candidate) or _list_kind(candidate):
                break
            paragraph.append(raw.rstrip())
            index += 1
        joined = " ".join(paragraph).strip()
        if joined:
            blocks.append(DocumentBlock(kind="paragraph", text=joined))

    return blocks
