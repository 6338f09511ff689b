"""Shared pieces for the Markdown renderers.

Renderers build a list of lines and join them with ``\\n``. ``Sections`` keeps
the blank-line-then-heading pattern in one place and skips sections whose body
is empty.
"""

import json
from typing import Any, Iterable, List, Optional, Sequence

from loreforge.content.schemas import Feature


def format_list(items: Iterable[Any], empty_fallback: str = "None") -> str:
    lines = [f"- {item}" for item in items if item]
    return "\n".join(lines) if lines else f"- {empty_fallback}"


def feature_lines(features: Sequence[Feature]) -> List[str]:
    """``name: description notes`` per feature, blank entries skipped."""
    out = []
    for feature in features:
        base = ": ".join(part for part in (feature.name, feature.description) if part).strip()
        line = " ".join(part for part in (base, feature.notes or "") if part).strip()
        if line:
            out.append(line)
    return out


def pretty_json(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


class Sections:
    def __init__(self, header: Optional[List[str]] = None):
        self.lines: List[str] = list(header or [])

    def add(self, heading: str, *body: str) -> None:
        """Heading plus the non-empty parts of ``body``; nothing if all are empty."""
        self.add_block(heading, [part for part in body if part])

    def add_block(self, heading: str, lines: Sequence[str]) -> None:
        """Like ``add`` but keeps blank separator lines inside the body."""
        if not any(lines):
            return
        self.lines.append("")
        self.lines.append(heading)
        self.lines.extend(lines)

    def add_list(self, heading: str, items: Sequence[Any]) -> None:
        if items:
            self.add(heading, format_list(items))

    def line(self, text: str = "") -> None:
        self.lines.append(text)

    def render(self) -> str:
        return "\n".join(self.lines)
