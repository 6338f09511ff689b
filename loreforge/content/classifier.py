"""Domain classification for raw generated payloads.

There is no single discriminant field, so classification runs an ordered
chain of predicates over one ``ClassificationSignals`` bag. The first rule that
matches decides the domain; order in ``RULES`` is the precedence.

Monster rules run before the NPC rule because monster payloads routinely carry
``content_type: "character"``. Writing only wins when no RPG key is present.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, Optional, Tuple

from loreforge.content.coercion import ensure_object, ensure_string, merge_draft
from loreforge.content.schemas import DomainTag

logger = logging.getLogger("loreforge.classify")

RPG_KEYS = ("stat_block", "ability_scores", "armor_class", "challenge_rating")
WRITING_TOKENS = (
    "chapter", "outline", "foreword", "prologue", "epilogue", "scene", "section",
    "journal", "diary", "memoir", "log", "entry", "manuscript",
)
PROSE_FIELDS = (
    "formatted_text", "formattedText", "draft_text", "draftText", "formatted_manuscript",
    "table_of_contents", "text", "body",
)
NONFICTION_FIELDS = (
    "working_title", "medium", "purpose", "thesis", "keywords", "primary_audience",
    "author_role", "intended_formats",
)


@dataclass
class ClassificationSignals:
    hints: Tuple[str, ...]
    deliverable: str
    payload: Dict[str, Any] = field(default_factory=dict)
    keys: FrozenSet[str] = frozenset()
    domain: str = ""

    def hint_has(self, *tokens: str) -> bool:
        return any(token in hint for hint in self.hints for token in tokens)

    def has_object(self, *keys: str) -> bool:
        return any(isinstance(self.payload.get(key), dict) and self.payload.get(key) for key in keys)

    def has_filled(self, *keys: str) -> bool:
        for key in keys:
            value = self.payload.get(key)
            if value is None or value is False:
                continue
            if isinstance(value, (str, list, dict)) and not value:
                continue
            if isinstance(value, str) and not value.strip():
                continue
            return True
        return False


def gather_signals(raw: Any, type_hint: Optional[str] = None, deliverable_hint: Optional[str] = None) -> ClassificationSignals:
    source = ensure_object(raw)
    merged = merge_draft(source)
    draft = ensure_object(source.get("draft"))

    deliverable = ensure_string(deliverable_hint or merged.get("deliverable")).lower()
    hints = tuple(
        hint
        for hint in (
            ensure_string(type_hint).lower(),
            deliverable,
            ensure_string(source.get("deliverable")).lower(),
            ensure_string(merged.get("content_type") or merged.get("contentType")).lower(),
            ensure_string(draft.get("deliverable")).lower(),
        )
        if hint
    )
    return ClassificationSignals(
        hints=hints,
        deliverable=deliverable,
        payload=merged,
        keys=frozenset(merged.keys()),
        domain=ensure_string(merged.get("domain")).lower(),
    )


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------

def has_rpg_signals(signals: ClassificationSignals) -> bool:
    return signals.has_filled(*RPG_KEYS)


def is_explicit_monster(signals: ClassificationSignals) -> bool:
    return signals.hint_has("monster", "creature")


def is_structural_monster(signals: ClassificationSignals) -> bool:
    if "npc" in signals.deliverable:
        return False
    if signals.has_object("monster"):
        return True
    if all(signals.has_filled(key) for key in ("challenge_rating", "ability_scores", "armor_class")):
        return True
    return signals.has_object("stat_block")


def is_npc(signals: ClassificationSignals) -> bool:
    return signals.hint_has("npc", "character") or signals.has_object("npc", "character")


def is_story_arc(signals: ClassificationSignals) -> bool:
    return signals.hint_has("story arc", "story-arc", "plot arc") or signals.has_object("story_arc", "storyArc", "arc")


def is_encounter(signals: ClassificationSignals) -> bool:
    return signals.hint_has("encounter", "combat") or signals.has_object("encounter", "encounter_details")


def is_item(signals: ClassificationSignals) -> bool:
    return signals.hint_has("item", "artifact") or signals.has_object("item")


def is_location(signals: ClassificationSignals) -> bool:
    return signals.hint_has("location", "place") or signals.has_object("location")


def is_writing(signals: ClassificationSignals) -> bool:
    if has_rpg_signals(signals):
        return False
    chapters = signals.payload.get("chapters")
    return (
        signals.has_object("work")
        or signals.has_filled(*PROSE_FIELDS)
        or (isinstance(chapters, list) and len(chapters) > 0)
        or signals.domain == "writing"
        or signals.hint_has(*WRITING_TOKENS)
    )


def is_nonfiction(signals: ClassificationSignals) -> bool:
    return (
        "nonfiction" in signals.deliverable
        or signals.has_filled("formatted_manuscript", "formattedManuscript")
        or signals.has_filled(*NONFICTION_FIELDS)
    )


Rule = Tuple[str, Callable[[ClassificationSignals], bool], DomainTag]

RULES: Tuple[Rule, ...] = (
    ("explicit_monster", is_explicit_monster, DomainTag.MONSTER),
    ("structural_monster", is_structural_monster, DomainTag.MONSTER),
    ("npc", is_npc, DomainTag.NPC),
    ("story_arc", is_story_arc, DomainTag.STORY_ARC),
    ("encounter", is_encounter, DomainTag.ENCOUNTER),
    ("item", is_item, DomainTag.ITEM),
    ("location", is_location, DomainTag.LOCATION),
    ("writing", is_writing, DomainTag.WRITING),
)


def classify(raw: Any, type_hint: Optional[str] = None, deliverable_hint: Optional[str] = None) -> DomainTag:
    signals = gather_signals(raw, type_hint, deliverable_hint)
    for name, predicate, tag in RULES:
        if not predicate(signals):
            continue
        if tag is DomainTag.WRITING and is_nonfiction(signals):
            tag = DomainTag.NONFICTION
        logger.debug("classify_rule rule=%s domain=%s", name, tag.value)
        return tag
    logger.debug("classify_default keys=%d", len(signals.keys))
    return DomainTag.GENERIC
