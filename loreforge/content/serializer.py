"""Canonical record -> flat storage dict.

Starts from the previously stored payload so unknown keys survive an edit,
then writes every canonical field through ``assign``. Aliases the normalizer
reads but never writes are removed so they cannot shadow edited values on the
next normalization pass.
"""

from typing import Any, Dict, Optional, Union

from loreforge.content.coercion import ensure_object, is_blank
from loreforge.content.normalizers.dispatch import ALIAS_KEYS
from loreforge.content.schemas import (
    CanonicalModel,
    DomainTag,
    EncounterRecord,
    ItemRecord,
    LocationRecord,
    MonsterRecord,
    NonfictionRecord,
    NpcRecord,
    StoryArcRecord,
    WritingRecord,
)

PRESERVE_EMPTY = frozenset({"class_levels", "motivations", "sources_used", "assumptions", "proposals"})

DOMAIN_BY_RECORD = {
    NpcRecord: DomainTag.NPC,
    MonsterRecord: DomainTag.MONSTER,
    ItemRecord: DomainTag.ITEM,
    LocationRecord: DomainTag.LOCATION,
    StoryArcRecord: DomainTag.STORY_ARC,
    EncounterRecord: DomainTag.ENCOUNTER,
    WritingRecord: DomainTag.WRITING,
    NonfictionRecord: DomainTag.NONFICTION,
}


def assign(target: Dict[str, Any], key: str, value: Any) -> None:
    """Write ``value`` or drop ``key``; preserve-listed keys keep an empty list."""
    if is_blank(value) and not (key in PRESERVE_EMPTY and isinstance(value, list)):
        target.pop(key, None)
        return
    target[key] = value


def to_storage_shape(
    record: Union[CanonicalModel, Dict[str, Any]],
    existing_raw: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    stored: Dict[str, Any] = dict(ensure_object(existing_raw))

    if not isinstance(record, CanonicalModel):
        for key, value in ensure_object(record).items():
            assign(stored, key, value)
        return stored

    payload = record.to_payload()
    field_keys = [field.alias or name for name, field in type(record).model_fields.items()]

    domain = DOMAIN_BY_RECORD.get(type(record))
    if domain is not None:
        for key in ALIAS_KEYS[domain]:
            if key not in field_keys:
                stored.pop(key, None)

    for key in field_keys:
        assign(stored, key, payload.get(key))

    if isinstance(record, NpcRecord) and not stored.get("deliverable"):
        stored["deliverable"] = "npc"
    return stored
