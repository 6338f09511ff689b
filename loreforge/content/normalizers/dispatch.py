from typing import Any, Callable, Dict, Tuple, Union

from loreforge.content.coercion import ensure_object
from loreforge.content.normalizers import encounter, item, location, monster, npc, story_arc, writing
from loreforge.content.schemas import CanonicalRecord, DomainTag

Normalizer = Callable[[Any], CanonicalRecord]

NORMALIZERS: Dict[DomainTag, Normalizer] = {
    DomainTag.NPC: npc.normalize_npc,
    DomainTag.MONSTER: monster.normalize_monster,
    DomainTag.ITEM: item.normalize_item,
    DomainTag.LOCATION: location.normalize_location,
    DomainTag.STORY_ARC: story_arc.normalize_story_arc,
    DomainTag.ENCOUNTER: encounter.normalize_encounter,
    DomainTag.WRITING: writing.normalize_writing,
    DomainTag.NONFICTION: writing.normalize_nonfiction,
}

# keys a normalizer reads but never writes back
ALIAS_KEYS: Dict[DomainTag, Tuple[str, ...]] = {
    DomainTag.NPC: npc.ALIAS_KEYS,
    DomainTag.MONSTER: monster.ALIAS_KEYS,
    DomainTag.ITEM: item.ALIAS_KEYS,
    DomainTag.LOCATION: location.ALIAS_KEYS,
    DomainTag.STORY_ARC: story_arc.ALIAS_KEYS,
    DomainTag.ENCOUNTER: encounter.ALIAS_KEYS,
    DomainTag.WRITING: writing.WRITING_ALIAS_KEYS,
    DomainTag.NONFICTION: writing.NONFICTION_ALIAS_KEYS,
    DomainTag.GENERIC: (),
}


def normalize(domain: Union[DomainTag, str], raw: Any) -> Union[CanonicalRecord, Dict[str, Any]]:
    """Run the normalizer for ``domain``; generic payloads come back as a plain dict."""
    tag = DomainTag(domain)
    normalizer = NORMALIZERS.get(tag)
    if normalizer is None:
        return dict(ensure_object(raw))
    return normalizer(raw)
