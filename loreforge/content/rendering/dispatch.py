from typing import Any, Callable, Dict, Optional, Union

from loreforge.content.rendering.base import pretty_json
from loreforge.content.rendering.encounter import render_encounter
from loreforge.content.rendering.item import render_item
from loreforge.content.rendering.location import render_location
from loreforge.content.rendering.monster import render_monster
from loreforge.content.rendering.npc import render_npc
from loreforge.content.rendering.prose import render_nonfiction, render_writing
from loreforge.content.rendering.story_arc import render_story_arc
from loreforge.content.schemas import CanonicalModel, DomainTag

RENDERERS: Dict[DomainTag, Callable[..., str]] = {
    DomainTag.MONSTER: render_monster,
    DomainTag.ITEM: render_item,
    DomainTag.LOCATION: render_location,
    DomainTag.STORY_ARC: render_story_arc,
    DomainTag.ENCOUNTER: render_encounter,
    DomainTag.WRITING: render_writing,
    DomainTag.NONFICTION: render_nonfiction,
}


def render(domain: Union[DomainTag, str], record: Any, title: Optional[str] = None) -> str:
    """Markdown for a normalized record; generic payloads are pretty-printed JSON."""
    tag = DomainTag(domain)
    if tag is DomainTag.NPC:
        return render_npc(record, title)
    renderer = RENDERERS.get(tag)
    if renderer is None or not isinstance(record, CanonicalModel):
        payload = record.to_payload() if isinstance(record, CanonicalModel) else record
        return pretty_json(payload)
    return renderer(record)
