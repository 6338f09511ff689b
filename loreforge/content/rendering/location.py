from loreforge.content.rendering.base import Sections
from loreforge.content.schemas import LocationRecord


def render_location(record: LocationRecord) -> str:
    doc = Sections([f"## Location: {record.name}", "", f"**Region:** {record.region or 'Unknown'}"])
    doc.add("### Description", record.description)
    doc.add("### History", record.history)
    doc.add_list("### Key Features", record.key_features)
    doc.add_list("### Inhabitants & Factions", record.inhabitants)
    doc.add_list("### Adventure Hooks", record.hooks)
    return doc.render()
