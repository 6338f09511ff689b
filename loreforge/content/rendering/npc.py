from typing import Optional

from loreforge.content.normalizers.common import armor_class_display, hit_points_display
from loreforge.content.rendering.base import Sections, feature_lines, format_list, pretty_json
from loreforge.content.schemas import NpcRecord


def render_npc(record: NpcRecord, title: Optional[str] = None) -> str:
    doc = Sections([
        f"## NPC: {title or record.name}",
        "",
        f"**Role:** {record.role or 'Unknown role'}",
        f"**Title:** {record.title or 'No formal title'}",
        f"**Race:** {record.race or 'Unknown'}",
        f"**Alignment:** {record.alignment or 'Unknown'}",
        f"**Affiliation:** {record.affiliation or 'None noted'}",
        f"**Location:** {record.location or 'Unknown'}",
        f"**Era:** {record.era or 'Unknown'}",
    ])
    doc.add("### Description", record.description)
    doc.add("### Appearance", record.appearance)
    doc.add("### Background", record.background)

    personality = record.personality
    traits = []
    for label, values in (
        ("Traits", personality.traits),
        ("Ideals", personality.ideals),
        ("Bonds", personality.bonds),
        ("Flaws", personality.flaws),
    ):
        if values:
            traits.extend([f"**{label}**", format_list(values)])
    doc.add("### Personality", *traits)
    doc.add_list("### Motivations", record.motivations)
    doc.add_list("### Adventure Hooks", record.hooks)
    doc.add_list("### Abilities & Skills", feature_lines(record.abilities))
    doc.add("### Combat Tactics", record.tactics)

    if record.class_levels:
        doc.add("### Class Levels", "\n".join(
            f"- {level.class_name or 'Class'} {level.level if level.level is not None else ''}".rstrip()
            + (f" ({level.subclass})" if level.subclass else "")
            for level in record.class_levels
        ))
    doc.add_list("### Class Features", feature_lines(record.class_features))
    doc.add_list("### Subclass Features", feature_lines(record.subclass_features))
    doc.add_list("### Racial Features", feature_lines(record.racial_features))
    doc.add_list("### Feats", feature_lines(record.feats))
    if record.asi_choices:
        doc.add("### ASI Choices", "\n".join(
            f"- Level {asi.get('level') or '?'}: {asi.get('choice') or 'Unknown'}"
            + (f" ({asi['details']})" if asi.get("details") else "")
            for asi in record.asi_choices
        ))
    if record.background_feature:
        feature = record.background_feature
        doc.add(
            "### Background Feature",
            f"**Background:** {feature['background_name']}" if feature.get("background_name") else "",
            f"**Feature:** {feature['feature_name']}" if feature.get("feature_name") else "",
            str(feature["description"]) if feature.get("description") else "",
            f"**Origin Feat:** {feature['origin_feat']}" if feature.get("origin_feat") else "",
        )

    scores = record.ability_scores
    doc.add(
        "### Ability Scores",
        f"- STR {scores['str']} | DEX {scores['dex']} | CON {scores['con']}",
        f"- INT {scores['int']} | WIS {scores['wis']} | CHA {scores['cha']}",
    )
    armor_class = armor_class_display(record.armor_class)
    hit_points = hit_points_display(record.hit_points)
    doc.add(
        "### Core Stats",
        f"- Armor Class: {armor_class}" if armor_class else "",
        f"- Hit Points: {hit_points}" if hit_points else "",
        f"- Proficiency Bonus: {record.proficiency_bonus}" if record.proficiency_bonus is not None else "",
    )
    if record.spellcasting:
        doc.add_list("### Known Spells", record.spellcasting.known_spells)
    doc.add_list("### Equipment", record.equipment)
    doc.add_list("### Magic Items", record.magic_items)
    doc.add_list("### Actions", feature_lines(record.actions))
    doc.add_list("### Bonus Actions", feature_lines(record.bonus_actions))
    doc.add_list("### Reactions", feature_lines(record.reactions))
    if record.relationships:
        doc.add("### Relationships", "\n".join(
            f"- {rel.entity or 'Unknown'}: {rel.relationship or 'Relationship unspecified'}"
            for rel in record.relationships
        ))
    if record.stat_block:
        doc.add("### Stat Block", "```json", pretty_json(record.stat_block), "```")
    return doc.render()
