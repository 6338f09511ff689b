from typing import List

from loreforge.content.rendering.base import Sections, format_list
from loreforge.content.schemas import StoryArcAct, StoryArcCharacter, StoryArcRecord


def _act_lines(act: StoryArcAct) -> List[str]:
    lines = ["", f"#### {act.name}"]
    if act.summary:
        lines.append(act.summary)
    if act.key_events:
        lines.extend(["**Key Events:**", format_list(act.key_events)])
    if act.locations:
        lines.append("**Locations:** " + ", ".join(act.locations))
    if act.climax:
        lines.append(f"**Climax:** {act.climax}")
    if act.transition:
        lines.append(f"**Transition:** {act.transition}")
    return lines


def _character_lines(character: StoryArcCharacter) -> List[str]:
    lines = ["", f"**{character.name}**" + (f": {character.role}" if character.role else "")]
    if character.description:
        lines.append(character.description)
    motivation = [
        text
        for text in (
            f"Purpose: {character.motivation.purpose}" if character.motivation.purpose else "",
            f"Reason: {character.motivation.reason}" if character.motivation.reason else "",
        )
        if text
    ]
    if motivation:
        lines.append("- **Motivation:** " + "; ".join(motivation))
    if character.goals:
        lines.append("- **Goals:**")
        lines.extend(
            f"  - {goal.target or 'Unspecified'}" + (f" → {goal.achievement}" if goal.achievement else "")
            for goal in character.goals
        )
    if character.arc:
        lines.append(f"- **Arc:** {character.arc}")
    if character.first_appearance:
        lines.append(f"- **First Appearance:** {character.first_appearance}")
    if character.known_barriers:
        lines.append("- **Known Barriers:** " + ", ".join(character.known_barriers))
    if character.unknown_barriers:
        lines.append("- **Unknown Barriers:** " + ", ".join(character.unknown_barriers))
    return lines


def render_story_arc(record: StoryArcRecord) -> str:
    doc = Sections([f"## Story Arc: {record.title}", ""])
    for label, value in (
        ("Theme", record.theme),
        ("Tone", record.tone),
        ("Setting", record.setting),
        ("Level Range", record.level_range),
        ("Estimated Sessions", record.estimated_sessions),
        ("Overarching Goal", record.overarching_goal),
    ):
        if value:
            doc.line(f"**{label}:** {value}")

    doc.add("### Hook", record.hook)
    doc.add("### Synopsis", record.synopsis)
    if record.acts:
        doc.add_block("### Acts", [line for act in record.acts for line in _act_lines(act)])

    if record.beats:
        lines = []
        for beat in record.beats:
            tags = [tag for tag in (beat.type, beat.act) if tag]
            if not beat.required:
                tags.append("optional")
            lines.append(f"- **{beat.name}**" + (f" *({', '.join(tags)})*" if tags else ""))
            if beat.description:
                lines.append(f"  {beat.description}")
        doc.add("### Story Beats & Milestones", *lines)

    doc.add(
        "### Barriers & Obstacles",
        *(["**Known Barriers**", format_list(record.known_barriers)] if record.known_barriers else []),
        *(["**Unknown Barriers**", format_list(record.unknown_barriers)] if record.unknown_barriers else []),
    )

    if record.characters:
        doc.add_block("### Characters", [line for character in record.characters for line in _character_lines(character)])

    if record.factions:
        lines = []
        for faction in record.factions:
            lines.extend(["", f"**{faction.name}**"])
            if faction.description:
                lines.append(faction.description)
            if faction.goals:
                lines.append("- **Goals:** " + ", ".join(faction.goals))
            if faction.resources:
                lines.append("- **Resources:** " + ", ".join(faction.resources))
            if faction.relationship_to_party:
                lines.append(f"- **Relationship to Party:** {faction.relationship_to_party}")
        doc.add_block("### Factions", lines)

    if record.branching_paths:
        lines = []
        for path in record.branching_paths:
            lines.extend(["", f"**Decision:** {path.decision_point}"])
            lines.extend(f"- *{option.choice}* → {option.consequence}" for option in path.options)
        doc.add_block("### Branching Paths", lines)

    if record.clues_and_secrets:
        lines = []
        for secret in record.clues_and_secrets:
            lines.extend(["", f"**Secret:** {secret.secret}"])
            if secret.discovery_method:
                lines.append(f"- **Discovery:** {secret.discovery_method}")
            if secret.impact:
                lines.append(f"- **Impact:** {secret.impact}")
        doc.add_block("### Clues & Secrets", lines)

    if record.rewards:
        doc.add("### Rewards", *(
            f"- **{reward.name}**" + (f" ({reward.type})" if reward.type else "") + (f": {reward.when}" if reward.when else "")
            for reward in record.rewards
        ))
    doc.add_list("### DM Notes", record.dm_notes)
    return doc.render()
