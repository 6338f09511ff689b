from typing import List

from loreforge.content.rendering.base import Sections, format_list, pretty_json
from loreforge.content.schemas import EncounterMonster, EncounterRecord, Terrain


def _monster_lines(monster: EncounterMonster) -> List[str]:
    header = f"- **{monster.name}** (×{monster.count}), CR {monster.cr or '?'}"
    if monster.xp:
        header += f" ({monster.xp} XP)"
    lines = [header]
    if monster.ac or monster.hp:
        stats = f"  - AC {monster.ac or '?'}, HP {monster.hp or '?'}"
        if monster.speed:
            stats += f", Speed {monster.speed}"
        lines.append(stats)
    for label, value in (
        ("Role", monster.role),
        ("Position", monster.positioning),
        ("Key Abilities", ", ".join(monster.key_abilities)),
        ("Source", monster.source),
        ("Notes", monster.notes),
    ):
        if value:
            lines.append(f"  - {label}: {value}")
    return lines


def _terrain_lines(terrain: Terrain) -> List[str]:
    lines = [terrain.description] if terrain.description else []
    for label, value in (
        ("Lighting", terrain.lighting),
        ("Elevation", terrain.elevation),
        ("Weather", terrain.weather),
        ("Map Size", terrain.map_dimensions),
    ):
        if value:
            lines.append(f"**{label}:** {value}")
    if terrain.features:
        lines.extend(["", "**Terrain Features:**"])
        for feature in terrain.features:
            line = f"- **{feature.name}**: {feature.effect}"
            if feature.dc:
                line += f" (DC {feature.dc})"
            if feature.cover:
                line += f" [{feature.cover} cover]"
            if feature.movement_cost:
                line += f" [{feature.movement_cost}]"
            lines.append(line)
    return lines


def render_encounter(record: EncounterRecord) -> str:
    doc = Sections([
        f"## Encounter: {record.title}",
        "",
        record.description or "No description provided.",
        "",
    ])
    if record.encounter_type:
        doc.line(f"**Type:** {record.encounter_type}")
    if record.difficulty_tier:
        doc.line(f"**Difficulty:** {record.difficulty_tier}")
    if record.party_level:
        doc.line(f"**Party Level:** {record.party_level}" + (f" ({record.party_size} players)" if record.party_size else ""))
    if record.xp_budget:
        doc.line(f"**XP Budget:** {record.xp_budget}" + (f" (adjusted: {record.adjusted_xp})" if record.adjusted_xp else ""))
    if record.expected_duration_rounds:
        doc.line(f"**Expected Duration:** ~{record.expected_duration_rounds} rounds")
    doc.line(f"**Location:** {record.location or 'Unknown'}")
    if record.setting_context:
        doc.line(f"**Context:** {record.setting_context}")

    doc.add_list("### Objectives", record.objectives)
    doc.add_list("### Failure Conditions", record.failure_conditions)

    if record.monsters:
        doc.add("### Monsters", *(line for monster in record.monsters for line in _monster_lines(monster)))
    elif record.enemies:
        lines = []
        for enemy in record.enemies:
            lines.append(f"- **{enemy.name}**")
            if enemy.role:
                lines.append(f"  - Role: {enemy.role}")
            if enemy.quantity:
                lines.append(f"  - Quantity: {enemy.quantity}")
            if enemy.tactics:
                lines.append(f"  - Tactics: {enemy.tactics}")
        doc.add("### Opponents", *lines)

    if record.npcs:
        lines = []
        for npc in record.npcs:
            lines.append(f"- **{npc.name}**" + (f" ({npc.role})" if npc.role else ""))
            for label, value in (("Affiliation", npc.affiliation), ("Motivation", npc.motivation),
                                 ("Stat Reference", npc.stat_reference)):
                if value:
                    lines.append(f"  - {label}: {value}")
        doc.add("### NPCs", *lines)

    if record.terrain.description or record.terrain.features:
        doc.add_block("### Terrain & Environment", _terrain_lines(record.terrain))

    if record.hazards:
        lines = []
        for hazard in record.hazards:
            lines.append(f"- **{hazard.name}**: {hazard.description or hazard.impact}")
            if hazard.damage:
                lines.append(f"  - Damage: {hazard.damage}" + (f" (DC {hazard.dc})" if hazard.dc else ""))
            if hazard.trigger:
                lines.append(f"  - Trigger: {hazard.trigger}")
            if hazard.mitigation:
                lines.append(f"  - Mitigation: {hazard.mitigation}")
        doc.add("### Hazards", *lines)

    if record.traps:
        lines = []
        for trap in record.traps:
            lines.append(f"- **{trap.name}**")
            lines.append(f"  - Trigger: {trap.trigger}")
            lines.append(f"  - Effect: {trap.effect}" + (f" ({trap.damage})" if trap.damage else ""))
            lines.append(f"  - DC: {trap.dc}" + (f", Detection DC: {trap.detection_dc}" if trap.detection_dc else ""))
            if trap.disarm:
                lines.append(f"  - Disarm: {trap.disarm}")
        doc.add("### Traps", *lines)

    tactics = record.tactics
    doc.add("### Tactics", *(
        f"**{label}:** {value}"
        for label, value in (
            ("Opening Moves", tactics.opening_moves),
            ("Focus Targets", tactics.focus_targets),
            ("Resource Usage", tactics.resource_usage),
            ("Coordination", tactics.coordination),
            ("Fallback Plan", tactics.fallback_plan),
            ("Morale", tactics.morale),
        )
        if value
    ))

    clock = record.event_clock
    if clock.phases:
        doc.add("### Event Clock", clock.summary, *(
            f"- **{phase.name}**" + (f" (Round {phase.round})" if phase.round else "")
            + f": {phase.trigger} → {phase.outcome}"
            for phase in clock.phases
        ))

    treasure = record.treasure
    coins = [(coin, amount) for coin, amount in treasure.currency.model_dump().items() if amount > 0]
    if coins or treasure.items or treasure.boons:
        lines = []
        if coins:
            lines.append("**Currency:** " + ", ".join(f"{amount} {coin}" for coin, amount in coins))
        if treasure.items:
            lines.append("**Items:**")
            for item in treasure.items:
                line = f"- {item.name}"
                if item.rarity:
                    line += f" ({item.rarity})"
                if item.description:
                    line += f": {item.description}"
                if item.value:
                    line += f" [{item.value}]"
                lines.append(line)
        if treasure.boons:
            lines.extend(["**Boons:**", format_list(treasure.boons)])
        doc.add("### Treasure & Rewards", *lines)
    if not coins and not treasure.items and record.loot:
        doc.add("### Loot & Rewards", format_list(record.loot))

    consequences = record.consequences
    doc.add(
        "### Consequences",
        f"**Success:** {consequences.success}" if consequences.success else "",
        f"**Failure:** {consequences.failure}" if consequences.failure else "",
        f"**Partial Success:** {consequences.partial}" if consequences.partial else "",
        *(["**Story Hooks:**", format_list(consequences.story_hooks)] if consequences.story_hooks else []),
    )

    scaling = record.scaling
    doc.add(
        "### Scaling",
        f"**Easier:** {scaling.easier}" if scaling.easier else "",
        f"**Harder:** {scaling.harder}" if scaling.harder else "",
        f"**Party Size Adjust:** {scaling.party_size_adjust}" if scaling.party_size_adjust else "",
    )

    if record.notes:
        doc.add("### GM Notes", format_list(record.notes))
    doc.add_list("### Adventure Hooks", record.hooks)

    blocks = [(index, block) for index, block in enumerate(record.stat_blocks, start=1) if block]
    if blocks:
        doc.line()
        doc.line("### Stat Blocks")
        for index, block in blocks:
            doc.lines.extend(["", f"#### Creature {index}", "```json", pretty_json(block), "```"])
    return doc.render()
