"""Monster stat block rendered as Markdown, with an ability modifier table."""

from typing import List, Sequence

from loreforge.content.normalizers.common import armor_class_display
from loreforge.content.rendering.base import Sections, format_list
from loreforge.content.schemas import ABILITY_KEYS, MonsterFeature, MonsterRecord


def ability_modifier(score: int) -> str:
    modifier = (score - 10) // 2
    return f"+{modifier}" if modifier >= 0 else str(modifier)


def _feature_header(feature: MonsterFeature, with_cost: bool = False) -> str:
    header = f"**{feature.name}"
    if with_cost:
        if feature.cost and feature.cost > 1:
            header += f" (Costs {feature.cost} Actions)"
    else:
        if feature.recharge:
            header += f" ({feature.recharge})"
        if feature.uses:
            header += f" ({feature.uses})"
    return f"{header}.** {feature.description}"


def _speed_line(speed: dict) -> str:
    parts = []
    if speed.get("walk"):
        parts.append(str(speed["walk"]))
    if speed.get("fly"):
        parts.append(f"fly {speed['fly']}" + (" (hover)" if speed.get("hover") else ""))
    for mode in ("swim", "climb", "burrow"):
        if speed.get(mode):
            parts.append(f"{mode} {speed[mode]}")
    return ", ".join(parts) or "30 ft."


def _spellcasting_lines(spellcasting: dict) -> List[str]:
    lines = []
    if spellcasting.get("type"):
        lines.append(f"**{spellcasting['type']}**")
    if spellcasting.get("ability"):
        line = f"Spellcasting ability: {spellcasting['ability']}"
        if spellcasting.get("save_dc"):
            line += f", spell save DC {spellcasting['save_dc']}"
        if spellcasting.get("attack_bonus"):
            line += f", {spellcasting['attack_bonus']} to hit"
        lines.append(line)
    at_will = spellcasting.get("at_will")
    if isinstance(at_will, list) and at_will:
        lines.append("At will: " + ", ".join(str(spell) for spell in at_will))
    per_day = spellcasting.get("per_day")
    if isinstance(per_day, dict):
        for frequency, spells in per_day.items():
            if isinstance(spells, list):
                lines.append(f"{frequency}: " + ", ".join(str(spell) for spell in spells))
    spells_known = spellcasting.get("spells_known")
    if isinstance(spells_known, list):
        for spell in spells_known:
            if isinstance(spell, dict):
                line = f"- {spell.get('name') or 'Unknown'}"
                if spell.get("level") is not None:
                    line += f" (level {spell['level']})"
                if spell.get("notes"):
                    line += f": {spell['notes']}"
                lines.append(line)
    return lines


def _action_section(doc: Sections, heading: str, summary: str, options: Sequence[MonsterFeature]) -> None:
    if not options:
        return
    body = [summary] if summary else []
    body.append("")
    body.extend(_feature_header(option, with_cost=True) for option in options)
    doc.add_block(heading, body)


def render_monster(record: MonsterRecord) -> str:
    kind = f"{record.size or 'Medium'} {record.creature_type or 'creature'}"
    if record.subtype:
        kind += f" ({record.subtype})"

    hp = record.hit_points
    if hp.average:
        hp_line = str(hp.average)
        if record.hit_dice or hp.formula:
            hp_line += f" ({record.hit_dice or hp.formula})"
    else:
        hp_line = record.hit_dice or "0"

    scores = record.ability_scores
    doc = Sections([
        f"## {record.name}",
        "",
        f"*{kind}, {record.alignment or 'unaligned'}*",
        "",
        f"**Armor Class** {armor_class_display(record.armor_class) or '10'}",
        f"**Hit Points** {hp_line}",
        f"**Speed** {_speed_line(record.speed)}",
        "",
        "| STR | DEX | CON | INT | WIS | CHA |",
        "|-----|-----|-----|-----|-----|-----|",
        "| " + " | ".join(f"{scores[key]} ({ability_modifier(scores[key])})" for key in ABILITY_KEYS) + " |",
        "",
    ])

    if record.saving_throws:
        doc.line("**Saving Throws** " + ", ".join(f"{s.name} {s.value}" for s in record.saving_throws))
    if record.skill_proficiencies:
        doc.line("**Skills** " + ", ".join(f"{s.name} {s.value}" for s in record.skill_proficiencies))
    for label, values in (
        ("Damage Vulnerabilities", record.damage_vulnerabilities),
        ("Damage Resistances", record.damage_resistances),
        ("Damage Immunities", record.damage_immunities),
        ("Condition Immunities", record.condition_immunities),
    ):
        if values:
            doc.line(f"**{label}** " + ", ".join(values))
    if record.senses or record.passive_perception:
        senses = list(record.senses)
        if record.passive_perception:
            senses.append(f"passive Perception {record.passive_perception}")
        doc.line("**Senses** " + ", ".join(senses))
    doc.line("**Languages** " + (", ".join(record.languages) if record.languages else "—"))

    challenge = f"**Challenge** {record.challenge_rating or '0'}"
    if record.experience_points:
        challenge += f" ({record.experience_points:,} XP)"
    if record.proficiency_bonus is not None:
        challenge += f" **Proficiency Bonus** +{record.proficiency_bonus}"
    doc.line(challenge)
    doc.line()
    doc.line("---")

    if record.description:
        doc.line()
        doc.line(record.description)

    if record.abilities:
        doc.add("### Traits", *(_feature_header(f) for f in record.abilities))
    if record.actions or record.multiattack:
        body = [f"**Multiattack.** {record.multiattack}"] if record.multiattack else []
        body.extend(_feature_header(f) for f in record.actions)
        doc.add("### Actions", *body)
    if record.bonus_actions:
        doc.add("### Bonus Actions", *(f"**{f.name}.** {f.description}" for f in record.bonus_actions))
    if record.reactions:
        doc.add("### Reactions", *(f"**{f.name}.** {f.description}" for f in record.reactions))
    if record.spellcasting:
        doc.add("### Spellcasting", *_spellcasting_lines(record.spellcasting))

    _action_section(doc, "### Legendary Actions", record.legendary_actions.summary, record.legendary_actions.options)
    _action_section(doc, "### Mythic Actions", record.mythic_actions.summary, record.mythic_actions.options)

    doc.add_list("### Lair Actions", record.lair_actions)
    doc.add_list("### Regional Effects", record.regional_effects)
    if record.ecology or record.lore:
        doc.add(
            "### Ecology & Lore",
            record.ecology,
            record.lore,
            f"**Habitat:** {record.location}" if record.location else "",
        )
    doc.add("### Tactics", record.tactics)
    if record.notes:
        doc.add("### GM Notes", format_list(record.notes))
    return doc.render()
