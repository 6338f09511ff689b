from typing import List

from loreforge.content.rendering.base import Sections, format_list, pretty_json
from loreforge.content.schemas import ItemProperty, ItemRecord, ItemSpell


def _property_lines(prop: ItemProperty) -> List[str]:
    details = []
    if prop.activation:
        details.append(f"Activation: {prop.activation}")
    if prop.uses:
        details.append(f"Uses: {prop.uses}")
    if prop.recharge:
        details.append(f"Recharge: {prop.recharge}")
    if prop.save_dc:
        details.append(f"DC {prop.save_dc}" + (f" {prop.save_type}" if prop.save_type else ""))
    if prop.damage:
        details.append(f"Damage: {prop.damage}")
    if prop.bonus:
        details.append(f"Bonus: {prop.bonus}")
    if prop.duration:
        details.append(f"Duration: {prop.duration}")
    lines = [f"- **{prop.name}**: {prop.description}"]
    if details:
        lines.append("  - " + " | ".join(details))
    return lines


def _spell_line(spell: ItemSpell) -> str:
    line = f"- **{spell.name}**"
    if spell.level is not None:
        line += f" (level {spell.level})"
    if spell.charges_cost:
        line += f", {spell.charges_cost} charge" + ("s" if spell.charges_cost > 1 else "")
    if spell.notes:
        line += f": {spell.notes}"
    return line


def _labelled(obj: dict, *labels) -> List[str]:
    lines = []
    for key, label, fmt in labels:
        value = obj.get(key)
        if value:
            lines.append(f"**{label}:** " + fmt.format(value))
    return lines


def render_item(record: ItemRecord) -> str:
    kind = record.item_type or record.type or "Unknown"
    if record.item_subtype:
        kind += f" ({record.item_subtype})"
    if record.attunement.required:
        attunement = "Yes" + (f" ({record.attunement.restrictions})" if record.attunement.restrictions else "")
    else:
        attunement = "No"

    doc = Sections([
        f"## Item: {record.name}",
        "",
        f"**Type:** {kind}",
        f"**Rarity:** {record.rarity or 'Unknown'}",
        f"**Requires Attunement:** {attunement}",
    ])
    if record.weight:
        doc.line(f"**Weight:** {record.weight}")
    if record.value:
        doc.line(f"**Value:** {record.value}")

    doc.add("### Description", record.description)
    if record.appearance:
        doc.line()
        doc.line(f"**Appearance:** {record.appearance}")

    if record.properties_v2:
        doc.add("### Magical Properties", *(line for prop in record.properties_v2 for line in _property_lines(prop)))

    charges = record.charges
    if charges.maximum > 0:
        doc.add(
            "### Charges",
            f"**Maximum Charges:** {charges.maximum}",
            f"**Recharge:** {charges.recharge}" if charges.recharge else "",
            f"**On Last Charge:** {charges.on_last_charge}" if charges.on_last_charge else "",
        )
    if record.spells:
        doc.add("### Spells", *(_spell_line(spell) for spell in record.spells))

    weapon = record.weapon_properties
    weapon_lines = _labelled(weapon, ("damage", "Damage", "{}"), ("bonus", "Bonus", "{}"), ("range", "Range", "{}"))
    if isinstance(weapon.get("properties"), list) and weapon["properties"]:
        weapon_lines.append("**Properties:** " + ", ".join(str(p) for p in weapon["properties"]))
    doc.add("### Weapon Stats", *weapon_lines)

    armor = record.armor_properties
    armor_lines = _labelled(
        armor,
        ("base_ac", "Base AC", "{}"),
        ("ac_bonus", "AC Bonus", "+{}"),
        ("armor_type", "Type", "{}"),
    )
    if armor.get("stealth_disadvantage"):
        armor_lines.append("**Stealth:** Disadvantage")
    armor_lines.extend(_labelled(armor, ("strength_requirement", "Strength Required", "{}")))
    doc.add("### Armor Stats", *armor_lines)

    if record.history:
        doc.add("### Lore & History", record.history, f"**Creator:** {record.creator}" if record.creator else "")
    if record.previous_owners:
        doc.add("### Previous Owners", *(
            f"- **{owner.name}**"
            + (f" ({owner.era})" if owner.era else "")
            + (f": {owner.notable_deed}" if owner.notable_deed else "")
            for owner in record.previous_owners
        ))
    doc.add_list("### Quirks", record.quirks)

    curse = record.curse
    if curse.is_cursed:
        doc.add(
            "### Curse",
            "*This curse is hidden until triggered.*" if curse.hidden else "",
            curse.description,
            f"**Trigger:** {curse.trigger}" if curse.trigger else "",
            f"**Removal:** {curse.removal}" if curse.removal else "",
        )

    sentience = record.sentience
    if sentience.is_sentient:
        doc.add(
            "### Sentience",
            f"**Alignment:** {sentience.alignment}" if sentience.alignment else "",
            f"**INT** {sentience.intelligence}, **WIS** {sentience.wisdom}, **CHA** {sentience.charisma}"
            if sentience.intelligence else "",
            *_labelled(
                sentience.model_dump(),
                ("communication", "Communication", "{}"),
                ("senses", "Senses", "{}"),
                ("purpose", "Purpose", "{}"),
                ("personality", "Personality", "{}"),
                ("conflict", "Conflict", "{}"),
            ),
        )

    doc.add_list("### Campaign Hooks", record.campaign_hooks)
    if record.drawbacks and not curse.is_cursed:
        doc.add("### Drawbacks", record.drawbacks)
    if record.notes:
        doc.add("### GM Notes", format_list(record.notes))
    if not record.properties_v2 and record.mechanics:
        doc.add("### Mechanics", "```json", pretty_json(record.mechanics), "```")
    return doc.render()
