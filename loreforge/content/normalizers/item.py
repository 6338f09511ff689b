"""Item normalizer.

Accepts both the legacy item shape (string ``attunement``, string
``properties``) and the structured one. Legacy readers are kept alongside the
structured fields so older saved items still render.
"""

from typing import Any, Optional

from loreforge.content.coercion import (
    ensure_array,
    ensure_flag,
    ensure_int,
    ensure_object,
    ensure_string,
    ensure_string_array,
    first_filled,
    merge_draft,
    sub_object,
)
from loreforge.content.schemas import (
    Attunement,
    Charges,
    Curse,
    ItemProperty,
    ItemRecord,
    ItemSpell,
    PreviousOwner,
    Sentience,
)
from loreforge.core.config import get_settings

WRAPPER_KEYS = ("item",)
ALIAS_KEYS = WRAPPER_KEYS + (
    "draft", "category", "subtype", "base_item", "origin", "effects", "activation", "curses",
)

_NO_ATTUNEMENT = {"", "no", "false", "none"}


def _optional(value: Any) -> Optional[str]:
    return ensure_string(value) or None


def _attunement(value: Any) -> Attunement:
    if isinstance(value, str):
        text = value.strip()
        lower = text.lower()
        return Attunement(
            required=lower not in _NO_ATTUNEMENT,
            restrictions=text if "by " in lower else "",
        )
    if isinstance(value, bool):
        return Attunement(required=value)
    obj = ensure_object(value)
    return Attunement(required=ensure_flag(obj.get("required")), restrictions=ensure_string(obj.get("restrictions")))


def _property(entry: Any) -> Optional[ItemProperty]:
    if isinstance(entry, str):
        text = entry.strip()
        if not text:
            return None
        return ItemProperty(name=text[: get_settings().FEATURE_NAME_MAX], description=text)
    obj = ensure_object(entry)
    name = ensure_string(obj.get("name"))
    description = ensure_string(obj.get("description"))
    if not name and not description:
        return None
    return ItemProperty(
        name=name or "Property",
        description=description or "Details unavailable.",
        activation=_optional(obj.get("activation")),
        uses=_optional(obj.get("uses")),
        recharge=_optional(obj.get("recharge")),
        save_dc=ensure_int(obj.get("save_dc")),
        save_type=_optional(obj.get("save_type")),
        damage=_optional(obj.get("damage")),
        bonus=_optional(obj.get("bonus")),
        duration=_optional(obj.get("duration")),
        range=_optional(obj.get("range")),
        notes=_optional(obj.get("notes")),
    )


def _spell(entry: Any) -> Optional[ItemSpell]:
    if isinstance(entry, str):
        return ItemSpell(name=entry.strip()) if entry.strip() else None
    obj = ensure_object(entry)
    name = ensure_string(obj.get("name"))
    if not name:
        return None
    return ItemSpell(
        name=name,
        level=ensure_int(obj.get("level")),
        charges_cost=ensure_int(obj.get("charges_cost")),
        notes=_optional(obj.get("notes")),
    )


def _owner(entry: Any) -> Optional[PreviousOwner]:
    obj = ensure_object(entry)
    name = ensure_string(obj.get("name"))
    if not name:
        return None
    return PreviousOwner(name=name, era=_optional(obj.get("era")), notable_deed=_optional(obj.get("notable_deed")))


def _charges(value: Any) -> Charges:
    obj = ensure_object(value)
    return Charges(
        maximum=ensure_int(obj.get("maximum")) or 0,
        recharge=ensure_string(obj.get("recharge")),
        on_last_charge=ensure_string(obj.get("on_last_charge")),
    )


def _curse(value: Any) -> Curse:
    obj = ensure_object(value)
    return Curse(
        is_cursed=ensure_flag(obj.get("is_cursed")),
        description=ensure_string(obj.get("description")),
        trigger=ensure_string(obj.get("trigger")),
        removal=ensure_string(obj.get("removal")),
        hidden=ensure_flag(obj.get("hidden")),
    )


def _sentience(value: Any) -> Sentience:
    obj = ensure_object(value)
    return Sentience(
        is_sentient=ensure_flag(obj.get("is_sentient")),
        alignment=ensure_string(obj.get("alignment")),
        intelligence=ensure_int(obj.get("intelligence")) or 0,
        wisdom=ensure_int(obj.get("wisdom")) or 0,
        charisma=ensure_int(obj.get("charisma")) or 0,
        communication=ensure_string(obj.get("communication")),
        senses=ensure_string(obj.get("senses")),
        purpose=ensure_string(obj.get("purpose")),
        personality=ensure_string(obj.get("personality")),
        conflict=ensure_string(obj.get("conflict")),
    )


def normalize_item(raw: Any) -> ItemRecord:
    source = merge_draft(raw)
    item = sub_object(source, *WRAPPER_KEYS)

    return ItemRecord(
        name=ensure_string(first_filled(item.get("name"), source.get("title"))) or "Unnamed Item",
        item_type=ensure_string(first_filled(item.get("item_type"), item.get("type"), item.get("category"))),
        item_subtype=ensure_string(first_filled(item.get("item_subtype"), item.get("subtype"), item.get("base_item"))),
        rarity=ensure_string(item.get("rarity")),
        attunement=_attunement(item.get("attunement")),
        description=ensure_string(item.get("description")),
        appearance=ensure_string(item.get("appearance")),
        weight=ensure_string(item.get("weight")),
        value=ensure_string(item.get("value")),
        properties_v2=ensure_array(first_filled(item.get("properties_v2"), item.get("properties")), _property),
        charges=_charges(item.get("charges")),
        spells=ensure_array(item.get("spells"), _spell),
        weapon_properties=ensure_object(item.get("weapon_properties")),
        armor_properties=ensure_object(item.get("armor_properties")),
        history=ensure_string(first_filled(item.get("history"), item.get("origin"))),
        creator=ensure_string(item.get("creator")),
        previous_owners=ensure_array(item.get("previous_owners"), _owner),
        quirks=ensure_string_array(item.get("quirks")),
        curse=_curse(item.get("curse")),
        sentience=_sentience(item.get("sentience")),
        campaign_hooks=ensure_string_array(item.get("campaign_hooks")),
        notes=ensure_string_array(first_filled(item.get("notes"), source.get("notes"))),
        type=ensure_string(first_filled(item.get("type"), item.get("item_type"), item.get("category"))),
        properties=ensure_string_array(item.get("properties")),
        abilities=ensure_string_array(first_filled(item.get("abilities"), item.get("effects"))),
        usage=ensure_string(first_filled(item.get("usage"), item.get("activation"))),
        drawbacks=ensure_string(first_filled(item.get("drawbacks"), item.get("curses"))),
        mechanics=ensure_object(item.get("mechanics")),
    )
