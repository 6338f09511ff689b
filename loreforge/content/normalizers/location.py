from typing import Any

from loreforge.content.coercion import ensure_string, ensure_string_array, first_filled, merge_draft, sub_object
from loreforge.content.schemas import LocationRecord

WRAPPER_KEYS = ("location",)
ALIAS_KEYS = WRAPPER_KEYS + ("draft", "origin_story", "features", "key_points", "factions")


def normalize_location(raw: Any) -> LocationRecord:
    source = merge_draft(raw)
    location = sub_object(source, *WRAPPER_KEYS)

    return LocationRecord(
        name=ensure_string(first_filled(location.get("name"), source.get("title"))) or "Unnamed Location",
        region=ensure_string(first_filled(location.get("region"), source.get("region"))),
        description=ensure_string(location.get("description")),
        history=ensure_string(first_filled(location.get("history"), location.get("origin_story"))),
        key_features=ensure_string_array(
            first_filled(location.get("key_features"), location.get("features"), location.get("key_points"))
        ),
        inhabitants=ensure_string_array(first_filled(location.get("inhabitants"), location.get("factions"))),
        hooks=ensure_string_array(first_filled(location.get("hooks"), source.get("hooks"))),
    )
