import asyncio

import httpx
import pytest
from jsonschema import Draft202012Validator

from loreforge.content.normalizers.dispatch import normalize
from loreforge.content.schemas import DomainTag
from loreforge.validation.cache import SchemaValidatorCache
from loreforge.validation.formatting import (
    describe_type,
    format_validation_errors,
    label_for_path,
    summarize_value,
)
from loreforge.validation.registry import (
    BundledSchemaRegistry,
    HttpSchemaRegistry,
    SchemaCompileError,
    SchemaNotFoundError,
    SchemaRegistryError,
)
from loreforge.validation.validator import DomainValidator, bundled_npc_validator


def _errors(schema, instance):
    return sorted(Draft202012Validator(schema).iter_errors(instance), key=lambda e: e.json_path)


def test_labels_and_value_summaries():
    assert label_for_path("/armor_class") == "Armor Class"
    assert label_for_path("/") == "root object"
    assert label_for_path("/actions/0/name") == "actions.0.name"
    assert summarize_value("x" * 70) == '"' + "x" * 60 + '..."'
    assert summarize_value([1, 2]) == "[array(2)]"
    assert summarize_value({"a": 1}) == "[object]"
    assert summarize_value(None) == "null"
    assert describe_type(True) == "boolean"
    assert describe_type(3.5) == "number"


def test_format_required_and_type_errors():
    schema = {"type": "object", "properties": {"level": {"type": "integer"}}, "required": ["name"]}
    text = format_validation_errors(_errors(schema, {"level": "five"}))
    assert text == (
        '1. root object: missing required field "name". Fix: add this field.\n'
        '2. level: must be integer (expected integer, got string: "five"). Fix: Make sure this is a integer.'
    )


def test_format_additional_properties_lists_each_key():
    schema = {"type": "object", "properties": {"a": {}}, "additionalProperties": False}
    text = format_validation_errors(_errors(schema, {"a": 1, "b": 2, "c": 3}))
    assert '1. root object: unexpected field "b".' in text
    assert '2. root object: unexpected field "c".' in text


def test_format_enum_error():
    schema = {"type": "object", "properties": {"size": {"enum": ["Small", "Large"]}}}
    text = format_validation_errors(_errors(schema, {"size": "Huge"}))
    assert text.startswith("1. size: ")
    assert "Allowed values: Small, Large. Fix: use one of the allowed values." in text


def test_format_armor_class_one_of():
    validator = bundled_npc_validator()
    report = validator.validate({"name": "Mira", "armor_class": "weird"})
    assert report.details == (
        '1. Armor Class: invalid format. Expected integer or array, got string ("weird"). '
        "Fix: Enter a number like 18, or use parentheses like 18 (plate armor). Avoid free-form text."
    )


def test_validator_rejects_invalid_schema():
    with pytest.raises(SchemaCompileError) as exc:
        DomainValidator("item", "9", {"type": "not-a-type"})
    assert exc.value.domain == "item"


def test_validator_report_shape():
    validator = bundled_npc_validator("1.1")
    report = validator.validate({"name": ""})
    assert not report.valid
    assert report.domain == "npc"
    assert report.version == "1.1"
    assert {issue.keyword for issue in report.errors} == {"required", "minLength"}


def test_bundled_npc_validator_unknown_version_uses_default():
    assert bundled_npc_validator("7.0").version == "1.0"


@pytest.mark.parametrize(
    "domain, raw",
    [
        (DomainTag.NPC, {"name": "Mira", "ac": "15 (leather)", "hp": "27 (5d8+5)"}),
        (DomainTag.MONSTER, {"name": "Bog Wyrm", "hp": "138 (12d12+60)", "traits": ["Amphibious"]}),
        (DomainTag.ITEM, {"name": "Lantern", "attunement": "requires attunement by a bard"}),
        (DomainTag.LOCATION, {"name": "Saltmarsh", "features": ["Harbor"]}),
        (DomainTag.STORY_ARC, {"title": "The Drowned King", "acts": ["Arrival"]}),
        (DomainTag.ENCOUNTER, {"title": "Ambush", "monsters": [{"name": "Bandit", "count": 4}]}),
        (DomainTag.WRITING, {"title": "One", "text": "Rain."}),
        (DomainTag.NONFICTION, {"title": "Salt Roads", "chapters": [{"title": "Origins"}]}),
        (DomainTag.GENERIC, {"anything": True}),
    ],
)
def test_normalized_records_pass_bundled_schemas(domain, raw):
    cache = SchemaValidatorCache(BundledSchemaRegistry())
    validator = asyncio.run(cache.get_validator(domain.value))
    report = validator.validate(normalize(domain, raw))
    assert report.valid, report.details


def test_bundled_registry_unknown_domain():
    registry = BundledSchemaRegistry()
    with pytest.raises(SchemaNotFoundError):
        asyncio.run(registry.find_active_schema("poetry"))


def test_cache_reuses_compiled_validator_until_refresh():
    registry = BundledSchemaRegistry()
    cache = SchemaValidatorCache(registry)

    first = asyncio.run(cache.get_validator("item"))
    assert asyncio.run(cache.get_validator("item")) is first
    assert cache.cached_domains() == ["item"]

    registry.publish("item", "2.0", {"type": "object", "required": ["name", "rarity"]})
    assert asyncio.run(cache.get_validator("item")).version == "1.0"
    refreshed = asyncio.run(cache.refresh("item"))
    assert refreshed.version == "2.0"
    assert not refreshed.validate({"name": "Rope"}).valid


def test_failed_refresh_keeps_previous_validator():
    registry = BundledSchemaRegistry()
    cache = SchemaValidatorCache(registry)
    original = asyncio.run(cache.get_validator("item"))

    registry.publish("item", "2.0", {"type": 12})
    with pytest.raises(SchemaCompileError):
        asyncio.run(cache.refresh("item"))
    assert asyncio.run(cache.get_validator("item")) is original


def test_cache_clear():
    cache = SchemaValidatorCache(BundledSchemaRegistry())
    asyncio.run(cache.get_validator("item"))
    asyncio.run(cache.get_validator("npc"))
    cache.clear()
    assert cache.cached_domains() == []


def _http_registry(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpSchemaRegistry("http://registry.test/", client=client)


def test_http_registry_returns_active_schema():
    seen = []

    def handler(request):
        seen.append(str(request.url))
        return httpx.Response(200, json={"domain": "item", "version": "3", "schema": {"type": "object"}})

    entry = asyncio.run(_http_registry(handler).find_active_schema("item"))
    assert seen == ["http://registry.test/schemas/item/active"]
    assert entry.version == "3"
    assert entry.json_schema == {"type": "object"}


def test_http_registry_missing_version_is_unknown():
    def handler(request):
        return httpx.Response(200, json={"schema": {"type": "object"}})

    assert asyncio.run(_http_registry(handler).find_active_schema("item")).version == "unknown"


def test_http_registry_not_found():
    def handler(request):
        return httpx.Response(404, json={"detail": "nope"})

    with pytest.raises(SchemaNotFoundError):
        asyncio.run(_http_registry(handler).find_active_schema("item"))


def test_http_registry_server_error():
    def handler(request):
        return httpx.Response(500, text="boom")

    with pytest.raises(SchemaRegistryError) as exc:
        asyncio.run(_http_registry(handler).find_active_schema("item"))
    assert not isinstance(exc.value, SchemaNotFoundError)


def test_http_registry_transport_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(SchemaRegistryError):
        asyncio.run(_http_registry(handler).find_active_schema("item"))


def test_http_registry_bad_body():
    def non_json(request):
        return httpx.Response(200, text="<html>")

    def no_schema(request):
        return httpx.Response(200, json={"version": "1"})

    with pytest.raises(SchemaRegistryError):
        asyncio.run(_http_registry(non_json).find_active_schema("item"))
    with pytest.raises(SchemaCompileError):
        asyncio.run(_http_registry(no_schema).find_active_schema("item"))
