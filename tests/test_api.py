import pytest
from fastapi.testclient import TestClient

from loreforge.main import app
from loreforge.validation.cache import SchemaValidatorCache, get_validator_cache
from loreforge.validation.registry import BundledSchemaRegistry

FULL_SCORES = {"str": 12, "dex": 14, "con": 10, "int": 16, "wis": 11, "cha": 9}


@pytest.fixture
def registry():
    return BundledSchemaRegistry()


@pytest.fixture
def client(registry):
    cache = SchemaValidatorCache(registry)
    app.dependency_overrides[get_validator_cache] = lambda: cache
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_classify(client):
    resp = client.post("/content/classify", json={"payload": {"name": "Mira"}, "deliverable": "npc"})
    assert resp.status_code == 200
    assert resp.json() == {"domain": "npc"}


def test_classify_defaults_to_generic(client):
    assert client.post("/content/classify", json={"payload": {}}).json() == {"domain": "generic"}


def test_map_returns_content_block(client):
    resp = client.post(
        "/content/map",
        json={"generated_content": {"deliverable": "npc", "name": "Mira", "ability_scores": {"STR": 16}}},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["title"] == "Mira"
    assert body["type"] == "character"
    assert body["metadata"]["structuredContent"]["type"] == "npc"
    assert "- STR 16 | DEX 10 | CON 10" in body["content"]


def test_normalize_endpoint(client):
    resp = client.post("/content/item/normalize", json={"item": {"name": "Lantern", "attunement": "yes"}})
    assert resp.status_code == 200
    body = resp.json()
    assert body["record"]["name"] == "Lantern"
    assert body["record"]["attunement"] == {"required": True, "restrictions": ""}
    assert body["content"].startswith("## Item: Lantern")


def test_normalize_unknown_domain(client):
    resp = client.post("/content/poetry/normalize", json={"title": "Ode"})
    assert resp.status_code == 400
    assert resp.json() == {"detail": "unknown_domain"}


def test_storage_shape_endpoint(client):
    resp = client.post(
        "/content/npc/storage-shape",
        json={"payload": {"character_name": "Tam", "ac": 12}, "existing_raw": {"custom": "keep"}},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "Tam"
    assert body["armor_class"] == 12
    assert body["custom"] == "keep"
    assert body["deliverable"] == "npc"
    assert "ac" not in body


def test_validate_endpoint(client):
    resp = client.post("/content/location/validate", json={"name": "Saltmarsh"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["valid"] is True
    assert body["domain"] == "location"
    assert body["version"] == "1.0"


def test_validate_reports_violations(client, registry):
    registry.publish("location", "2.0", {"type": "object", "required": ["name", "ruler"]})
    resp = client.post("/content/location/validate", json={"name": "Saltmarsh"})
    body = resp.json()
    assert resp.status_code == 200
    assert body["valid"] is False
    assert body["errors"][0]["keyword"] == "required"
    assert 'missing required field "ruler"' in body["details"]


def test_validate_missing_schema(client, registry):
    registry._entries.pop("location")
    resp = client.post("/content/location/validate", json={"name": "Saltmarsh"})
    assert resp.status_code == 404
    assert resp.json() == {"detail": "schema_not_found"}


def test_validate_broken_schema(client, registry):
    registry.publish("location", "2.0", {"type": "not-a-type"})
    resp = client.post("/content/location/validate", json={"name": "Saltmarsh"})
    assert resp.status_code == 502
    assert resp.json() == {"detail": "schema_compile_error"}


def test_npc_map_and_validate_success(client):
    resp = client.post("/content/npc/map-and-validate", json={"npc_name": "Mira", "ability_scores": FULL_SCORES})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["name"] == "Mira"
    assert body["schema_version"] == "1.0"


def test_npc_map_and_validate_mapping_failure(client):
    resp = client.post("/content/npc/map-and-validate", json={"name": "Mira", "ability_scores": {"str": 10}})
    assert resp.status_code == 422
    detail = resp.json()["detail"]
    assert detail["code"] == "npc_mapping_failed"
    assert detail["result"]["errors"][0] == "Mapping failed"


def test_npc_map_and_validate_validation_failure(client):
    resp = client.post("/content/npc/map-and-validate", json={"name": "Mira", "armor_class": "weird"})
    assert resp.status_code == 422
    detail = resp.json()["detail"]
    assert detail["code"] == "npc_validation_failed"
    assert detail["result"]["validation_errors"].startswith("1. Armor Class")


def test_schema_refresh_and_clear(client, registry):
    assert client.post("/content/item/validate", json={"name": "Rope"}).json()["version"] == "1.0"

    registry.publish("item", "2.0", {"type": "object"})
    resp = client.post("/schemas/item/refresh")
    assert resp.status_code == 200
    assert resp.json() == {"domain": "item", "version": "2.0"}
    assert client.post("/content/item/validate", json={"name": "Rope"}).json()["version"] == "2.0"

    resp = client.delete("/schemas/cache")
    assert resp.json() == {"cleared": 1}
    assert client.delete("/schemas/cache").json() == {"cleared": 0}


def test_schema_refresh_errors(client, registry):
    assert client.post("/schemas/bogus/refresh").status_code == 400
    registry._entries.pop("item")
    resp = client.post("/schemas/item/refresh")
    assert resp.status_code == 404
    assert resp.json() == {"detail": "schema_not_found"}
