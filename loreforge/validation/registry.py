"""Schema registry clients.

A registry answers one question: which schema is active for a domain right
now. ``BundledSchemaRegistry`` serves the schemas packaged with loreforge;
``HttpSchemaRegistry`` asks an external registry service over HTTP.

Errors:
    SchemaNotFoundError -> no active schema for the domain.
    SchemaRegistryError -> transport failure or malformed registry response.
    SchemaCompileError  -> the active schema is not a valid JSON Schema
                           (raised by the validator cache at compile time).
"""

import copy
import logging
from typing import Any, Dict, Optional, Tuple

import httpx
from pydantic import BaseModel, ConfigDict, Field

from loreforge.core.config import get_settings
from loreforge.validation.bundled_schemas import BUNDLED_SCHEMAS

logger = logging.getLogger("loreforge.schema")


class SchemaRegistryError(Exception):
    """Registry lookup failed."""


class SchemaNotFoundError(SchemaRegistryError):
    def __init__(self, domain: str):
        super().__init__(f'Active schema for domain "{domain}" not found')
        self.domain = domain


class SchemaCompileError(SchemaRegistryError):
    def __init__(self, domain: str, reason: str):
        super().__init__(f'Schema entry for domain "{domain}" is invalid: {reason}')
        self.domain = domain
        self.reason = reason


class SchemaEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    domain: str
    version: str
    json_schema: Dict[str, Any] = Field(default_factory=dict, alias="schema")


class SchemaRegistry:
    """Interface: ``find_active_schema(domain)`` returns the active entry."""

    async def find_active_schema(self, domain: str) -> SchemaEntry:
        raise NotImplementedError


class BundledSchemaRegistry(SchemaRegistry):
    """In-memory registry seeded from ``bundled_schemas.BUNDLED_SCHEMAS``.

    ``publish`` replaces the active entry for a domain, which is how tests and
    embedding applications swap a schema before calling ``refresh``.
    """

    def __init__(self, schemas: Optional[Dict[str, Tuple[str, Dict[str, Any]]]] = None):
        source = BUNDLED_SCHEMAS if schemas is None else schemas
        self._entries: Dict[str, SchemaEntry] = {
            domain: SchemaEntry(domain=domain, version=version, schema=copy.deepcopy(schema))
            for domain, (version, schema) in source.items()
        }

    def publish(self, domain: str, version: str, schema: Dict[str, Any]) -> None:
        self._entries[domain] = SchemaEntry(domain=domain, version=version, schema=schema)

    async def find_active_schema(self, domain: str) -> SchemaEntry:
        entry = self._entries.get(domain)
        if entry is None:
            raise SchemaNotFoundError(domain)
        return entry


class HttpSchemaRegistry(SchemaRegistry):
    """Registry service client: ``GET {base_url}/schemas/{domain}/active``.

    Expected response body: ``{"domain": ..., "version": ..., "schema": {...}}``.
    A 404 maps to ``SchemaNotFoundError``; any other failure to
    ``SchemaRegistryError``. Pass ``client`` to reuse a configured
    ``httpx.AsyncClient`` (tests use ``httpx.MockTransport``).
    """

    def __init__(self, base_url: str, *, timeout: float = 10.0, client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    async def _get(self, url: str) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(url, timeout=self.timeout)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(url)

    async def find_active_schema(self, domain: str) -> SchemaEntry:
        url = f"{self.base_url}/schemas/{domain}/active"
        try:
            resp = await self._get(url)
        except httpx.HTTPError as exc:
            logger.warning("registry_fetch_error domain=%s url=%s err=%s", domain, url, exc)
            raise SchemaRegistryError(f"registry request failed for {domain}: {exc}") from exc

        if resp.status_code == 404:
            raise SchemaNotFoundError(domain)
        if resp.status_code != 200:
            logger.warning("registry_bad_status domain=%s status=%s", domain, resp.status_code)
            raise SchemaRegistryError(f"registry returned {resp.status_code} for {domain}")

        try:
            body = resp.json()
        except ValueError as exc:
            raise SchemaRegistryError(f"registry returned non-JSON body for {domain}") from exc

        schema = body.get("schema") if isinstance(body, dict) else None
        if not isinstance(schema, dict):
            raise SchemaCompileError(domain, "missing schema object")

        logger.debug("registry_fetch domain=%s version=%s", domain, body.get("version"))
        return SchemaEntry(domain=domain, version=str(body.get("version") or "unknown"), schema=schema)


def build_registry() -> SchemaRegistry:
    """Registry selected by configuration: remote when SCHEMA_REGISTRY_URL is set."""
    settings = get_settings()
    if settings.uses_remote_registry:
        return HttpSchemaRegistry(settings.SCHEMA_REGISTRY_URL, timeout=settings.SCHEMA_REGISTRY_TIMEOUT)
    return BundledSchemaRegistry()
