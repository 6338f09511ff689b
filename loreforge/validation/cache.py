"""Process-wide cache of compiled domain validators.

Get-or-compile per domain. Two concurrent misses for the same domain may both
compile; the later write replaces the earlier one with an equivalent
validator, so no lock is taken.
"""

import logging
from functools import lru_cache
from typing import Dict, List, Optional

from loreforge.validation.registry import SchemaRegistry, build_registry
from loreforge.validation.validator import DomainValidator

logger = logging.getLogger("loreforge.schema")


class SchemaValidatorCache:
    def __init__(self, registry: Optional[SchemaRegistry] = None):
        self.registry = registry or build_registry()
        self._validators: Dict[str, DomainValidator] = {}

    async def _compile(self, domain: str) -> DomainValidator:
        entry = await self.registry.find_active_schema(domain)
        validator = DomainValidator(domain, entry.version, entry.json_schema)
        self._validators[domain] = validator
        logger.info("schema_compiled domain=%s version=%s", domain, entry.version)
        return validator

    async def get_validator(self, domain: str) -> DomainValidator:
        cached = self._validators.get(domain)
        if cached is not None:
            return cached
        return await self._compile(domain)

    async def refresh(self, domain: str) -> DomainValidator:
        """Re-fetch the active schema and replace the cached validator."""
        return await self._compile(domain)

    def clear(self) -> None:
        count = len(self._validators)
        self._validators.clear()
        logger.info("schema_cache_cleared entries=%d", count)

    def cached_domains(self) -> List[str]:
        return sorted(self._validators)


@lru_cache
def get_validator_cache() -> SchemaValidatorCache:
    """Cached singleton cache (registry chosen from settings on first use)."""
    return SchemaValidatorCache()
