"""Compiled per-domain validators and their reports.

``DomainValidator`` wraps one compiled ``Draft202012Validator``. ``validate``
collects every violation and never raises on invalid data; compile problems
surface once, at construction, as ``SchemaCompileError``.
"""

import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError
from pydantic import BaseModel, Field

from loreforge.content.schemas import CanonicalModel
from loreforge.validation.bundled_schemas import NPC_SCHEMAS_BY_VERSION
from loreforge.validation.formatting import format_validation_errors, instance_path
from loreforge.validation.registry import SchemaCompileError

logger = logging.getLogger("loreforge.schema")


class ValidationIssue(BaseModel):
    path: str
    keyword: str
    message: str


class ValidationReport(BaseModel):
    valid: bool
    errors: List[ValidationIssue] = Field(default_factory=list)
    details: Optional[str] = None
    domain: Optional[str] = None
    version: Optional[str] = None


class DomainValidator:
    def __init__(self, domain: str, version: str, schema: Dict[str, Any]):
        try:
            Draft202012Validator.check_schema(schema)
        except SchemaError as exc:
            raise SchemaCompileError(domain, exc.message) from exc
        self.domain = domain
        self.version = version
        self.schema = schema
        self._validator = Draft202012Validator(schema, format_checker=Draft202012Validator.FORMAT_CHECKER)

    def validate(self, record: Any) -> ValidationReport:
        """Validate a canonical record (or an already-flattened dict)."""
        instance = record.to_payload() if isinstance(record, CanonicalModel) else record
        violations = sorted(self._validator.iter_errors(instance), key=lambda e: e.json_path)

        if not violations:
            return ValidationReport(valid=True, domain=self.domain, version=self.version)

        logger.debug("validation_failed domain=%s version=%s errors=%d", self.domain, self.version, len(violations))
        return ValidationReport(
            valid=False,
            errors=[
                ValidationIssue(path=instance_path(v), keyword=str(v.validator), message=v.message)
                for v in violations
            ],
            details=format_validation_errors(violations),
            domain=self.domain,
            version=self.version,
        )


@lru_cache
def bundled_npc_validator(version: str = "1.0") -> DomainValidator:
    """Validator for the packaged NPC schema of ``version`` ("1.0" or "1.1")."""
    schema = NPC_SCHEMAS_BY_VERSION.get(version, NPC_SCHEMAS_BY_VERSION["1.0"])
    return DomainValidator("npc", version if version in NPC_SCHEMAS_BY_VERSION else "1.0", schema)
