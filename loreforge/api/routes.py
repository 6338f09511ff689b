"""Content pipeline API endpoints (classify, map, normalize, storage shape, validate)."""

import logging
import uuid
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel, Field

from loreforge.content.classifier import classify
from loreforge.content.mapper import map_and_validate_npc, map_generated_content_to_content_block
from loreforge.content.normalizers.dispatch import normalize
from loreforge.content.rendering.dispatch import render
from loreforge.content.schemas import CanonicalModel, ContentBlock, DomainTag
from loreforge.content.serializer import to_storage_shape
from loreforge.validation.cache import SchemaValidatorCache, get_validator_cache
from loreforge.validation.registry import SchemaCompileError, SchemaNotFoundError, SchemaRegistryError
from loreforge.validation.validator import ValidationReport

logger = logging.getLogger("loreforge.api")
router = APIRouter()


class ClassifyRequest(BaseModel):
    payload: Dict[str, Any] = Field(default_factory=dict)
    type_hint: Optional[str] = None
    deliverable: Optional[str] = None


class MapRequest(BaseModel):
    generated_content: Dict[str, Any] = Field(default_factory=dict)
    content_type: Optional[str] = None
    deliverable: Optional[str] = None
    title: Optional[str] = None
    resolved_proposals: Optional[List[Any]] = None
    resolved_conflicts: Optional[List[Any]] = None


class StorageShapeRequest(BaseModel):
    payload: Dict[str, Any] = Field(default_factory=dict)
    existing_raw: Optional[Dict[str, Any]] = None


def _req_id() -> str:
    return uuid.uuid4().hex[:12]


def parse_domain(domain: str) -> DomainTag:
    """Path segment -> DomainTag; raises 400 unknown_domain."""
    try:
        return DomainTag(domain.strip().lower())
    except ValueError:
        logger.warning("unknown_domain domain=%s", domain)
        raise HTTPException(400, "unknown_domain")


def _payload(record: Any) -> Dict[str, Any]:
    return record.to_payload() if isinstance(record, CanonicalModel) else record


async def validator_for(domain: DomainTag, cache: SchemaValidatorCache):
    """Cached validator for ``domain`` with registry failures mapped to HTTP errors."""
    try:
        return await cache.get_validator(domain.value)
    except SchemaNotFoundError:
        raise HTTPException(404, "schema_not_found")
    except SchemaCompileError as exc:
        logger.warning("schema_compile_error domain=%s err=%s", domain.value, exc)
        raise HTTPException(502, "schema_compile_error")
    except SchemaRegistryError as exc:
        logger.warning("schema_registry_error domain=%s err=%s", domain.value, exc)
        raise HTTPException(502, "schema_registry_error")


@router.post("/content/classify", summary="Infer the content domain of a raw payload")
async def classify_content(req: ClassifyRequest):
    domain = classify(req.payload, req.type_hint, req.deliverable)
    return {"domain": domain.value}


@router.post("/content/map", summary="Map a generated payload to a content block", response_model=ContentBlock)
async def map_content(req: MapRequest):
    rid = _req_id()
    block = map_generated_content_to_content_block(
        req.generated_content,
        content_type=req.content_type,
        deliverable=req.deliverable,
        title=req.title,
        resolved_proposals=req.resolved_proposals,
        resolved_conflicts=req.resolved_conflicts,
    )
    logger.info("map_success request_id=%s type=%s domain=%s", rid, block.type.value, block.structured_content.get("type"))
    return block


@router.post(
    "/content/npc/map-and-validate",
    summary="Map NPC field variants and validate against the NPC schema",
    responses={422: {"description": "Mapping or validation failed"}},
)
async def npc_map_and_validate(payload: Dict[str, Any] = Body(...)):
    result = map_and_validate_npc(payload)
    if not result.success:
        code = "npc_mapping_failed" if result.data is None else "npc_validation_failed"
        raise HTTPException(422, {"code": code, "result": result.model_dump()})
    return result


@router.post("/content/{domain}/normalize", summary="Normalize a raw payload and render its preview")
async def normalize_content(domain: str, payload: Dict[str, Any] = Body(...)):
    tag = parse_domain(domain)
    record = normalize(tag, payload)
    return {"record": _payload(record), "content": render(tag, record)}


@router.post("/content/{domain}/storage-shape", summary="Normalize then flatten back to the stored shape")
async def storage_shape(domain: str, req: StorageShapeRequest):
    tag = parse_domain(domain)
    record = normalize(tag, req.payload)
    return to_storage_shape(record, req.existing_raw)


@router.post(
    "/content/{domain}/validate",
    summary="Normalize a raw payload and validate it against the active domain schema",
    response_model=ValidationReport,
    responses={404: {"description": "No active schema"}, 502: {"description": "Schema registry failure"}},
)
async def validate_content(
    domain: str,
    payload: Dict[str, Any] = Body(...),
    cache: SchemaValidatorCache = Depends(get_validator_cache),
):
    tag = parse_domain(domain)
    validator = await validator_for(tag, cache)
    report = validator.validate(normalize(tag, payload))
    logger.info("validate domain=%s version=%s valid=%s errors=%d", tag.value, validator.version, report.valid, len(report.errors))
    return report
