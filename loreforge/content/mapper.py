"""Generated payload -> content block.

``map_generated_content_to_content_block`` is the single entry point used by
the save path: classify the payload, normalize it into its canonical record,
render the Markdown preview and attach both to the block metadata as
``structuredContent = {type, data}``.

``map_and_validate_npc`` is the strict NPC gate: field mapping first, then
JSON Schema validation. Both failure kinds come back as data, never raised.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from loreforge.content.classifier import classify
from loreforge.content.coercion import ensure_array, ensure_object, ensure_string, merge_draft
from loreforge.content.field_mapper import map_to_canonical_structure, normalize_schema_version
from loreforge.content.normalizers.dispatch import normalize
from loreforge.content.rendering.dispatch import render
from loreforge.content.schemas import CanonicalModel, ContentBlock, ContentType, DomainTag
from loreforge.core.config import get_settings
from loreforge.validation.validator import DomainValidator, bundled_npc_validator

logger = logging.getLogger("loreforge.mapper")

CONTENT_TYPE_BY_DOMAIN: Dict[DomainTag, ContentType] = {
    DomainTag.MONSTER: ContentType.MONSTER,
    DomainTag.NPC: ContentType.CHARACTER,
    DomainTag.ITEM: ContentType.ITEM,
    DomainTag.LOCATION: ContentType.LOCATION,
    DomainTag.STORY_ARC: ContentType.STORY_ARC,
    DomainTag.ENCOUNTER: ContentType.SECTION,
}

# checked in order against the deliverable for prose and generic payloads
DELIVERABLE_CONTENT_TYPES = (
    (("outline",), ContentType.OUTLINE),
    (("chapter",), ContentType.CHAPTER),
    (("scene",), ContentType.SECTION),
    (("stat",), ContentType.STAT_BLOCK),
    (("fact", "lore"), ContentType.FACT),
)

DEFAULT_TITLES: Dict[DomainTag, str] = {
    DomainTag.NPC: "Generated NPC",
    DomainTag.MONSTER: "Generated Monster",
    DomainTag.ITEM: "Generated Item",
    DomainTag.LOCATION: "Generated Location",
    DomainTag.STORY_ARC: "Story Arc",
    DomainTag.ENCOUNTER: "Generated Content",
    DomainTag.WRITING: "Draft",
    DomainTag.NONFICTION: "Non-Fiction",
    DomainTag.GENERIC: "Generated Content",
}

OPTIONAL_METADATA = ("canon_alignment_score", "logic_score")
OPTIONAL_TRUTHY_METADATA = ("validation_notes", "balance_notes")
OPTIONAL_LIST_METADATA = ("physics_issues", "conflicts", "proposals")


def infer_content_type(
    domain: DomainTag,
    content_type: Optional[str] = None,
    deliverable: Optional[str] = None,
    generated_content: Any = None,
) -> ContentType:
    """Explicit valid content type wins; then the domain; then deliverable keywords."""
    if content_type in {member.value for member in ContentType}:
        return ContentType(content_type)

    mapped = CONTENT_TYPE_BY_DOMAIN.get(domain)
    if mapped is not None:
        return mapped

    source = ensure_object(generated_content)
    hints = (
        ensure_string(deliverable or source.get("deliverable")).lower(),
        ensure_string(ensure_object(source.get("draft")).get("deliverable")).lower(),
    )
    for tokens, candidate in DELIVERABLE_CONTENT_TYPES:
        if any(token in hint for hint in hints for token in tokens):
            return candidate
    return ContentType.TEXT


def build_common_metadata(
    generated_content: Any,
    deliverable: Optional[str] = None,
    resolved_conflicts: Optional[List[Any]] = None,
    resolved_proposals: Optional[List[Any]] = None,
) -> Dict[str, Any]:
    source = ensure_object(generated_content)
    metadata: Dict[str, Any] = {
        "sources_used": ensure_array(source.get("sources_used")),
        "assumptions": ensure_array(source.get("assumptions")),
        "canon_update": ensure_string(source.get("canon_update")),
        "deliverable": ensure_string(deliverable if deliverable is not None else source.get("deliverable")),
        "difficulty": ensure_string(source.get("difficulty")),
        "rule_base": ensure_string(source.get("rule_base")),
        "raw": generated_content,
        "resolved_conflicts": list(resolved_conflicts or []),
        "resolved_proposals": list(resolved_proposals or []),
    }
    for key in OPTIONAL_METADATA:
        if source.get(key) is not None:
            metadata[key] = source[key]
    for key in OPTIONAL_TRUTHY_METADATA:
        if source.get(key):
            metadata[key] = source[key]
    for key in OPTIONAL_LIST_METADATA:
        if source.get(key):
            metadata[key] = ensure_array(source[key])
    return metadata


def _record_title(record: Any) -> str:
    for attr in ("name", "title"):
        value = getattr(record, attr, None)
        if isinstance(value, str) and value.strip():
            return value
    return ""


def _map_fields(domain: DomainTag, raw: Any) -> Any:
    """Apply the field-variant table to character-style payloads before normalizing."""
    if domain not in (DomainTag.NPC, DomainTag.MONSTER):
        return raw
    mapping = map_to_canonical_structure(merge_draft(raw))
    if get_settings().DEBUG_PIPELINE and (mapping.warnings or mapping.unmapped_fields):
        logger.debug(
            "field_mapping domain=%s warnings=%d unmapped=%s",
            domain.value, len(mapping.warnings), ",".join(mapping.unmapped_fields),
        )
    # a partially resolved ability block is left for the normalizer to default
    return mapping.mapped


def map_generated_content_to_content_block(
    generated_content: Any,
    *,
    content_type: Optional[str] = None,
    deliverable: Optional[str] = None,
    title: Optional[str] = None,
    resolved_proposals: Optional[List[Any]] = None,
    resolved_conflicts: Optional[List[Any]] = None,
) -> ContentBlock:
    domain = classify(generated_content, content_type, deliverable)
    block_type = infer_content_type(domain, content_type, deliverable, generated_content)
    metadata = build_common_metadata(generated_content, deliverable, resolved_conflicts, resolved_proposals)

    record = normalize(domain, _map_fields(domain, generated_content))
    if isinstance(record, CanonicalModel):
        block_title = title or _record_title(record) or DEFAULT_TITLES[domain]
        data = record.to_payload()
    else:
        block_title = title or ensure_string(record.get("title")) or DEFAULT_TITLES[domain]
        data = record

    content = render(domain, record, block_title)
    metadata["structuredContent"] = {"type": domain.value, "data": data}
    logger.info("content_mapped domain=%s type=%s title=%s", domain.value, block_type.value, block_title)
    return ContentBlock(title=block_title, type=block_type, content=content, metadata=metadata)


class NpcValidationResult(BaseModel):
    success: bool
    data: Optional[Dict[str, Any]] = None
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    validation_errors: Optional[str] = None
    raw_errors: Optional[List[Dict[str, Any]]] = None
    schema_version: Optional[str] = None


def map_and_validate_npc(raw: Any, validator: Optional[DomainValidator] = None) -> NpcValidationResult:
    """Map NPC field variants, then validate the mapped payload.

    Without an explicit ``validator`` the packaged NPC schema matching the
    payload's ``schema_version`` is used (1.0 when absent or unrecognised).
    """
    mapping = map_to_canonical_structure(raw)
    if not mapping.success:
        logger.info("npc_mapping_failed errors=%d", len(mapping.errors))
        return NpcValidationResult(
            success=False,
            errors=["Mapping failed", *mapping.errors],
            warnings=mapping.warnings,
        )

    if validator is None:
        version = normalize_schema_version(mapping.mapped.get("schema_version")) or "1.0"
        validator = bundled_npc_validator(version)

    report = validator.validate(mapping.mapped)
    if not report.valid:
        logger.info("npc_validation_failed version=%s errors=%d", validator.version, len(report.errors))
        return NpcValidationResult(
            success=False,
            data=mapping.mapped,
            errors=["Schema validation failed"],
            warnings=mapping.warnings,
            validation_errors=report.details or "Unknown validation error",
            raw_errors=[issue.model_dump() for issue in report.errors],
            schema_version=validator.version,
        )

    return NpcValidationResult(
        success=True,
        data=mapping.mapped,
        warnings=mapping.warnings,
        schema_version=validator.version,
    )
