"""Schema cache maintenance endpoints.

    POST   /schemas/{domain}/refresh -> re-fetch the active schema and recompile.
    DELETE /schemas/cache            -> drop every compiled validator.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from loreforge.api.routes import parse_domain
from loreforge.validation.cache import SchemaValidatorCache, get_validator_cache
from loreforge.validation.registry import SchemaCompileError, SchemaNotFoundError, SchemaRegistryError

router_schemas = APIRouter()
log = logging.getLogger("loreforge.api")


@router_schemas.post(
    "/schemas/{domain}/refresh",
    responses={404: {"description": "No active schema"}, 502: {"description": "Schema registry failure"}},
)
async def refresh_schema(domain: str, cache: SchemaValidatorCache = Depends(get_validator_cache)):
    tag = parse_domain(domain)
    try:
        validator = await cache.refresh(tag.value)
    except SchemaNotFoundError:
        raise HTTPException(status_code=404, detail="schema_not_found")
    except SchemaCompileError as exc:
        log.warning("schema_refresh_compile_error domain=%s err=%s", tag.value, exc)
        raise HTTPException(status_code=502, detail="schema_compile_error")
    except SchemaRegistryError as exc:
        log.warning("schema_refresh_error domain=%s err=%s", tag.value, exc)
        raise HTTPException(status_code=502, detail="schema_registry_error")
    return {"domain": tag.value, "version": validator.version}


@router_schemas.delete("/schemas/cache")
async def clear_schema_cache(cache: SchemaValidatorCache = Depends(get_validator_cache)):
    cleared = len(cache.cached_domains())
    cache.clear()
    return {"cleared": cleared}
