"""Runtime configuration helpers.

All environment-driven switches live here so the pipeline, the schema
validator cache, and the API layer import one cached Settings instance.

Env vars (optional) and their roles:
        SCHEMA_REGISTRY_URL      -> Base URL of the external schema registry. Empty -> bundled schemas.
        SCHEMA_REGISTRY_TIMEOUT  -> Seconds before a registry lookup is abandoned.
        FEATURE_NAME_MAX         -> Max characters kept when a plain-string feature becomes a feature name.
        DEBUG_PIPELINE           -> Verbose classification / mapping logging.
        CORS_ORIGINS             -> Comma separated origins for the preview API ("*" for any).
"""

import os
from functools import lru_cache
from typing import List
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central runtime switches.

    Design notes:
    - Simple class instead of pydantic BaseSettings to minimize dependencies.
    - Values read once at process start and memoized via get_settings().
    """

    # ---- Schema registry ----
    SCHEMA_REGISTRY_URL: str = os.getenv("SCHEMA_REGISTRY_URL", "").rstrip("/")
    SCHEMA_REGISTRY_TIMEOUT: float = float(os.getenv("SCHEMA_REGISTRY_TIMEOUT", "10"))

    # ---- Normalization knobs ----
    FEATURE_NAME_MAX: int = int(os.getenv("FEATURE_NAME_MAX", "80"))  # plain-string feature -> name truncation

    # ---- Diagnostics ----
    DEBUG_PIPELINE: bool = os.getenv("DEBUG_PIPELINE", "0") in {"1", "true", "True"}

    # ---- API ----
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()] or ["*"]

    @property
    def uses_remote_registry(self) -> bool:
        return bool(self.SCHEMA_REGISTRY_URL)


@lru_cache
def get_settings() -> Settings:
    """Return cached singleton Settings instance.

    Each worker process resolves environment variables once; later calls are
    plain attribute access.
    """
    return Settings()
