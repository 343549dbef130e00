import os
from pydantic_settings import BaseSettings


def _parse_cors_origins() -> list[str] | None:
    """Parse CORS_ORIGINS env var as comma-separated string or JSON list."""
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return None
    if raw.startswith("["):
        import json
        return json.loads(raw)
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseSettings):
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]
    debug: bool = False

    # Parser engine
    default_strategy: str = "standard"  # "standard" | "flexible" | "hybrid" | "nlp"
    fallback_confidence_threshold: float = 0.5

    # Stage pipeline
    pipeline_execution_mode: str = "sequential"  # "sequential" | "parallel" | "hybrid"
    pipeline_timeout_ms: int = 30000
    pipeline_continue_on_error: bool = True
    pipeline_retry_count: int = 0
    pipeline_max_concurrency: int = 4

    # Matching
    match_min_score: int = 20
    match_max_results: int = 10
    candidates_file: str = ""  # optional JSON list of employee records

    # Parse result cache
    cache_enabled: bool = True
    cache_ttl_seconds: int = 3600
    cache_max_entries: int = 1000

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})
