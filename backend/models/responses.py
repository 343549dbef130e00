from typing import Any

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str = "ok"
    strategies: list[str] = []
    default_strategy: str = ""
    recognizer_ready: bool = False
    cache_enabled: bool = False
    candidate_count: int = 0


class CacheStatsResponse(BaseModel):
    enabled: bool = False
    stats: dict[str, Any] = {}
