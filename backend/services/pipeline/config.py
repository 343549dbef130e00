"""Stage pipeline configuration."""

from enum import Enum

from pydantic import BaseModel, Field

from config import settings


class ExecutionMode(str, Enum):
    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"
    HYBRID = "hybrid"  # parallel groups with bounded fan-out


class PipelineConfig(BaseModel):
    execution_mode: ExecutionMode = ExecutionMode.SEQUENTIAL
    continue_on_error: bool = True
    timeout_ms: int = Field(default=30000, gt=0)
    retry_count: int = Field(default=0, ge=0)
    max_concurrency: int = Field(default=4, ge=1)
    enable_metrics: bool = True
    # False: a failed stage still counts as completed for its dependents
    require_successful_dependencies: bool = True

    @classmethod
    def from_settings(cls, **overrides) -> "PipelineConfig":
        values = {
            "execution_mode": settings.pipeline_execution_mode,
            "continue_on_error": settings.pipeline_continue_on_error,
            "timeout_ms": settings.pipeline_timeout_ms,
            "retry_count": settings.pipeline_retry_count,
            "max_concurrency": settings.pipeline_max_concurrency,
        }
        values.update(overrides)
        return cls(**values)
