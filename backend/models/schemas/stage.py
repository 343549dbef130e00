"""Stage pipeline contracts: stage results, errors and the pipeline outcome."""

from enum import Enum
from typing import Any

from pydantic import BaseModel


class StageErrorCode(str, Enum):
    VALIDATION_FAILED = "VALIDATION_FAILED"
    EXECUTION_ERROR = "EXECUTION_ERROR"
    MISSING_DEPENDENCY = "MISSING_DEPENDENCY"
    TIMEOUT_ERROR = "TIMEOUT_ERROR"
    PARALLEL_EXECUTION_ERROR = "PARALLEL_EXECUTION_ERROR"
    PIPELINE_ERROR = "PIPELINE_ERROR"


class StageError(BaseModel):
    code: StageErrorCode
    message: str
    stage_name: str | None = None
    details: dict[str, Any] = {}


class StageMetadata(BaseModel):
    stage_name: str
    execution_time_ms: float = 0.0
    confidence: float | None = None
    method: str | None = None
    source: str | None = None
    attempts: int = 1


class StageResult(BaseModel):
    success: bool
    data: Any = None
    errors: list[StageError] = []
    metadata: StageMetadata

    @classmethod
    def failure(
        cls,
        stage_name: str,
        code: StageErrorCode,
        message: str,
        execution_time_ms: float = 0.0,
    ) -> "StageResult":
        return cls(
            success=False,
            errors=[StageError(code=code, message=message, stage_name=stage_name)],
            metadata=StageMetadata(stage_name=stage_name, execution_time_ms=execution_time_ms),
        )


class StageInput(BaseModel):
    text: str = ""
    metadata: dict[str, Any] = {}


class PipelineResult(BaseModel):
    success: bool = False
    results: dict[str, StageResult] = {}
    errors: list[StageError] = []
    total_execution_time_ms: float = 0.0
    extracted_data: dict[str, Any] = {}
    execution_plan: list[list[str]] = []
