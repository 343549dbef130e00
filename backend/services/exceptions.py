"""Error taxonomy for the parsing pipeline.

Field-level failures never surface as exceptions to callers: extractors are run
behind a guard, and the engine, pipeline and matcher turn these into failed
result objects. The classes exist so internal layers can raise and catch by kind.
"""

from models.schemas.stage import StageErrorCode


class ParsingError(Exception):
    """Base class for parsing and orchestration failures."""

    code: StageErrorCode = StageErrorCode.PIPELINE_ERROR


class StageValidationError(ParsingError):
    code = StageErrorCode.VALIDATION_FAILED


class StageExecutionError(ParsingError):
    code = StageErrorCode.EXECUTION_ERROR


class MissingDependencyError(StageExecutionError):
    code = StageErrorCode.MISSING_DEPENDENCY

    def __init__(self, stage_name: str, missing: list[str]):
        self.stage_name = stage_name
        self.missing = missing
        super().__init__(f"Missing dependencies: {', '.join(missing)}")


class StageTimeoutError(ParsingError):
    code = StageErrorCode.TIMEOUT_ERROR

    def __init__(self, stage_name: str, timeout_ms: int):
        self.stage_name = stage_name
        self.timeout_ms = timeout_ms
        super().__init__(f"Stage execution timeout: {timeout_ms}ms")


class CircularDependencyError(ParsingError):
    def __init__(self, remaining: list[str]):
        self.remaining = remaining
        super().__init__(f"Circular dependency detected among stages: {', '.join(remaining)}")


class UnknownStrategyError(ParsingError):
    def __init__(self, name: str, suggestion: str | None = None):
        self.name = name
        self.suggestion = suggestion
        message = f'Strategy "{name}" not found'
        if suggestion:
            message += f' (did you mean "{suggestion}"?)'
        super().__init__(message)


class PipelineError(ParsingError):
    pass
