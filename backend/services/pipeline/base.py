"""Abstract base class for pipeline stages and the cancellation token they observe."""

import logging
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from models.schemas.stage import StageErrorCode, StageInput, StageResult
from services.exceptions import MissingDependencyError, ParsingError, StageExecutionError

logger = logging.getLogger(__name__)


def completed_key(stage_name: str) -> str:
    return f"{stage_name}_completed"


def result_key(stage_name: str) -> str:
    return f"{stage_name}_result"


class CancellationToken:
    """Set by the pipeline when a stage times out.

    Work running in a worker thread cannot be interrupted, so it checks the token
    at its own checkpoints; the pipeline discards anything it produces afterwards.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise StageExecutionError("Stage cancelled")


class BaseStage(ABC):
    """Base class for pipeline stages.

    Subclasses must implement:
        - name: identifier other stages list in ``dependencies``
        - perform(stage_input, context, token): do the work and return a StageResult

    ``context`` is a read-only snapshot of the run context. The pipeline manager
    writes ``<name>_completed`` / ``<name>_result`` after a stage finishes.
    """

    name: str = ""
    priority: int = 0
    dependencies: tuple[str, ...] = ()

    def can_execute(self, context: Mapping[str, Any]) -> bool:
        return all(context.get(completed_key(dep)) is True for dep in self.dependencies)

    def missing_dependencies(self, context: Mapping[str, Any]) -> list[str]:
        return [dep for dep in self.dependencies if context.get(completed_key(dep)) is not True]

    async def execute(
        self,
        stage_input: StageInput,
        context: Mapping[str, Any],
        token: CancellationToken | None = None,
    ) -> StageResult:
        """Check dependencies, run ``perform`` and validate its data; never raises."""
        start = time.perf_counter()
        logger.debug("Starting stage: %s", self.name)

        try:
            if not self.can_execute(context):
                raise MissingDependencyError(self.name, self.missing_dependencies(context))

            result = await self.perform(stage_input, context, token or CancellationToken())

            if result.success and result.data is not None and not self.validate(result.data):
                logger.warning("Validation failed for stage: %s", self.name)
                result = StageResult.failure(
                    self.name,
                    StageErrorCode.VALIDATION_FAILED,
                    f"Validation failed for stage: {self.name}",
                )
        except ParsingError as e:
            logger.warning("Stage %s failed: %s", self.name, e)
            result = StageResult.failure(self.name, e.code, str(e))
        except Exception as e:
            logger.warning("Stage %s raised %s: %s", self.name, type(e).__name__, e)
            result = StageResult.failure(
                self.name, StageErrorCode.EXECUTION_ERROR, str(e) or type(e).__name__,
            )

        elapsed_ms = (time.perf_counter() - start) * 1000
        result.metadata = result.metadata.model_copy(
            update={"stage_name": self.name, "execution_time_ms": round(elapsed_ms, 2)}
        )
        logger.debug(
            "%s stage: %s in %.1fms", "Completed" if result.success else "Failed", self.name, elapsed_ms,
        )
        return result

    @abstractmethod
    async def perform(
        self,
        stage_input: StageInput,
        context: Mapping[str, Any],
        token: CancellationToken,
    ) -> StageResult:
        """Run the stage. Returns a StageResult whose ``data`` is the stage output."""

    def validate(self, data: Any) -> bool:
        return data is not None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, priority={self.priority})"
