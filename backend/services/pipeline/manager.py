"""Stage pipeline: dependency-ordered execution with per-stage timeouts.

Plan construction:
    sequential  one ordered list, priority descending then fewest dependencies
    parallel    topological groups, every member of a group runs concurrently
    hybrid      topological groups, fan-out bounded by ``max_concurrency``

The run context is written only by the manager, after a stage has finished, and
each stage receives a read-only snapshot. A stage that times out is reported as
failed and its cancellation token is set; whatever it produces later is dropped.
"""

import asyncio
import logging
import time
from types import MappingProxyType
from typing import Any, Mapping

from models.schemas.stage import PipelineResult, StageError, StageErrorCode, StageInput, StageResult
from services.exceptions import CircularDependencyError, ParsingError, PipelineError, StageTimeoutError
from services.pipeline.base import BaseStage, CancellationToken, completed_key, result_key
from services.pipeline.config import ExecutionMode, PipelineConfig

logger = logging.getLogger(__name__)

RETRYABLE_CODES = frozenset({StageErrorCode.EXECUTION_ERROR, StageErrorCode.TIMEOUT_ERROR})


class PipelineManager:
    def __init__(self, config: PipelineConfig | None = None):
        self.config = config or PipelineConfig()
        self._stages: dict[str, BaseStage] = {}

    # ------------------------------------------------------------------
    # Stage management
    # ------------------------------------------------------------------

    def add_stage(self, stage: BaseStage) -> "PipelineManager":
        if not stage.name:
            raise PipelineError(f"Cannot add unnamed stage {stage!r}")
        if stage.name in self._stages:
            logger.warning("Replacing stage: %s", stage.name)
        self._stages[stage.name] = stage
        logger.debug("Added stage: %s (priority: %d)", stage.name, stage.priority)
        return self

    def remove_stage(self, stage_name: str) -> "PipelineManager":
        if self._stages.pop(stage_name, None) is not None:
            logger.debug("Removed stage: %s", stage_name)
        return self

    def get_stage(self, stage_name: str) -> BaseStage | None:
        return self._stages.get(stage_name)

    def list_stages(self) -> list[str]:
        return list(self._stages)

    def __len__(self) -> int:
        return len(self._stages)

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    def create_execution_plan(self) -> list[list[BaseStage]]:
        """Group stages for execution.

        Dependencies on stages that were never added do not hold back grouping;
        such stages fail with MISSING_DEPENDENCY when they run.

        Raises:
            CircularDependencyError: no stage of the remaining set can be scheduled.
        """
        ordered = sorted(self._stages.values(), key=lambda s: (-s.priority, len(s.dependencies)))
        if not ordered:
            return []
        if self.config.execution_mode == ExecutionMode.SEQUENTIAL:
            return [ordered]

        groups: list[list[BaseStage]] = []
        processed: set[str] = set()
        remaining = ordered
        while remaining:
            ready = [
                stage for stage in remaining
                if all(dep in processed or dep not in self._stages for dep in stage.dependencies)
            ]
            if not ready:
                raise CircularDependencyError([stage.name for stage in remaining])
            groups.append(ready)
            processed.update(stage.name for stage in ready)
            remaining = [stage for stage in remaining if stage.name not in processed]
        return groups

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def execute(self, stage_input: StageInput | str) -> PipelineResult:
        """Run every stage according to the plan; never raises."""
        if isinstance(stage_input, str):
            stage_input = StageInput(text=stage_input)

        start = time.perf_counter()
        context: dict[str, Any] = {"input": stage_input}
        results: dict[str, StageResult] = {}
        errors: list[StageError] = []
        plan_names: list[list[str]] = []

        logger.info(
            "Starting pipeline with %d stages (%s)", len(self._stages), self.config.execution_mode.value,
        )

        try:
            plan = self.create_execution_plan()
            plan_names = [[stage.name for stage in group] for group in plan]
            logger.info("Execution plan: %s", " -> ".join(", ".join(g) for g in plan_names))

            for group in plan:
                group_results = await self._execute_group(group, stage_input, context)
                halted = False
                for name, result in group_results.items():
                    results[name] = result
                    if not result.success:
                        errors.extend(result.errors)
                        if not self.config.continue_on_error:
                            halted = True
                if halted:
                    logger.info("Stopping pipeline after failed stage")
                    break
        except ParsingError as e:
            logger.error("Pipeline aborted: %s", e)
            errors.append(self._pipeline_error(e))
            return self._failed(results, errors, start, plan_names)
        except Exception as e:
            logger.exception("Pipeline execution failed")
            errors.append(self._pipeline_error(e))
            return self._failed(results, errors, start, plan_names)

        success_count = sum(1 for r in results.values() if r.success)
        if self.config.continue_on_error:
            success = bool(results) and success_count > 0
        else:
            success = bool(results) and success_count == len(results) and not errors

        total_ms = (time.perf_counter() - start) * 1000
        if self.config.enable_metrics and results:
            logger.info(
                "Pipeline %s in %.1fms, %d/%d stages succeeded",
                "completed" if success else "failed", total_ms, success_count, len(results),
            )

        return PipelineResult(
            success=success,
            results=results,
            errors=errors,
            total_execution_time_ms=round(total_ms, 2),
            extracted_data={
                name: r.data for name, r in results.items() if r.success and r.data is not None
            },
            execution_plan=plan_names,
        )

    async def _execute_group(
        self,
        group: list[BaseStage],
        stage_input: StageInput,
        context: dict[str, Any],
    ) -> dict[str, StageResult]:
        results: dict[str, StageResult] = {}

        if self.config.execution_mode == ExecutionMode.SEQUENTIAL or len(group) == 1:
            for stage in group:
                result = await self._run_stage(stage, stage_input, MappingProxyType(dict(context)))
                results[stage.name] = result
                self._record(stage, result, context)
                if not result.success and not self.config.continue_on_error:
                    break
            return results

        # One snapshot for the whole group: members never see each other's output
        snapshot = MappingProxyType(dict(context))
        logger.debug("Executing %d stages concurrently", len(group))

        if self.config.execution_mode == ExecutionMode.HYBRID:
            semaphore = asyncio.Semaphore(self.config.max_concurrency)

            async def run(stage: BaseStage) -> StageResult:
                async with semaphore:
                    return await self._run_stage(stage, stage_input, snapshot)
        else:
            async def run(stage: BaseStage) -> StageResult:
                return await self._run_stage(stage, stage_input, snapshot)

        outcomes = await asyncio.gather(*(run(stage) for stage in group), return_exceptions=True)

        for stage, outcome in zip(group, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning("Stage %s failed in parallel group: %s", stage.name, outcome)
                result = StageResult.failure(
                    stage.name,
                    StageErrorCode.PARALLEL_EXECUTION_ERROR,
                    str(outcome) or "Parallel execution failed",
                )
            else:
                result = outcome
            results[stage.name] = result
            self._record(stage, result, context)
        return results

    async def _run_stage(
        self,
        stage: BaseStage,
        stage_input: StageInput,
        snapshot: Mapping[str, Any],
    ) -> StageResult:
        attempts = 0
        while True:
            attempts += 1
            result = await self._run_with_timeout(stage, stage_input, snapshot)
            if result.success or attempts > self.config.retry_count:
                break
            if not any(error.code in RETRYABLE_CODES for error in result.errors):
                break
            logger.info("Retrying stage %s (attempt %d)", stage.name, attempts + 1)
        result.metadata = result.metadata.model_copy(update={"attempts": attempts})
        return result

    async def _run_with_timeout(
        self,
        stage: BaseStage,
        stage_input: StageInput,
        snapshot: Mapping[str, Any],
    ) -> StageResult:
        token = CancellationToken()
        timeout_ms = self.config.timeout_ms
        try:
            return await asyncio.wait_for(
                stage.execute(stage_input, snapshot, token), timeout=timeout_ms / 1000,
            )
        except asyncio.TimeoutError:
            token.cancel()
            error = StageTimeoutError(stage.name, timeout_ms)
            logger.warning("Stage %s timed out after %dms", stage.name, timeout_ms)
            return StageResult.failure(
                stage.name, error.code, str(error), execution_time_ms=float(timeout_ms),
            )
        except Exception as e:
            logger.warning("Stage %s raised %s: %s", stage.name, type(e).__name__, e)
            return StageResult.failure(
                stage.name, StageErrorCode.EXECUTION_ERROR, str(e) or type(e).__name__,
            )

    def _record(self, stage: BaseStage, result: StageResult, context: dict[str, Any]) -> None:
        """Publish a finished stage to the run context."""
        if result.success:
            context[completed_key(stage.name)] = True
            context[result_key(stage.name)] = result.data
        elif not self.config.require_successful_dependencies:
            context[completed_key(stage.name)] = True

    def _pipeline_error(self, error: Exception) -> StageError:
        return StageError(
            code=StageErrorCode.PIPELINE_ERROR,
            message=str(error) or "Unknown pipeline error",
            stage_name="PipelineManager",
        )

    def _failed(
        self,
        results: dict[str, StageResult],
        errors: list[StageError],
        start: float,
        plan_names: list[list[str]],
    ) -> PipelineResult:
        return PipelineResult(
            success=False,
            results=results,
            errors=errors,
            total_execution_time_ms=round((time.perf_counter() - start) * 1000, 2),
            execution_plan=plan_names,
        )
