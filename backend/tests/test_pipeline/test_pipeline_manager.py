"""Tests for the stage pipeline manager."""

import asyncio
import time

import pytest

from models.schemas.extraction import ExtractionMethod, ExtractionResult
from models.schemas.stage import StageErrorCode, StageInput, StageMetadata, StageResult
from services.exceptions import PipelineError, StageValidationError
from services.extractors.base import FieldExtractor
from services.pipeline.base import BaseStage, CancellationToken, completed_key, result_key
from services.pipeline.config import ExecutionMode, PipelineConfig
from services.pipeline.manager import PipelineManager
from services.pipeline.stages import ExtractorStage, PreprocessStage


def ok(name, data):
    return StageResult(success=True, data=data, metadata=StageMetadata(stage_name=name))


class FuncStage(BaseStage):
    """Stage whose output is computed by ``func(stage_input, context)``."""

    def __init__(self, name, func=None, priority=0, dependencies=(), delay=0.0):
        self.name = name
        self.func = func
        self.priority = priority
        self.dependencies = tuple(dependencies)
        self.delay = delay
        self.calls = 0
        self.token = None
        self.seen_context = None

    async def perform(self, stage_input, context, token):
        self.calls += 1
        self.token = token
        self.seen_context = context
        if self.delay:
            await asyncio.sleep(self.delay)
        value = self.func(stage_input, context) if self.func else self.name
        return ok(self.name, value)


def fail(stage_input, context):
    raise RuntimeError("stage exploded")


class FlakyStage(BaseStage):
    name = "flaky"

    def __init__(self, failures):
        self.failures = failures
        self.calls = 0

    async def perform(self, stage_input, context, token):
        self.calls += 1
        if self.calls <= self.failures:
            raise RuntimeError(f"failure {self.calls}")
        return ok(self.name, "done")


class SleepyExtractor(FieldExtractor):
    """Blocks its worker thread, so a timeout cannot interrupt it."""

    name = "slow"

    def __init__(self, seconds):
        self.seconds = seconds
        self.finished = False

    def extract(self, text, context=None):
        time.sleep(self.seconds)
        self.finished = True
        return ExtractionResult(value="late", confidence=0.9, method=ExtractionMethod.PATTERN)


class ConcurrencyTracker:
    def __init__(self):
        self.active = 0
        self.peak = 0

    def stage(self, name):
        tracker = self

        class TrackedStage(BaseStage):
            async def perform(self, stage_input, context, token):
                tracker.active += 1
                tracker.peak = max(tracker.peak, tracker.active)
                await asyncio.sleep(0.02)
                tracker.active -= 1
                return ok(self.name, None)

        stage = TrackedStage()
        stage.name = name
        return stage


def manager(**config):
    return PipelineManager(PipelineConfig(**config))


# ---------------------------------------------------------------------------
# Stage management and planning
# ---------------------------------------------------------------------------

class TestStageManagement:
    def test_chaining(self):
        pipeline = manager().add_stage(FuncStage("a")).add_stage(FuncStage("b"))
        assert pipeline.list_stages() == ["a", "b"]
        assert len(pipeline) == 2

    def test_remove_and_get(self):
        pipeline = manager().add_stage(FuncStage("a")).add_stage(FuncStage("b"))
        assert pipeline.remove_stage("a") is pipeline
        assert pipeline.get_stage("a") is None
        assert pipeline.get_stage("b").name == "b"
        pipeline.remove_stage("missing")
        assert pipeline.list_stages() == ["b"]

    def test_unnamed_stage_rejected(self):
        with pytest.raises(PipelineError):
            manager().add_stage(FuncStage(""))

    def test_same_name_replaces(self):
        replacement = FuncStage("a", priority=5)
        pipeline = manager().add_stage(FuncStage("a")).add_stage(replacement)
        assert pipeline.get_stage("a") is replacement
        assert len(pipeline) == 1


class TestExecutionPlan:
    def test_sequential_is_one_ordered_group(self):
        pipeline = manager()
        pipeline.add_stage(FuncStage("low", priority=1))
        pipeline.add_stage(FuncStage("dep", priority=5, dependencies=["x"]))
        pipeline.add_stage(FuncStage("high", priority=5))
        plan = pipeline.create_execution_plan()
        assert [[s.name for s in g] for g in plan] == [["high", "dep", "low"]]

    def test_parallel_groups(self):
        pipeline = manager(execution_mode=ExecutionMode.PARALLEL)
        pipeline.add_stage(FuncStage("a", priority=100))
        pipeline.add_stage(FuncStage("b", dependencies=["a"]))
        pipeline.add_stage(FuncStage("c", dependencies=["a"]))
        pipeline.add_stage(FuncStage("d", dependencies=["b", "c"]))
        plan = pipeline.create_execution_plan()
        assert [[s.name for s in g] for g in plan] == [["a"], ["b", "c"], ["d"]]

    def test_unknown_dependency_does_not_block_grouping(self):
        pipeline = manager(execution_mode=ExecutionMode.PARALLEL)
        pipeline.add_stage(FuncStage("a", dependencies=["ghost"]))
        assert [[s.name for s in g] for g in pipeline.create_execution_plan()] == [["a"]]

    def test_empty(self):
        assert manager().create_execution_plan() == []


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------

class TestExecution:
    @pytest.mark.asyncio
    async def test_dependent_stage_reads_result(self):
        pipeline = manager()
        pipeline.add_stage(FuncStage("a", lambda i, c: f"A-{i.text}", priority=10))
        pipeline.add_stage(FuncStage("b", lambda i, c: f"B-{c[result_key('a')]}", dependencies=["a"]))
        result = await pipeline.execute("processed")
        assert result.success
        assert result.results["b"].data == "B-A-processed"
        assert result.extracted_data == {"a": "A-processed", "b": "B-A-processed"}
        assert result.execution_plan == [["a", "b"]]
        assert result.total_execution_time_ms >= 0

    @pytest.mark.asyncio
    async def test_accepts_stage_input(self):
        pipeline = manager().add_stage(FuncStage("a", lambda i, c: i.metadata["source"]))
        result = await pipeline.execute(StageInput(text="x", metadata={"source": "mail"}))
        assert result.extracted_data["a"] == "mail"

    @pytest.mark.asyncio
    async def test_no_stages(self):
        result = await manager().execute("text")
        assert not result.success
        assert result.execution_plan == []

    @pytest.mark.asyncio
    async def test_continue_on_error(self):
        pipeline = manager(continue_on_error=True)
        pipeline.add_stage(FuncStage("a", priority=10))
        pipeline.add_stage(FuncStage("broken", fail))
        result = await pipeline.execute("text")
        assert result.success
        assert len(result.errors) == 1
        assert result.errors[0].code == StageErrorCode.EXECUTION_ERROR
        assert result.errors[0].stage_name == "broken"
        assert result.errors[0].message == "stage exploded"
        assert "broken" not in result.extracted_data

    @pytest.mark.asyncio
    async def test_stop_on_error(self):
        after = FuncStage("after")
        pipeline = manager(continue_on_error=False)
        pipeline.add_stage(FuncStage("broken", fail, priority=10))
        pipeline.add_stage(after)
        result = await pipeline.execute("text")
        assert not result.success
        assert "after" not in result.results
        assert after.calls == 0

    @pytest.mark.asyncio
    async def test_stop_on_error_between_groups(self):
        pipeline = manager(continue_on_error=False, execution_mode=ExecutionMode.PARALLEL)
        pipeline.add_stage(FuncStage("a", fail))
        pipeline.add_stage(FuncStage("b"))
        pipeline.add_stage(FuncStage("c", dependencies=["b"]))
        result = await pipeline.execute("text")
        assert not result.success
        assert set(result.results) == {"a", "b"}

    @pytest.mark.asyncio
    async def test_parallel_group_runs_concurrently(self):
        pipeline = manager(execution_mode=ExecutionMode.PARALLEL)
        pipeline.add_stage(FuncStage("x", delay=0.1))
        pipeline.add_stage(FuncStage("y", delay=0.1))
        start = time.perf_counter()
        result = await pipeline.execute("text")
        elapsed = time.perf_counter() - start
        assert result.success
        assert result.execution_plan == [["x", "y"]]
        assert elapsed < 0.18

    @pytest.mark.asyncio
    async def test_group_members_share_one_snapshot(self):
        first = FuncStage("first")
        second = FuncStage("second")
        pipeline = manager(execution_mode=ExecutionMode.PARALLEL)
        pipeline.add_stage(first).add_stage(second)
        await pipeline.execute("text")
        assert completed_key("first") not in second.seen_context
        assert completed_key("second") not in first.seen_context

    @pytest.mark.asyncio
    async def test_context_is_read_only(self):
        def write(stage_input, context):
            context["hijack"] = True

        result = await manager().add_stage(FuncStage("writer", write)).execute("text")
        assert result.results["writer"].errors[0].code == StageErrorCode.EXECUTION_ERROR

    @pytest.mark.asyncio
    async def test_hybrid_bounds_concurrency(self):
        tracker = ConcurrencyTracker()
        pipeline = manager(execution_mode=ExecutionMode.HYBRID, max_concurrency=2)
        for name in ("s1", "s2", "s3", "s4"):
            pipeline.add_stage(tracker.stage(name))
        result = await pipeline.execute("text")
        assert result.success
        assert tracker.peak == 2

    @pytest.mark.asyncio
    async def test_circular_dependency(self):
        pipeline = manager(execution_mode=ExecutionMode.PARALLEL)
        pipeline.add_stage(FuncStage("a", dependencies=["b"]))
        pipeline.add_stage(FuncStage("b", dependencies=["a"]))
        result = await pipeline.execute("text")
        assert not result.success
        assert result.errors[0].code == StageErrorCode.PIPELINE_ERROR
        assert result.errors[0].stage_name == "PipelineManager"
        assert "Circular dependency" in result.errors[0].message


class TestDependencies:
    @pytest.mark.asyncio
    async def test_missing_dependency(self):
        stage = FuncStage("lonely", dependencies=["ghost"])
        result = await manager().add_stage(stage).execute("text")
        error = result.results["lonely"].errors[0]
        assert error.code == StageErrorCode.MISSING_DEPENDENCY
        assert "ghost" in error.message
        assert stage.calls == 0

    @pytest.mark.asyncio
    async def test_failed_dependency_blocks_dependents(self):
        dependent = FuncStage("b", dependencies=["a"])
        pipeline = manager().add_stage(FuncStage("a", fail, priority=10)).add_stage(dependent)
        result = await pipeline.execute("text")
        assert result.results["b"].errors[0].code == StageErrorCode.MISSING_DEPENDENCY
        assert dependent.calls == 0

    @pytest.mark.asyncio
    async def test_failed_dependency_tolerated_when_configured(self):
        dependent = FuncStage("b", lambda i, c: c.get(result_key("a"), "fallback"), dependencies=["a"])
        pipeline = manager(require_successful_dependencies=False)
        pipeline.add_stage(FuncStage("a", fail, priority=10)).add_stage(dependent)
        result = await pipeline.execute("text")
        assert result.results["b"].data == "fallback"


# ---------------------------------------------------------------------------
# Timeouts, retries and validation
# ---------------------------------------------------------------------------

class TestTimeoutsAndRetries:
    @pytest.mark.asyncio
    async def test_timeout(self):
        slow = FuncStage("slow", delay=1.0)
        result = await manager(timeout_ms=50).add_stage(slow).execute("text")
        stage_result = result.results["slow"]
        assert not stage_result.success
        assert stage_result.errors[0].code == StageErrorCode.TIMEOUT_ERROR
        assert stage_result.errors[0].message == "Stage execution timeout: 50ms"
        assert slow.token.cancelled
        assert completed_key("slow") not in slow.seen_context

    @pytest.mark.asyncio
    async def test_late_thread_result_is_discarded(self):
        extractor = SleepyExtractor(0.3)
        reader = FuncStage("reader", dependencies=("slow",))
        pipeline = manager(timeout_ms=50, require_successful_dependencies=False)
        pipeline.add_stage(PreprocessStage()).add_stage(ExtractorStage(extractor)).add_stage(reader)

        result = await pipeline.execute("text")
        await asyncio.sleep(0.4)

        assert extractor.finished
        assert result.results["slow"].errors[0].code == StageErrorCode.TIMEOUT_ERROR
        assert result.results["reader"].success
        assert completed_key("slow") in reader.seen_context
        assert result_key("slow") not in reader.seen_context
        assert "slow" not in result.extracted_data

    @pytest.mark.asyncio
    async def test_retry_until_success(self):
        flaky = FlakyStage(failures=2)
        result = await manager(retry_count=2).add_stage(flaky).execute("text")
        assert result.success
        assert result.results["flaky"].metadata.attempts == 3

    @pytest.mark.asyncio
    async def test_retries_exhausted(self):
        flaky = FlakyStage(failures=5)
        result = await manager(retry_count=1).add_stage(flaky).execute("text")
        assert not result.results["flaky"].success
        assert flaky.calls == 2

    @pytest.mark.asyncio
    async def test_missing_dependency_not_retried(self):
        stage = FuncStage("lonely", dependencies=["ghost"])
        result = await manager(retry_count=3).add_stage(stage).execute("text")
        assert result.results["lonely"].metadata.attempts == 1

    @pytest.mark.asyncio
    async def test_validation_failure(self):
        class Rejecting(FuncStage):
            def validate(self, data):
                return False

        result = await manager().add_stage(Rejecting("picky")).execute("text")
        error = result.results["picky"].errors[0]
        assert error.code == StageErrorCode.VALIDATION_FAILED
        assert error.message == "Validation failed for stage: picky"

    @pytest.mark.asyncio
    async def test_parsing_error_keeps_its_code(self):
        def invalid(stage_input, context):
            raise StageValidationError("bad shape")

        result = await manager().add_stage(FuncStage("strict", invalid)).execute("text")
        assert result.results["strict"].errors[0].code == StageErrorCode.VALIDATION_FAILED

    @pytest.mark.asyncio
    async def test_execution_metadata(self):
        result = await manager().add_stage(FuncStage("a")).execute("text")
        metadata = result.results["a"].metadata
        assert metadata.stage_name == "a"
        assert metadata.execution_time_ms >= 0
        assert metadata.attempts == 1


def test_cancellation_token():
    token = CancellationToken()
    assert not token.cancelled
    token.raise_if_cancelled()
    token.cancel()
    assert token.cancelled
    with pytest.raises(Exception, match="Stage cancelled"):
        token.raise_if_cancelled()


def test_config_from_settings_overrides():
    config = PipelineConfig.from_settings(execution_mode=ExecutionMode.HYBRID, retry_count=2)
    assert config.execution_mode == ExecutionMode.HYBRID
    assert config.retry_count == 2
