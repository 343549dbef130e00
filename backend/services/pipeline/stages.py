"""Extractor-backed stages: preprocess -> one stage per field extractor -> assemble."""

import asyncio
from collections.abc import Mapping
from typing import Any

from models.schemas.extraction import ExtractionResult, ExtractorContext
from models.schemas.stage import StageInput, StageMetadata, StageResult
from services import section_splitter
from services.exceptions import StageExecutionError
from services.extractors.base import FieldExtractor, run_extractor
from services.pipeline.base import BaseStage, CancellationToken, result_key
from services.strategies.base import ExtractionRun, ParseStrategy

PREPROCESS_STAGE = "preprocess"
ASSEMBLE_STAGE = "assemble"


def _preprocessed(context: Mapping[str, Any]) -> dict[str, Any]:
    data = context.get(result_key(PREPROCESS_STAGE))
    if not data:
        raise StageExecutionError("No preprocessed text available")
    return data


class PreprocessStage(BaseStage):
    """Normalize, split and pattern-scan the input text."""

    name = PREPROCESS_STAGE
    priority = 100

    async def perform(self, stage_input: StageInput, context, token: CancellationToken) -> StageResult:
        normalized, sections, extractor_context = await asyncio.to_thread(
            section_splitter.preprocess, stage_input.text,
        )
        token.raise_if_cancelled()
        return StageResult(
            success=True,
            data={"normalized": normalized, "sections": sections, "context": extractor_context},
            metadata=StageMetadata(stage_name=self.name, method="pattern"),
        )

    def validate(self, data: Any) -> bool:
        return isinstance(data, dict) and isinstance(data.get("context"), ExtractorContext)


class ExtractorStage(BaseStage):
    """Runs one field extractor in a worker thread."""

    priority = 50
    dependencies = (PREPROCESS_STAGE,)

    def __init__(self, extractor: FieldExtractor):
        self.extractor = extractor
        self.name = extractor.name

    async def perform(self, stage_input: StageInput, context, token: CancellationToken) -> StageResult:
        pre = _preprocessed(context)
        token.raise_if_cancelled()
        result = await asyncio.to_thread(run_extractor, self.extractor, pre["normalized"], pre["context"])
        token.raise_if_cancelled()
        if "error" in result.metadata:
            raise StageExecutionError(result.metadata["error"])
        return StageResult(
            success=True,
            data=result,
            metadata=StageMetadata(
                stage_name=self.name,
                confidence=result.confidence,
                method=result.method.value,
                source=result.source_snippet,
            ),
        )

    def validate(self, data: Any) -> bool:
        return isinstance(data, ExtractionResult)


class AssembleStage(BaseStage):
    """Fold field results into a ParseResult using a strategy's draft rules."""

    name = ASSEMBLE_STAGE
    priority = 0

    def __init__(self, strategy: ParseStrategy):
        self.strategy = strategy
        self.dependencies = (PREPROCESS_STAGE, *(e.name for e in strategy.extractors))

    async def perform(self, stage_input: StageInput, context, token: CancellationToken) -> StageResult:
        pre = _preprocessed(context)
        run = ExtractionRun()
        for extractor in self.strategy.extractors:
            result = context.get(result_key(extractor.name))
            if not isinstance(result, ExtractionResult):
                run.field_confidences[extractor.name] = 0.0
                continue
            run.results[extractor.name] = result
            if result.confidence > 0 and extractor.validate(result.value):
                run.field_confidences[extractor.name] = result.confidence
                run.extracted_fields.append(extractor.name)
            else:
                run.field_confidences[extractor.name] = 0.0

        draft = self.strategy.build_draft(run)
        enhance = getattr(self.strategy, "enhance_with_patterns", None)
        if enhance is not None:
            enhance(draft, pre["context"])
        request = self.strategy.apply_defaults(draft, stage_input.text)
        meta_confidence = run.field_confidences.get("meta_info", 0.0)
        parsed = self.strategy.create_parse_result(
            request, run, success=self.strategy.meets_quality_threshold(meta_confidence),
        )
        return StageResult(
            success=True,
            data=parsed,
            metadata=StageMetadata(stage_name=self.name, confidence=parsed.confidence, method="combined"),
        )
