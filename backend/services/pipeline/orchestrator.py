"""Drive a full parse through the stage pipeline instead of a single strategy call.

Flow:
    raw text
      ├─ preprocess                      → normalized text + ExtractorContext
      ├─ meta_info, levels, location ... → ExtractionResult per field (one group)
      └─ assemble                        → ParseResult
"""

import logging

from models.schemas.stage import StageInput
from models.schemas.structured_request import ParseResult
from services.nlp.entity_recognizer import EntityRecognizer
from services.parsing.engine import finalize_result
from services.pipeline.config import ExecutionMode, PipelineConfig
from services.pipeline.manager import PipelineManager
from services.pipeline.stages import ASSEMBLE_STAGE, AssembleStage, ExtractorStage, PreprocessStage
from services.strategies.standard import StandardStrategy

logger = logging.getLogger(__name__)


def build_extraction_pipeline(
    recognizer: EntityRecognizer | None = None,
    config: PipelineConfig | None = None,
) -> PipelineManager:
    """Pipeline with the standard strategy's extractors as parallel field stages."""
    strategy = StandardStrategy(recognizer or EntityRecognizer())
    if config is None:
        # A timed-out field stage must not block assembly
        config = PipelineConfig.from_settings(
            execution_mode=ExecutionMode.PARALLEL,
            require_successful_dependencies=False,
        )
    pipeline = PipelineManager(config)
    pipeline.add_stage(PreprocessStage())
    for extractor in strategy.extractors:
        pipeline.add_stage(ExtractorStage(extractor))
    pipeline.add_stage(AssembleStage(strategy))
    return pipeline


async def parse_with_pipeline(
    raw_text: str,
    pipeline: PipelineManager | None = None,
) -> ParseResult:
    """Parse ``raw_text`` through the stage pipeline; never raises."""
    pipeline = pipeline or build_extraction_pipeline()
    outcome = await pipeline.execute(StageInput(text=raw_text or ""))

    parsed = outcome.extracted_data.get(ASSEMBLE_STAGE)
    if isinstance(parsed, ParseResult):
        logger.info(
            "Pipeline parse finished in %.1fms (confidence %.2f)",
            outcome.total_execution_time_ms, parsed.confidence,
        )
        return finalize_result(parsed)

    message = "; ".join(f"{e.stage_name}: {e.message}" for e in outcome.errors) or "Pipeline produced no result"
    logger.warning("Pipeline parse failed: %s", message)
    return ParseResult(success=False, error=message, confidence=0.0, strategy_name="pipeline")
