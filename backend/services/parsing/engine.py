"""Parser engine: run a strategy, fall back when confidence is low, finalize."""

import logging
from datetime import datetime

from models.schemas.structured_request import ParseResult
from services import confidence
from services.exceptions import UnknownStrategyError
from services.parsing.strategy_manager import StrategyManager

logger = logging.getLogger(__name__)

DEFAULT_STRATEGY = "standard"
FALLBACK_THRESHOLD = 0.5


class ParserEngine:
    def __init__(
        self,
        strategy_manager: StrategyManager | None = None,
        default_strategy: str = DEFAULT_STRATEGY,
        fallback_threshold: float = FALLBACK_THRESHOLD,
    ):
        self.strategies = strategy_manager or StrategyManager()
        self.default_strategy = default_strategy
        self.fallback_threshold = fallback_threshold

    def parse(self, raw_text: str, strategy_hint: str | None = None) -> ParseResult:
        """Parse ``raw_text``; never raises.

        Below ``fallback_threshold`` the fallback strategy is tried and kept only
        when it is strictly more confident than the primary result.
        """
        name = strategy_hint or self.default_strategy
        try:
            strategy = self.strategies.get(name)
        except UnknownStrategyError as e:
            logger.warning("Parse rejected: %s", e)
            return ParseResult(success=False, error=str(e), confidence=0.0, strategy_name=name)

        try:
            logger.info("Parsing request with strategy %s (%d chars)", name, len(raw_text or ""))
            result = strategy.parse(raw_text or "")

            if result.confidence < self.fallback_threshold:
                fallback_name = self.strategies.fallback_for(name)
                if fallback_name != name:
                    logger.info(
                        "Confidence %.2f below %.2f, trying fallback %s",
                        result.confidence, self.fallback_threshold, fallback_name,
                    )
                    fallback = self.strategies.get(fallback_name).parse(raw_text or "")
                    if fallback.confidence > result.confidence:
                        result = fallback.model_copy(update={"fallback_used": True})

            return finalize_result(result)
        except Exception as e:
            logger.exception("Parsing failed with strategy %s", name)
            return ParseResult(
                success=False,
                error=f"Parsing failed: {e}",
                confidence=0.0,
                strategy_name=name,
            )


def finalize_result(result: ParseResult) -> ParseResult:
    """Substitute the sentinel for empty text fields and stamp processing time."""
    if result.data is None:
        return result
    data = confidence.finalize(result.data)
    data = data.model_copy(update={
        "confidence": result.confidence,
        "strategy_name": result.strategy_name,
        "processed_at": datetime.now(),
    })
    return result.model_copy(update={"data": data})
