"""Field extractor contract and the helpers most extractors share.

An extractor owns one semantic field. It reads the raw text and the shared
read-only ``ExtractorContext`` and returns a confidence-scored
``ExtractionResult``. Extractors are stateless, so a strategy can hold one
instance and reuse it across parses.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Callable

from models.schemas.extraction import ExtractionMethod, ExtractionResult, ExtractorContext
from services import confidence

logger = logging.getLogger(__name__)


class FieldExtractor(ABC):
    """Capability contract: ``name``, ``extract`` and ``validate``.

    Subclasses must implement:
        - name: field name the result is stored under
        - extract(text, context): produce an ExtractionResult
    """

    name: str = ""

    @abstractmethod
    def extract(self, text: str, context: ExtractorContext | None = None) -> ExtractionResult:
        """Extract the field from ``text`` and ``context``."""

    def validate(self, value: Any) -> bool:
        if value is None:
            return False
        if isinstance(value, str):
            return value.strip() != ""
        return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


def run_extractor(
    extractor: FieldExtractor,
    text: str,
    context: ExtractorContext | None,
) -> ExtractionResult:
    """Run ``extractor``, turning any exception into a zero-confidence result."""
    try:
        return extractor.extract(text, context)
    except Exception as e:
        logger.warning("Extractor %s failed: %s", extractor.name, e)
        return ExtractionResult.empty(metadata={"error": str(e)})


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def find_in_numbered_fields(context: ExtractorContext | None, indexes: list[int]) -> str | None:
    """First present, non-N/A value among the numbered fields ``indexes``."""
    if context is None:
        return None
    for index in indexes:
        value = context.field(index)
        if value:
            return value
    return None


def search_patterns(
    text: str,
    patterns: list[re.Pattern],
    base_confidence: float = 0.8,
) -> ExtractionResult:
    """Try ``patterns`` in order; each later pattern is trusted 0.1 less."""
    for i, pattern in enumerate(patterns):
        m = pattern.search(text or "")
        if m:
            value = m.group(1) if m.groups() else m.group(0)
            return ExtractionResult(
                value=value,
                confidence=base_confidence - i * 0.1,
                method=ExtractionMethod.REGEX,
                source_snippet=m.group(0),
            )
    return ExtractionResult.empty(ExtractionMethod.REGEX)


def extract_from_fields(
    context: ExtractorContext | None,
    indexes: list[int],
    process: Callable[[str], Any] | None = None,
) -> ExtractionResult:
    """Read a numbered field, optionally post-process it, and score it as a pattern hit."""
    raw = find_in_numbered_fields(context, indexes)
    if not raw:
        return ExtractionResult.empty()
    value = process(raw) if process else raw
    return ExtractionResult(
        value=value,
        confidence=confidence.evaluate_field(value, ExtractionMethod.PATTERN),
        method=ExtractionMethod.PATTERN,
        source_snippet=raw,
    )


def extract_simple(
    text: str,
    context: ExtractorContext | None,
    indexes: list[int],
    patterns: list[re.Pattern] | None = None,
) -> ExtractionResult:
    """Numbered field first; below 0.5 confidence, combine with a pattern search."""
    if context is None or not context.numbered_fields:
        return ExtractionResult.empty()

    list_result = extract_from_fields(context, indexes)
    if list_result.confidence > 0.5:
        return list_result

    if patterns:
        pattern_result = search_patterns(context.raw_text or text, patterns)
        return confidence.combine_results([list_result, pattern_result])

    return list_result
