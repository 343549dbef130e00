"""Requested headcount (numbered field 12)."""

import re
from typing import Any

from models.schemas.extraction import ExtractionMethod, ExtractionResult, ExtractorContext
from services.extractors.base import FieldExtractor

HEADCOUNT_FIELD = 12
_NUMBER_RE = re.compile(r"\d+")


class HeadcountExtractor(FieldExtractor):
    name = "team_size"

    def extract(self, text: str, context: ExtractorContext | None = None) -> ExtractionResult:
        if context is None or not context.numbered_fields:
            return ExtractionResult.empty(ExtractionMethod.REGEX)

        headcount_text = context.numbered_fields.get(HEADCOUNT_FIELD)
        if not headcount_text or not headcount_text.strip():
            return ExtractionResult.empty(ExtractionMethod.REGEX)

        m = _NUMBER_RE.search(headcount_text)
        if not m:
            return ExtractionResult.empty(ExtractionMethod.REGEX, source_snippet=headcount_text)
        return ExtractionResult(
            value=int(m.group(0)),
            confidence=0.95,
            method=ExtractionMethod.REGEX,
            source_snippet=headcount_text,
        )

    def validate(self, value: Any) -> bool:
        return isinstance(value, int) and not isinstance(value, bool)
