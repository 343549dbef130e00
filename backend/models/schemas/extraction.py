"""Extraction contracts shared by the preprocessor, field extractors and strategies."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, field_validator

# Values that carry no information once trimmed and lowercased
PLACEHOLDER_VALUES: frozenset[str] = frozenset({
    "", "-", "--", "no data", "n/a",
})


class ExtractionMethod(str, Enum):
    PATTERN = "pattern"
    REGEX = "regex"
    NLP = "nlp"
    HYBRID = "hybrid"
    COMBINED = "combined"


class PatternMatch(BaseModel):
    """A single hit of a named auxiliary pattern."""
    pattern: str
    value: str
    raw: str = ""
    start: int = 0
    confidence: float = 0.7


class SplitResult(BaseModel):
    meta_info: str = ""
    description: str = ""
    numbered_fields: dict[int, str] = {}
    raw_lines: list[str] = []
    missing_items: list[int] = []


class ExtractorContext(BaseModel):
    """Read-only view of a preprocessed request, shared by every extractor of a run."""
    model_config = {"frozen": True}

    meta_block: str | None = None
    numbered_fields: dict[int, str] = {}
    raw_text: str | None = None
    auxiliary_matches: dict[str, list[PatternMatch]] = {}

    def field(self, index: int) -> str | None:
        """Numbered field value, or None when absent or marked N/A."""
        value = self.numbered_fields.get(index)
        if value is None:
            return None
        value = value.strip()
        if not value or value.upper() == "N/A":
            return None
        return value

    def matches(self, name: str) -> list[PatternMatch]:
        return self.auxiliary_matches.get(name, [])


class ExtractionResult(BaseModel):
    """Confidence-scored value produced by one field extractor.

    Confidence is clamped to [0, 1] and rounded to 2 decimals. String values are
    trimmed and placeholder strings ("-", "no data", blank) collapse to None.
    """
    value: Any = None
    confidence: float = 0.0
    method: ExtractionMethod = ExtractionMethod.PATTERN
    source_snippet: str | None = None
    metadata: dict[str, Any] = {}

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, v: Any) -> float:
        try:
            v = float(v)
        except (TypeError, ValueError):
            return 0.0
        if v != v:  # NaN
            return 0.0
        return round(min(1.0, max(0.0, v)), 2)

    @field_validator("value", mode="before")
    @classmethod
    def _normalize_value(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            if v.lower() in PLACEHOLDER_VALUES:
                return None
        return v

    @classmethod
    def empty(cls, method: ExtractionMethod = ExtractionMethod.PATTERN, **kwargs: Any) -> "ExtractionResult":
        """Zero-confidence null result."""
        return cls(value=None, confidence=0.0, method=method, **kwargs)
