"""Confidence aggregation and sentinel normalization for extracted fields."""

import logging
from typing import Any

import numpy as np
from pydantic import BaseModel

from models.schemas.extraction import ExtractionMethod, ExtractionResult

logger = logging.getLogger(__name__)

SENTINEL = "N/A"

# Base confidence per extraction method
METHOD_CONFIDENCE: dict[ExtractionMethod, float] = {
    ExtractionMethod.REGEX: 0.9,
    ExtractionMethod.PATTERN: 0.85,
    ExtractionMethod.HYBRID: 0.8,
    ExtractionMethod.COMBINED: 0.8,
    ExtractionMethod.NLP: 0.7,
}

# A second result above this corroborates the best one
CORROBORATION_THRESHOLD = 0.7
CORROBORATION_BOOST = 0.1

_EMPTY_MARKERS: frozenset[str] = frozenset({"", "-", "no data", "n/a"})


def clamp(value: float) -> float:
    """Clamp to [0, 1] and round to 2 decimals."""
    if value != value:  # NaN
        return 0.0
    return round(min(1.0, max(0.0, float(value))), 2)


def aggregate(field_confidences: dict[str, float]) -> float:
    """Unweighted mean over the attempted fields; an empty map scores 0."""
    if not field_confidences:
        return 0.0
    return clamp(float(np.mean(list(field_confidences.values()))))


def is_empty_value(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip().lower() in _EMPTY_MARKERS
    if isinstance(value, (list, dict, set, tuple)):
        return len(value) == 0
    return False


def evaluate_field(value: Any, method: ExtractionMethod | str) -> float:
    """Base confidence for a value produced by ``method``; 0 for null or sentinel."""
    if is_empty_value(value):
        return 0.0
    try:
        method = ExtractionMethod(method)
    except ValueError:
        return 0.5
    return METHOD_CONFIDENCE[method]


def combine_results(results: list[ExtractionResult]) -> ExtractionResult:
    """Pick the most confident attempt, boosting it when a second one agrees.

    Zero-confidence attempts are ignored. When the runner-up scored above 0.7
    the winner gains 0.1 (capped at 1.0) and is tagged ``hybrid``.
    """
    valid = sorted(
        (r for r in results if r.confidence > 0),
        key=lambda r: r.confidence,
        reverse=True,
    )
    if not valid:
        return ExtractionResult.empty()

    best = valid[0]
    if len(valid) > 1 and valid[1].confidence > CORROBORATION_THRESHOLD:
        return best.model_copy(update={
            "confidence": clamp(best.confidence + CORROBORATION_BOOST),
            "method": ExtractionMethod.HYBRID,
        })
    return best


def normalize_value(value: Any) -> Any:
    """Map empty and placeholder values to the sentinel."""
    if is_empty_value(value) and not isinstance(value, (list, dict, set, tuple)):
        return SENTINEL
    if isinstance(value, str):
        return value.strip()
    return value


def _is_text_field(annotation: Any) -> bool:
    return annotation == (str | None) or annotation is str


def finalize(model: BaseModel) -> BaseModel:
    """Return a copy of ``model`` with empty text leaves replaced by the sentinel.

    Recurses into nested models. Non-text leaves (numbers, dates) keep None
    because the sentinel is not a valid value for them.
    """
    updates: dict[str, Any] = {}
    for name, field in type(model).model_fields.items():
        value = getattr(model, name)
        if isinstance(value, BaseModel):
            updates[name] = finalize(value)
        elif isinstance(value, list):
            items = [finalize(v) if isinstance(v, BaseModel) else v for v in value]
            updates[name] = [v for v in items if not (isinstance(v, str) and is_empty_value(v))]
        elif _is_text_field(field.annotation):
            updates[name] = normalize_value(value)
    return model.model_copy(update=updates)
