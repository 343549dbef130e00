"""Shared machinery for parsing strategies.

A strategy is a named bundle of field extractors plus light post-processing.
Extractor results are folded into a draft dict keyed by ``StructuredRequest``
field names through ``apply_extraction`` (a fixed mapping per extractor name),
and the draft is validated into a ``StructuredRequest`` at the end.
"""

import logging
import re
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any

from models.schemas.extraction import ExtractionResult, ExtractorContext
from models.schemas.structured_request import (
    ExperienceRequirement,
    LocationRequirement,
    MetaInfo,
    ParseResult,
    PrimaryRequirements,
    RequestStatus,
    SkillRequirements,
    StructuredRequest,
)
from services import confidence, section_splitter
from services.extractors.base import FieldExtractor, run_extractor

logger = logging.getLogger(__name__)

_ISO_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")
_RU_DATE_RE = re.compile(r"(\d{1,2})[./](\d{1,2})[./](\d{2,4})")


def parse_date(value: str | None) -> date | None:
    """ISO or day.month.year date found in ``value``; None when absent or invalid."""
    if not value:
        return None
    m = _ISO_DATE_RE.search(value)
    if m:
        try:
            return datetime.strptime(m.group(0), "%Y-%m-%d").date()
        except ValueError:
            return None
    m = _RU_DATE_RE.search(value)
    if m:
        day, month, year = (int(g) for g in m.groups())
        if year < 100:
            year += 2000
        try:
            return date(year, month, day)
        except ValueError:
            return None
    return None


def strip_label(value: str | None, prefixes: tuple[str, ...]) -> str | None:
    """Remove a leading field label such as "Сейлс менеджер" from a numbered value."""
    if value is None:
        return None
    cleaned = value.strip()
    for prefix in prefixes:
        cleaned = re.sub(rf"^{re.escape(prefix)}\s*:?\s*", "", cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r"n/a", "N/A", cleaned, flags=re.IGNORECASE).strip()
    return cleaned or confidence.SENTINEL


class ExtractionRun:
    """Outcome of running a strategy's extractors over one context."""

    def __init__(self) -> None:
        self.results: dict[str, ExtractionResult] = {}
        self.field_confidences: dict[str, float] = {}
        self.extracted_fields: list[str] = []

    def accepted(self, name: str) -> ExtractionResult | None:
        return self.results.get(name) if name in self.extracted_fields else None


def apply_extraction(draft: dict[str, Any], name: str, value: Any) -> None:
    """Fold one accepted extractor value into the request draft."""
    if name == "meta_info" and isinstance(value, MetaInfo):
        if value.role:
            draft["role"] = value.role
        if value.request_id:
            draft["id"] = value.request_id
        if value.technology:
            draft["meta_technology"] = value.technology
        if value.company:
            draft["meta_company"] = value.company
        if value.manager and not draft.get("sales_manager"):
            draft["sales_manager"] = value.manager
        if value.dates:
            deadline = parse_date(value.dates[-1])
            if deadline:
                draft["deadline"] = deadline
    elif name == "missing_data":
        draft["missing_fields"] = sorted(value)
    elif name == "primary_requirements" and isinstance(value, PrimaryRequirements):
        draft["primary_requirements"] = value
    elif name in StructuredRequest.model_fields:
        draft[name] = value
    else:
        logger.debug("No request field for extractor %s", name)


class ParseStrategy(ABC):
    """Base class for parsing strategies.

    Subclasses must implement:
        - name: strategy identifier used by the strategy manager
        - parse(raw_text): produce a ParseResult
    """

    name: str = ""
    min_confidence: float = 0.3

    def __init__(self, extractors: list[FieldExtractor] | None = None):
        self.extractors: list[FieldExtractor] = list(extractors or [])

    @abstractmethod
    def parse(self, raw_text: str) -> ParseResult:
        """Parse a raw request text."""

    def preprocess(self, raw_text: str):
        return section_splitter.preprocess(raw_text)

    def run_extractors(self, text: str, context: ExtractorContext) -> ExtractionRun:
        """Run every extractor; keep results with positive confidence that validate."""
        run = ExtractionRun()
        for extractor in self.extractors:
            result = run_extractor(extractor, text, context)
            run.results[extractor.name] = result
            if "error" in result.metadata:
                run.field_confidences[extractor.name] = 0.0
                continue
            if result.confidence > 0 and extractor.validate(result.value):
                run.field_confidences[extractor.name] = result.confidence
                run.extracted_fields.append(extractor.name)
        return run

    def build_draft(self, run: ExtractionRun) -> dict[str, Any]:
        draft: dict[str, Any] = {}
        for name in run.extracted_fields:
            apply_extraction(draft, name, run.results[name].value)
        return draft

    def apply_defaults(self, draft: dict[str, Any], raw_text: str) -> StructuredRequest:
        defaults: dict[str, Any] = {
            "strategy_name": self.name,
            "status": RequestStatus.PENDING,
            "levels": [],
            "language_requirements": [],
            "team_size": 0,
            "location": LocationRequirement(work_type="Remote"),
            "experience": ExperienceRequirement(leadership_required=False),
            "skills": SkillRequirements(),
            "responsibilities": confidence.SENTINEL,
            "raw_input": raw_text,
        }
        defaults.update({k: v for k, v in draft.items() if v is not None})
        return StructuredRequest(**defaults)

    def create_parse_result(
        self,
        request: StructuredRequest | None,
        run: ExtractionRun | None,
        success: bool,
        error: str | None = None,
        extra_confidences: dict[str, float] | None = None,
        extra_fields: list[str] | None = None,
    ) -> ParseResult:
        field_confidences = dict(run.field_confidences) if run else {}
        field_confidences.update(extra_confidences or {})
        overall = confidence.aggregate(field_confidences)
        if request is not None:
            request = request.model_copy(update={"confidence": overall})
        return ParseResult(
            success=success,
            data=request,
            error=error,
            confidence=overall,
            strategy_name=self.name,
            extracted_field_names=(run.extracted_fields if run else []) + (extra_fields or []),
            field_confidences=field_confidences,
        )

    def failed(self, error: Exception) -> ParseResult:
        logger.exception("Strategy %s failed", self.name)
        return self.create_parse_result(None, None, success=False, error=str(error) or type(error).__name__)

    def meets_quality_threshold(self, value: float) -> bool:
        return value >= self.min_confidence
