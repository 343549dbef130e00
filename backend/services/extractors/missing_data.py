"""Gap filler: reports which checklist slots of the numbered convention are empty."""

from typing import Any

from models.schemas.extraction import ExtractionMethod, ExtractionResult, ExtractorContext
from services.confidence import SENTINEL
from services.extractors.base import FieldExtractor

# numbered slot -> field name
EXPECTED_FIELDS: dict[int, str] = {
    1: "industry",
    2: "domain",
    3: "solution_type",
    4: "expected_load",
    6: "levels",
    7: "required_level",
    8: "min_english_level",
    10: "additional_language",
    11: "min_additional_language_level",
    12: "team_size",
    13: "working_hours",
    14: "detailed_requirements",
    15: "technologies",
    17: "collaboration_duration",
    20: "client_deadline",
    22: "sales_manager",
    23: "regional_group",
    24: "required_location",
    27: "project_status",
    31: "project_coordinator",
    33: "primary_request_details",
    34: "sales_manager_summary",
    35: "vendor_experience",
}

EMPTY_VALUES: frozenset[str] = frozenset({
    "н/д", "нет данных", "отсутствует", "нет",
    "no data", "n/a", "na", "not available",
    "-", "--", "—", "–", "...", "tbd", "tbc",
})


def is_placeholder(value: str | None) -> bool:
    if value is None:
        return True
    normalized = value.strip().lower()
    return normalized == "" or normalized in EMPTY_VALUES


class MissingDataExtractor(FieldExtractor):
    name = "missing_data"

    def extract(self, text: str, context: ExtractorContext | None = None) -> ExtractionResult:
        if context is None or not context.numbered_fields:
            return ExtractionResult(value={}, confidence=1.0, method=ExtractionMethod.PATTERN)

        missing = {
            field_name: SENTINEL
            for index, field_name in EXPECTED_FIELDS.items()
            if is_placeholder(context.numbered_fields.get(index))
        }
        return ExtractionResult(
            value=missing,
            confidence=1.0,
            method=ExtractionMethod.PATTERN,
            source_snippet="Numbered field analysis",
            metadata={"missing_count": len(missing), "total_expected": len(EXPECTED_FIELDS)},
        )

    def validate(self, value: Any) -> bool:
        return isinstance(value, dict)
