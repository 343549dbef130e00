"""Flexible strategy: reads the numbered-field convention slot by slot."""

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable

from models.schemas.structured_request import ParseResult, RequestStatus, SkillRequirements
from services.extractors import grade, language, location
from services.extractors.grade import GradeExtractor
from services.extractors.meta_info import MetaInfoExtractor
from services.extractors.missing_data import MissingDataExtractor, is_placeholder
from services.strategies.base import ParseStrategy, parse_date, strip_label
from services.strategies.standard import COORDINATOR_LABELS, INDUSTRY_LABELS, SALES_MANAGER_LABELS

logger = logging.getLogger(__name__)

# Slots whose presence drives the list-coverage confidence
EXPECTED_ITEMS: tuple[int, ...] = (1, 2, 4, 6, 7, 8, 12, 14, 15, 17, 20, 22, 24, 27, 31)

# A parse succeeds once more than this share of the expected slots is filled
MIN_COVERAGE = 0.2

STATUS_KEYWORDS: dict[str, RequestStatus] = {
    "new": RequestStatus.PENDING,
    "новый": RequestStatus.PENDING,
    "ongoing": RequestStatus.PROCESSING,
    "в работе": RequestStatus.PROCESSING,
    "completed": RequestStatus.COMPLETED,
    "завершен": RequestStatus.COMPLETED,
}

_NUMBER_RE = re.compile(r"(\d+)")


def parse_number(value: str) -> int | None:
    m = _NUMBER_RE.search(value)
    return int(m.group(1)) if m else None


def parse_list(value: str) -> list[str]:
    items = [item.strip() for item in re.split(r"[,;]", value) if item.strip()]
    return items or [value.strip()]


def parse_status(value: str) -> RequestStatus:
    lowered = value.lower()
    for keyword, status in STATUS_KEYWORDS.items():
        if keyword in lowered:
            return status
    return RequestStatus.PENDING


def parse_english(value: str) -> list:
    req = language.parse_requirement(value, "English", "required")
    return [req] if req else []


@dataclass(frozen=True)
class ItemRule:
    field: str
    process: Callable[[str], Any] | None = None


def numbered_item_rules() -> dict[int, ItemRule]:
    return {
        1: ItemRule("industry", lambda v: strip_label(v, INDUSTRY_LABELS)),
        2: ItemRule("domain"),
        7: ItemRule("levels", grade.parse_grades),
        8: ItemRule("language_requirements", parse_english),
        12: ItemRule("team_size", parse_number),
        13: ItemRule("working_hours"),
        14: ItemRule("responsibilities"),
        15: ItemRule("skills", lambda v: SkillRequirements(required=parse_list(v))),
        17: ItemRule("collaboration_duration"),
        20: ItemRule("deadline", parse_date),
        22: ItemRule("sales_manager", lambda v: strip_label(v, SALES_MANAGER_LABELS)),
        24: ItemRule("location", location.parse_location),
        27: ItemRule("status", parse_status),
        31: ItemRule("coordinator", lambda v: strip_label(v, COORDINATOR_LABELS)),
    }


def extract_numbered_items(fields: dict[int, str]) -> dict[str, Any]:
    """Map filled numbered slots onto request fields through their processors."""
    data: dict[str, Any] = {}
    for index, rule in numbered_item_rules().items():
        value = fields.get(index)
        if is_placeholder(value):
            continue
        processed = rule.process(value) if rule.process else value.strip()
        if processed in (None, [], ""):
            continue
        data[rule.field] = processed
    return data


def list_coverage(fields: dict[int, str]) -> float:
    found = [i for i in EXPECTED_ITEMS if not is_placeholder(fields.get(i))]
    return len(found) / len(EXPECTED_ITEMS)


class StructuredListStrategy(ParseStrategy):
    name = "flexible"
    min_confidence = 0.3

    def __init__(self):
        super().__init__([
            MetaInfoExtractor(),
            GradeExtractor(),
            MissingDataExtractor(),
        ])

    def parse(self, raw_text: str) -> ParseResult:
        try:
            normalized, sections, context = self.preprocess(raw_text)
            run = self.run_extractors(normalized, context)
            draft = self.build_draft(run)

            list_data = extract_numbered_items(sections.numbered_fields)
            # Slot 7 only stands in when slot 6 gave no grade
            if draft.get("levels"):
                list_data.pop("levels", None)
            draft.update(list_data)

            request = self.apply_defaults(draft, raw_text)
            coverage = list_coverage(sections.numbered_fields)
            return self.create_parse_result(
                request,
                run,
                success=coverage > MIN_COVERAGE,
                extra_confidences={"list_coverage": coverage},
                extra_fields=["numbered_fields"],
            )
        except Exception as e:
            return self.failed(e)
