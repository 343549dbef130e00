"""Standard strategy: regex extractors over the numbered-field convention plus
vocabulary entities for the detailed requirements."""

import logging
import re

from models.schemas.extraction import ExtractorContext
from models.schemas.structured_request import (
    ExperienceRequirement,
    LocationRequirement,
    ParseResult,
    PrimaryRequirements,
    SkillRequirements,
)
from services.extractors.base import extract_simple
from services.extractors.grade import GradeExtractor
from services.extractors.headcount import HEADCOUNT_FIELD, HeadcountExtractor
from services.extractors.language import LanguageExtractor
from services.extractors.location import LocationExtractor
from services.extractors.meta_info import MetaInfoExtractor
from services.extractors.missing_data import MissingDataExtractor
from services.extractors.requirements import RequirementsExtractor
from services.nlp.entity_recognizer import EntityRecognizer
from services.strategies.base import ParseStrategy, strip_label

logger = logging.getLogger(__name__)

SALES_MANAGER_FIELD = 22
COORDINATOR_FIELD = 31
INDUSTRY_FIELD = 1
WORKING_HOURS_FIELD = 13
COLLABORATION_FIELD = 17

SALES_MANAGER_LABELS = ("Сейлс менеджер", "Sales manager")
COORDINATOR_LABELS = ("Проектный координатор", "Project coordinator")
INDUSTRY_LABELS = ("Индустрия проекта", "Project industry", "Industry")
WORKING_HOURS_LABELS = ("Рабочие часы", "Working hours")
COLLABORATION_LABELS = ("Длительность сотрудничества", "Срок сотрудничества", "Collaboration duration")

# Free-text fallbacks when the numbered slot is missing
WORKING_HOURS_PATTERNS = [
    re.compile(
        r"(\d{1,2}[:.]\d{2}\s*-\s*\d{1,2}[:.]\d{2}"
        r"(?:\s*(?:UTC|GMT|MSK|CET)(?:\s*[+-]\s*\d{1,2})?)?)",
        re.IGNORECASE,
    ),
]
COLLABORATION_PATTERNS = [
    re.compile(
        r"(?:duration|длительность|срок сотрудничества)\D{0,20}?(\d+\+?\s*(?:months?|месяц\w*|years?|года?|лет))",
        re.IGNORECASE,
    ),
    re.compile(r"(\d+\+?\s*(?:months?|месяц\w*))", re.IGNORECASE),
]

_NUMBER_RE = re.compile(r"\d+")


def skills_from_requirements(requirements: PrimaryRequirements | None) -> SkillRequirements:
    """Technologies are required skills; practices and methodologies are preferred."""
    if requirements is None:
        return SkillRequirements()
    return SkillRequirements(
        required=list(requirements.technologies),
        preferred=[s for s in requirements.skills if s not in requirements.technologies],
    )


class StandardStrategy(ParseStrategy):
    name = "standard"
    min_confidence = 0.4

    def __init__(self, recognizer: EntityRecognizer):
        super().__init__([
            MetaInfoExtractor(),
            GradeExtractor(),
            MissingDataExtractor(),
            LanguageExtractor(),
            LocationExtractor(),
            HeadcountExtractor(),
            RequirementsExtractor(recognizer),
        ])

    def parse(self, raw_text: str) -> ParseResult:
        try:
            normalized, _sections, context = self.preprocess(raw_text)
            run = self.run_extractors(normalized, context)
            draft = self.build_draft(run)
            self.enhance_with_patterns(draft, context)
            request = self.apply_defaults(draft, raw_text)

            meta_confidence = run.field_confidences.get("meta_info", 0.0)
            return self.create_parse_result(
                request, run, success=self.meets_quality_threshold(meta_confidence),
            )
        except Exception as e:
            return self.failed(e)

    def enhance_with_patterns(self, draft: dict, context: ExtractorContext) -> None:
        """Fill fields that come from auxiliary matches rather than a single extractor."""
        team_matches = context.matches("team_size")
        if team_matches:
            draft["team_size"] = int(team_matches[0].value) or 1
        elif "team_size" not in draft:
            headcount = context.field(HEADCOUNT_FIELD)
            m = _NUMBER_RE.search(headcount) if headcount else None
            if m:
                draft["team_size"] = int(m.group(0))

        sales_manager = context.numbered_fields.get(SALES_MANAGER_FIELD)
        if sales_manager:
            draft["sales_manager"] = strip_label(sales_manager, SALES_MANAGER_LABELS)

        coordinator = context.numbered_fields.get(COORDINATOR_FIELD)
        if coordinator:
            draft["coordinator"] = strip_label(coordinator, COORDINATOR_LABELS)

        industry = context.field(INDUSTRY_FIELD)
        if industry:
            draft["industry"] = strip_label(industry, INDUSTRY_LABELS)

        hours = extract_simple(context.raw_text, context, [WORKING_HOURS_FIELD], WORKING_HOURS_PATTERNS)
        if hours.value:
            draft["working_hours"] = strip_label(hours.value, WORKING_HOURS_LABELS)

        duration = extract_simple(context.raw_text, context, [COLLABORATION_FIELD], COLLABORATION_PATTERNS)
        if duration.value:
            draft["collaboration_duration"] = strip_label(duration.value, COLLABORATION_LABELS)

        years = context.matches("years_experience")
        if years:
            draft["experience"] = ExperienceRequirement(min_total_years=int(years[0].value))

        timezone = context.matches("timezone")
        location = draft.get("location")
        if timezone and isinstance(location, LocationRequirement):
            draft["location"] = location.model_copy(update={"timezone": timezone[0].value})

        draft["skills"] = skills_from_requirements(draft.get("primary_requirements"))
