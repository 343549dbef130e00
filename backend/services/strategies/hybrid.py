"""Hybrid strategy: standard extractors and slot processors, reconciled per field.

Fields that both paths can produce are combined with the corroboration rule:
the more confident attempt wins and is boosted when the other one is also
confident.
"""

import logging

from models.schemas.extraction import ExtractionMethod, ExtractionResult
from models.schemas.structured_request import ParseResult, SkillRequirements
from services import confidence
from services.nlp.entity_recognizer import EntityRecognizer
from services.strategies.base import ParseStrategy
from services.strategies.standard import StandardStrategy
from services.strategies.structured_list import extract_numbered_items, list_coverage

logger = logging.getLogger(__name__)

# Fields reconciled between the extractor path and the slot-processor path
RECONCILED_FIELDS: tuple[str, ...] = ("levels", "language_requirements", "location", "team_size")


def merge_skills(recognized: SkillRequirements, listed: SkillRequirements) -> SkillRequirements:
    """Union of recognizer skills and the technology slot, recognizer order first."""
    required = list(dict.fromkeys(recognized.required + listed.required))
    preferred = [s for s in dict.fromkeys(recognized.preferred + listed.preferred) if s not in required]
    return SkillRequirements(required=required, preferred=preferred)


class HybridStrategy(ParseStrategy):
    name = "hybrid"
    min_confidence = 0.4

    def __init__(self, recognizer: EntityRecognizer):
        self._standard = StandardStrategy(recognizer)
        super().__init__(self._standard.extractors)

    def parse(self, raw_text: str) -> ParseResult:
        try:
            normalized, sections, context = self.preprocess(raw_text)
            run = self.run_extractors(normalized, context)
            draft = self.build_draft(run)
            list_data = extract_numbered_items(sections.numbered_fields)

            for field in RECONCILED_FIELDS:
                attempts = []
                if field in run.extracted_fields:
                    attempts.append(run.results[field])
                if field in list_data:
                    slot_value = list_data[field]
                    attempts.append(ExtractionResult(
                        value=slot_value,
                        confidence=confidence.evaluate_field(slot_value, ExtractionMethod.PATTERN),
                        method=ExtractionMethod.PATTERN,
                    ))
                if not attempts:
                    continue
                combined = confidence.combine_results(attempts)
                if combined.confidence > 0:
                    draft[field] = combined.value
                    run.field_confidences[field] = combined.confidence
                    if field not in run.extracted_fields:
                        run.extracted_fields.append(field)

            for field, value in list_data.items():
                if field not in RECONCILED_FIELDS and field not in draft:
                    draft[field] = value

            reconciled_team_size = draft.get("team_size")
            self._standard.enhance_with_patterns(draft, context)
            if reconciled_team_size is not None:
                draft["team_size"] = reconciled_team_size
            if "skills" in list_data:
                draft["skills"] = merge_skills(draft["skills"], list_data["skills"])
            request = self.apply_defaults(draft, raw_text)

            coverage = list_coverage(sections.numbered_fields)
            result = self.create_parse_result(
                request, run, success=False, extra_confidences={"list_coverage": coverage},
            )
            result.success = self.meets_quality_threshold(result.confidence)
            return result
        except Exception as e:
            return self.failed(e)
