"""NLP strategy: vocabulary entities over the whole text, for prose requests
that do not follow the numbered-field convention."""

import logging

from models.schemas.structured_request import ParseResult
from services.extractors.grade import GradeExtractor
from services.extractors.language import LanguageExtractor
from services.extractors.location import LocationExtractor
from services.extractors.meta_info import MetaInfoExtractor
from services.extractors.requirements import RequirementsExtractor
from services.nlp.entity_recognizer import EntityRecognizer
from services.strategies.base import ParseStrategy
from services.strategies.standard import skills_from_requirements

logger = logging.getLogger(__name__)


class NlpStrategy(ParseStrategy):
    name = "nlp"
    min_confidence = 0.5

    def __init__(self, recognizer: EntityRecognizer):
        super().__init__([
            RequirementsExtractor(recognizer, use_numbered_field=False),
            GradeExtractor(),
            LanguageExtractor(),
            LocationExtractor(),
            MetaInfoExtractor(),
        ])

    def parse(self, raw_text: str) -> ParseResult:
        try:
            normalized, _sections, context = self.preprocess(raw_text)
            run = self.run_extractors(normalized, context)
            draft = self.build_draft(run)
            draft["skills"] = skills_from_requirements(draft.get("primary_requirements"))
            request = self.apply_defaults(draft, raw_text)

            result = self.create_parse_result(request, run, success=False)
            result.success = (
                "primary_requirements" in run.extracted_fields
                and self.meets_quality_threshold(result.confidence)
            )
            return result
        except Exception as e:
            return self.failed(e)
