"""Primary requirements (numbered field 14) via the vocabulary entity recognizer."""

from typing import Any

from models.schemas.extraction import ExtractionMethod, ExtractionResult, ExtractorContext
from models.schemas.structured_request import PrimaryRequirements
from services.confidence import METHOD_CONFIDENCE
from services.extractors.base import FieldExtractor
from services.nlp.entity_recognizer import EntityRecognizer

REQUIREMENTS_FIELD = 14

# entity label -> PrimaryRequirements attribute
LABEL_GROUPS: dict[str, str] = {
    "technology": "technologies",
    "platform": "platforms",
    "skill": "skills",
    "domain": "domains",
    "role": "roles",
}


class RequirementsExtractor(FieldExtractor):
    name = "primary_requirements"

    def __init__(self, recognizer: EntityRecognizer, use_numbered_field: bool = True):
        self.recognizer = recognizer
        self.use_numbered_field = use_numbered_field

    def extract(self, text: str, context: ExtractorContext | None = None) -> ExtractionResult:
        source = None
        if self.use_numbered_field and context is not None:
            source = context.numbered_fields.get(REQUIREMENTS_FIELD)
        if source is None:
            source = text
        if not source or not source.strip() or source.strip().upper() == "N/A":
            return ExtractionResult.empty(ExtractionMethod.NLP)

        grouped = self.recognizer.group(source)
        requirements = PrimaryRequirements(**{
            attr: grouped.get(label, []) for label, attr in LABEL_GROUPS.items()
        })
        if requirements.is_empty():
            return ExtractionResult.empty(ExtractionMethod.NLP, source_snippet=source)

        entity_count = sum(len(v) for v in requirements.model_dump().values())
        return ExtractionResult(
            value=requirements,
            confidence=METHOD_CONFIDENCE[ExtractionMethod.NLP],
            method=ExtractionMethod.NLP,
            source_snippet=source,
            metadata={"entity_count": entity_count},
        )

    def validate(self, value: Any) -> bool:
        return isinstance(value, PrimaryRequirements) and not value.is_empty()
