"""Header ("CV - ...") and structural identifier extraction."""

from typing import Any

from models.schemas.extraction import ExtractionMethod, ExtractionResult, ExtractorContext
from models.schemas.structured_request import MetaInfo
from services import pattern_matcher
from services.extractors.base import FieldExtractor

# Confidence credited to a found date, whichever format it came in
DATE_CONFIDENCE = 0.9


def parse_meta_block(meta_block: str) -> MetaInfo:
    """Parse the CV header lines. Later lines only fill gaps and add technologies."""
    meta = MetaInfo()
    cv_lines = [line.strip() for line in meta_block.split("\n") if line.strip().startswith("CV -")]

    for index, line in enumerate(cv_lines):
        parts = pattern_matcher.parse_cv_line(line)
        if not parts:
            continue
        if index == 0:
            meta = MetaInfo(**{k: v or None for k, v in parts.items()})
            continue
        if parts.get("role") and not meta.role:
            meta.role = parts["role"]
        if parts.get("technology"):
            meta.additional_technologies = [
                t.strip() for t in parts["technology"].split(";") if t.strip()
            ]
        if parts.get("request_id") and not meta.request_id:
            meta.request_id = parts["request_id"]
    return meta


class MetaInfoExtractor(FieldExtractor):
    """Parses the CV header and scans the text for ids, URLs and dates.

    Confidence is the mean confidence of the structural patterns actually
    found (request id, Salesforce URL, CV id, dates); none found scores 0.
    """

    name = "meta_info"

    def extract(self, text: str, context: ExtractorContext | None = None) -> ExtractionResult:
        meta_block = context.meta_block if context else None
        meta = parse_meta_block(meta_block) if meta_block else MetaInfo()

        scan_text = text or (context.raw_text if context else "") or ""
        scores: list[float] = []

        request_ids = pattern_matcher.find(scan_text, "request_id")
        if request_ids:
            meta.request_id = request_ids[0].value
            scores.append(request_ids[0].confidence)

        urls = pattern_matcher.find(scan_text, "salesforce_url")
        if urls:
            meta.salesforce_url = urls[0].value
            scores.append(urls[0].confidence)

        cv_ids = pattern_matcher.find(scan_text, "cv_id")
        if cv_ids:
            meta.cv_id = cv_ids[0].value
            scores.append(cv_ids[0].confidence)

        dates = pattern_matcher.extract_dates(scan_text)
        if dates:
            meta.dates = dates
            scores.append(DATE_CONFIDENCE)

        value = meta.model_dump(exclude_defaults=True)
        return ExtractionResult(
            value=MetaInfo(**value) if value else None,
            confidence=sum(scores) / len(scores) if scores else 0.0,
            method=ExtractionMethod.PATTERN,
            source_snippet=meta_block or "Full text",
            metadata={"found_patterns": len(scores)},
        )

    def validate(self, value: Any) -> bool:
        return isinstance(value, MetaInfo) and bool(value.model_dump(exclude_defaults=True))
