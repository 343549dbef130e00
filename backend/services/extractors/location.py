"""Work location extraction from numbered field 24."""

import re
from typing import Any

from models.schemas.extraction import ExtractionMethod, ExtractionResult, ExtractorContext
from models.schemas.structured_request import LocationRequirement
from services.extractors.base import FieldExtractor

LOCATION_FIELD = 24

REGION_ALIASES: dict[str, str] = {
    "рф": "RU", "россия": "RU", "russia": "RU",
    "рб": "BY", "беларусь": "BY", "belarus": "BY",
    "eu": "EU", "европа": "EU", "europe": "EU",
    "us": "US", "сша": "US", "usa": "US",
    "армения": "AM", "armenia": "AM",
    "грузия": "GE", "georgia": "GE",
}

UNRESTRICTED_PHRASES: tuple[str, ...] = ("no restrictions", "без ограничений")
FRIENDLY_COUNTRIES_PHRASES: tuple[str, ...] = ("дружественные страны", "friendly countries")
# Region that the friendly-countries phrase resolves to, replacing named countries
FRIENDLY_COUNTRIES_REGION = "RU"

WORK_TYPE_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Remote", ("remote", "удален", "удалён")),
    ("Office", ("office", "офис")),
    ("Hybrid", ("hybrid", "гибрид")),
)

# Aliases are matched as whole words so "us" does not fire inside "russia"
_REGION_PATTERNS: list[tuple[re.Pattern, str]] = [
    (re.compile(rf"(?<!\w){re.escape(alias)}(?!\w)"), code)
    for alias, code in REGION_ALIASES.items()
]


def detect_work_type(text: str) -> str:
    lowered = text.lower()
    for work_type, keywords in WORK_TYPE_KEYWORDS:
        if any(k in lowered for k in keywords):
            return work_type
    if any(p in lowered for p in UNRESTRICTED_PHRASES):
        return "Remote"
    return "N/A"


def detect_regions(text: str) -> list[str]:
    lowered = text.lower()
    regions: list[str] = []
    for pattern, code in _REGION_PATTERNS:
        if code not in regions and pattern.search(lowered):
            regions.append(code)
    return regions


def parse_location(text: str) -> LocationRequirement:
    lowered = text.lower()
    is_global = any(p in lowered for p in UNRESTRICTED_PHRASES)

    if any(p in lowered for p in FRIENDLY_COUNTRIES_PHRASES):
        regions = [FRIENDLY_COUNTRIES_REGION]
    elif is_global:
        regions = []
    else:
        regions = detect_regions(text)

    return LocationRequirement(
        regions=regions,
        work_type=detect_work_type(text),
        is_global=is_global,
        additional_requirements=text.strip(),
    )


class LocationExtractor(FieldExtractor):
    name = "location"

    def extract(self, text: str, context: ExtractorContext | None = None) -> ExtractionResult:
        if context is None or not context.numbered_fields:
            return ExtractionResult.empty(ExtractionMethod.REGEX)

        location_text = context.numbered_fields.get(LOCATION_FIELD)
        if not location_text or not location_text.strip():
            return ExtractionResult.empty(ExtractionMethod.REGEX)

        location = parse_location(location_text)
        confidence = 0.95 if location.regions or location.is_global else 0.5
        return ExtractionResult(
            value=location,
            confidence=confidence,
            method=ExtractionMethod.REGEX,
            source_snippet=location_text,
        )

    def validate(self, value: Any) -> bool:
        return isinstance(value, LocationRequirement)
