"""Language requirement extraction from the numbered language slots.

Slot 8 holds the English level (required). Slot 10 names another language
(preferred) and slot 11 its level; when slot 11 is absent the level is read
from slot 10 itself.
"""

import re
from typing import Any

from models.schemas.extraction import ExtractionMethod, ExtractionResult, ExtractorContext
from models.schemas.structured_request import LanguageRequirement
from services.extractors.base import FieldExtractor

ENGLISH_FIELD = 8
OTHER_LANGUAGE_FIELD = 10
OTHER_LEVEL_FIELD = 11

LANGUAGE_ALIASES: dict[str, str] = {
    "английский": "English", "english": "English", "англ": "English",
    "русский": "Russian", "russian": "Russian",
    "испанский": "Spanish", "spanish": "Spanish",
    "немецкий": "German", "german": "German",
    "французский": "French", "french": "French",
    "польский": "Polish", "polish": "Polish",
    "украинский": "Ukrainian", "ukrainian": "Ukrainian",
    "чешский": "Czech", "czech": "Czech",
    "португальский": "Portuguese", "portuguese": "Portuguese",
    "итальянский": "Italian", "italian": "Italian",
    "голландский": "Dutch", "dutch": "Dutch",
}

LEVEL_ALIASES: dict[str, str] = {
    "a1": "A1", "beginner": "A1", "начальный": "A1",
    "a2": "A2", "elementary": "A2", "базовый": "A2",
    "b1": "B1", "intermediate": "B1", "средний": "B1",
    "b2": "B2", "upper-intermediate": "B2", "upper intermediate": "B2", "выше среднего": "B2",
    "c1": "C1", "advanced": "C1", "продвинутый": "C1",
    "c2": "C2", "proficient": "C2", "свободное владение": "C2",
    "native": "Native", "носитель": "Native",
}

EMPTY_MARKERS: tuple[str, ...] = ("n/a", "na", "нет", "не требуется", "none")

_SQUASH_RE = re.compile(r"[\s,()-]")
# A +/- that is not a hyphen inside a word such as "Upper-Intermediate"
_MODIFIER_RE = re.compile(r"(?<![^\W\d_])([+-])(?![^\W\d_])")
_EMPTY_RE = re.compile(
    r"(?<!\w)(?:" + "|".join(re.escape(m) for m in EMPTY_MARKERS) + r")(?!\w)",
    re.IGNORECASE,
)


def _squash(text: str) -> str:
    return _SQUASH_RE.sub("", text.lower())


# Longest aliases first so "upper intermediate" wins over "intermediate"
_SORTED_LEVELS = sorted(
    ((_squash(alias), level) for alias, level in LEVEL_ALIASES.items()),
    key=lambda item: len(item[0]),
    reverse=True,
)
_SORTED_LANGUAGES = sorted(LANGUAGE_ALIASES.items(), key=lambda item: len(item[0]), reverse=True)


def is_empty_marker(text: str) -> bool:
    return bool(_EMPTY_RE.search(text.strip()))


def find_level(text: str) -> str | None:
    squashed = _squash(text)
    if not squashed:
        return None
    for alias, level in _SORTED_LEVELS:
        if alias in squashed:
            return level
    return None


def find_language(text: str) -> tuple[str, str] | None:
    """(canonical language, alias found) for the first known language in ``text``."""
    lowered = text.lower()
    for alias, language in _SORTED_LANGUAGES:
        if alias in lowered:
            return language, alias
    return None


def parse_requirement(text: str, language: str, priority: str) -> LanguageRequirement | None:
    level = find_level(text)
    if not level:
        return None
    m = _MODIFIER_RE.search(text)
    return LanguageRequirement(
        language=language,
        level=level,
        modifier=m.group(1) if m else None,
        priority=priority,
    )


class LanguageExtractor(FieldExtractor):
    name = "language_requirements"

    def extract(self, text: str, context: ExtractorContext | None = None) -> ExtractionResult:
        if context is None or not context.numbered_fields:
            return ExtractionResult(value=[], confidence=0.0, method=ExtractionMethod.REGEX)

        requirements: list[LanguageRequirement] = []

        english = context.numbered_fields.get(ENGLISH_FIELD)
        if english and english.strip() and not is_empty_marker(english):
            req = parse_requirement(english, "English", "required")
            if req:
                requirements.append(req)

        other = context.numbered_fields.get(OTHER_LANGUAGE_FIELD)
        if other and other.strip() and not is_empty_marker(other):
            found = find_language(other)
            if found:
                language, alias = found
                level_text = context.numbered_fields.get(OTHER_LEVEL_FIELD)
                if not level_text or not level_text.strip():
                    level_text = re.sub(re.escape(alias), "", other, count=1, flags=re.IGNORECASE)
                req = parse_requirement(level_text, language, "preferred")
                if req:
                    requirements.append(req)

        return ExtractionResult(
            value=requirements,
            confidence=0.95 if requirements else 0.0,
            method=ExtractionMethod.REGEX,
        )

    def validate(self, value: Any) -> bool:
        return isinstance(value, list) and all(
            isinstance(req, LanguageRequirement) and req.language and req.level and req.priority
            for req in value
        )
