"""Developer grade / level extraction (numbered field 6)."""

import re
from typing import Any

from models.schemas.extraction import ExtractionMethod, ExtractionResult, ExtractorContext
from services.extractors.base import FieldExtractor

GRADE_FIELD = 6

GRADE_ALIASES: dict[str, str] = {
    "jun": "Junior", "junior": "Junior",
    "mid": "Middle", "middle": "Middle",
    "sen": "Senior", "senior": "Senior", "strong": "Senior",
    "lead": "Lead",
    "architect": "Architect", "arch": "Architect",
    "principal": "Principal", "expert": "Principal",
    "sdet": "SDET",
    "testops": "TestOps",
}

# Only these take a +/- modifier; Lead, Architect, Principal, SDET and TestOps never do
MODIFIABLE_GRADES: frozenset[str] = frozenset({"Junior", "Middle", "Senior"})

_MODIFIER_RE = re.compile(r"^[+-]{1,2}$")
_PAD_MODIFIERS_RE = re.compile(r"[+-]{1,2}")
_SEPARATORS_RE = re.compile(r"[,;/–—]")
_NON_TOKEN_RE = re.compile(r"[^a-z0-9+\- ]")


def tokenize(text: str) -> list[str]:
    """Lowercase, split modifiers off as their own tokens, drop other punctuation.

    Only Latin letters survive, so Cyrillic grade words produce no tokens.
    """
    if not text:
        return []
    text = text.lower()
    text = _PAD_MODIFIERS_RE.sub(lambda m: f" {m.group(0)} ", text)
    text = _SEPARATORS_RE.sub(" ", text)
    text = _NON_TOKEN_RE.sub("", text)
    return text.split()


def base_grade(grade: str) -> str:
    return grade.rstrip("+-")


def parse_grades(text: str) -> list[str]:
    """Ordered, de-duplicated grades with modifiers attached where allowed."""
    grades: list[str] = []
    for token in tokenize(text):
        canonical = GRADE_ALIASES.get(token)
        if canonical:
            grades.append(canonical)
        elif _MODIFIER_RE.match(token) and grades:
            last = grades[-1]
            base = base_grade(last)
            modifier = last[len(base):] + token
            if base in MODIFIABLE_GRADES and _MODIFIER_RE.match(modifier):
                grades[-1] = base + modifier
    return list(dict.fromkeys(grades))


class GradeExtractor(FieldExtractor):
    name = "levels"

    def extract(self, text: str, context: ExtractorContext | None = None) -> ExtractionResult:
        grade_text = (context.field(GRADE_FIELD) if context else None) or text
        if not grade_text or not grade_text.strip():
            return ExtractionResult.empty(ExtractionMethod.REGEX)

        grades = parse_grades(grade_text)
        return ExtractionResult(
            value=grades,
            confidence=0.99 if grades else 0.4,
            method=ExtractionMethod.REGEX,
            source_snippet=grade_text,
            metadata={"original": grade_text},
        )

    def validate(self, value: Any) -> bool:
        return isinstance(value, list) and all(isinstance(v, str) for v in value)
