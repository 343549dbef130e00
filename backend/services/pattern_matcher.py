"""Named regex patterns that recur across request texts.

Results are attached to the extractor context as auxiliary matches so strategies
can derive fields (team size, years of experience, deadlines) that no single
extractor owns.
"""

import re

from models.schemas.extraction import PatternMatch

# name -> (compiled pattern, confidence)
PATTERNS: dict[str, tuple[re.Pattern, float]] = {
    # Dates
    "date_iso": (re.compile(r"\b(\d{4}-\d{2}-\d{2})\b"), 0.95),
    "date_ru": (re.compile(r"\b(\d{1,2}[./]\d{1,2}[./]\d{2,4})\b"), 0.90),
    # URLs and identifiers
    "salesforce_url": (re.compile(r"(https://[^/\s]*salesforce\.com\S*)"), 0.99),
    "request_id": (re.compile(r"\b(R-\d{4,6})\b"), 0.95),
    "opportunity_id": (re.compile(r"\b(006[A-Za-z0-9]{12,15})\b"), 0.90),
    "cv_id": (re.compile(r"(?<![\d.-])\b(\d{6})\b(?![.-]\d)"), 0.80),
    # Levels
    "level": (re.compile(r"\b(Junior|Middle|Senior|Lead|Principal)\b", re.IGNORECASE), 0.85),
    "english_level": (
        re.compile(
            r"(?:английск\w*|english)\W+(?:\w+\W+)?"
            r"([ABC][12]|Native|Upper[- ]Intermediate|Intermediate|Advanced|Elementary)\b",
            re.IGNORECASE,
        ),
        0.90,
    ),
    # Quantities
    "team_size": (
        re.compile(
            r"(\d+)\s*(?:человек\w*|сотрудник\w*|специалист\w*|people|persons?|engineers?)",
            re.IGNORECASE,
        ),
        0.75,
    ),
    "years_experience": (
        re.compile(
            r"(\d+)\+?\s*(?:years?|лет|года?)\s+(?:of\s+)?(?:\w+\s+)?(?:experience|опыт\w*)"
            r"|(?:experience|опыт\w*)\D{0,40}?(\d+)\+?\s*(?:years?|лет|года?)\b",
            re.IGNORECASE,
        ),
        0.70,
    ),
    # Geography
    "location": (re.compile(r"\b(РФ|РБ|EU|US|Remote|Office|Hybrid|Удален\w*|Офис)\b", re.IGNORECASE), 0.85),
    "timezone": (re.compile(r"\b((?:UTC|GMT)\s*[+-]\s*\d{1,2}(?::\d{2})?)", re.IGNORECASE), 0.80),
}

_CV_LINE_RE = re.compile(
    r"^CV\s*-\s*([^-]*)\s*-\s*([^-]*)\s*-\s*([^-]*)\s*-\s*([^-]*)\s*-\s*(.*)$"
)


def _scan(name: str, pattern: re.Pattern, confidence: float, text: str) -> list[PatternMatch]:
    found = []
    for m in pattern.finditer(text):
        value = next((g for g in m.groups() if g is not None), m.group(0))
        found.append(PatternMatch(
            pattern=name,
            value=value.strip(),
            raw=m.group(0),
            start=m.start(),
            confidence=confidence,
        ))
    return found


def find_all(text: str) -> dict[str, list[PatternMatch]]:
    """Run every named pattern; only names with at least one hit are returned."""
    results: dict[str, list[PatternMatch]] = {}
    if not text:
        return results
    for name, (pattern, confidence) in PATTERNS.items():
        found = _scan(name, pattern, confidence, text)
        if found:
            results[name] = found
    return results


def find(text: str, name: str) -> list[PatternMatch]:
    """Run a single named pattern. Unknown names yield no matches."""
    entry = PATTERNS.get(name)
    if entry is None or not text:
        return []
    pattern, confidence = entry
    return _scan(name, pattern, confidence, text)


def parse_cv_line(line: str) -> dict[str, str]:
    """Split a "CV - role - tech - company - manager - id" header into parts."""
    normalized = " ".join(line.split())
    m = _CV_LINE_RE.match(normalized)
    if not m:
        return {}
    keys = ("role", "technology", "company", "manager", "request_id")
    return {key: m.group(i + 1).strip() for i, key in enumerate(keys)}


def extract_dates(text: str) -> list[str]:
    """ISO dates first, then day-month-year dates, in text order within each kind."""
    return [m.value for m in find(text, "date_iso")] + [m.value for m in find(text, "date_ru")]
