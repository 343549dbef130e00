"""Split a normalized request into a meta header, a description and numbered fields."""

import logging
import re

from models.schemas.extraction import ExtractorContext, SplitResult
from services import pattern_matcher, text_normalizer

logger = logging.getLogger(__name__)

NUMBERED_LINE_RE = re.compile(r"^(\d+)\.\s*(.*)$")
_NUMBERED_START_RE = re.compile(r"^\d+\.\s")
_DESCRIPTION_MARKER_RE = re.compile(r"^(?:описание|description)\b", re.IGNORECASE)

# Header lines are only looked for at the very top of a request
MAX_META_LINES = 4


def _is_meta_line(line: str) -> bool:
    return line.startswith("CV -") or "salesforce.com" in line or "https://" in line


def split(text: str) -> SplitResult:
    """Split already-normalized text into sections.

    Numbered fields follow the "<N>. <label> <value>" convention; a field runs
    until the next numbered line and continuation lines are joined with spaces.
    Text without the convention yields an empty field map.
    """
    raw_lines = [line.strip() for line in text.split("\n") if line.strip()]

    meta_lines: list[str] = []
    for line in raw_lines[:MAX_META_LINES]:
        if not _is_meta_line(line):
            break
        meta_lines.append(line)

    description: list[str] = []
    fields: dict[int, str] = {}
    section = "meta"
    i = len(meta_lines)

    while i < len(raw_lines):
        line = raw_lines[i]

        if section != "list" and _NUMBERED_START_RE.match(line):
            section = "list"

        if section == "meta":
            if _DESCRIPTION_MARKER_RE.match(line):
                section = "description"
                rest = _DESCRIPTION_MARKER_RE.sub("", line).lstrip(" :-")
                if rest:
                    description.append(rest)
            else:
                description.append(line)
            i += 1
            continue

        if section == "description":
            description.append(line)
            i += 1
            continue

        m = NUMBERED_LINE_RE.match(line)
        parts = [m.group(2).strip()]
        j = i + 1
        while j < len(raw_lines) and not _NUMBERED_START_RE.match(raw_lines[j]):
            parts.append(raw_lines[j])
            j += 1
        fields[int(m.group(1))] = " ".join(p for p in parts if p)
        i = j

    return SplitResult(
        meta_info="\n".join(meta_lines),
        description=" ".join(description).strip(),
        numbered_fields=fields,
        raw_lines=raw_lines,
        missing_items=missing_items(fields),
    )


def missing_items(fields: dict[int, str], max_index: int | None = None) -> list[int]:
    """Indexes between 1 and the highest (or given) index that have no value."""
    if not fields and max_index is None:
        return []
    upper = max_index if max_index is not None else max(fields)
    return [i for i in range(1, upper + 1) if not (fields.get(i) or "").strip()]


def preprocess(raw_text: str) -> tuple[str, SplitResult, ExtractorContext]:
    """Normalize, split and pattern-scan a raw request into an extractor context.

    Requests pasted from rich-text sources arrive as HTML; markup is stripped
    before normalization so numbered lines survive as lines.
    """
    raw_text = raw_text or ""
    if text_normalizer.looks_like_html(raw_text):
        raw_text = text_normalizer.strip_html(raw_text)
    normalized = text_normalizer.normalize(raw_text)
    sections = split(normalized)
    context = ExtractorContext(
        meta_block=sections.meta_info or None,
        numbered_fields=sections.numbered_fields,
        raw_text=normalized,
        auxiliary_matches=pattern_matcher.find_all(normalized),
    )
    logger.debug(
        "Preprocessed request: %d meta lines, %d numbered fields, gaps at %s",
        len(sections.meta_info.splitlines()), len(sections.numbered_fields), sections.missing_items,
    )
    return normalized, sections, context
