"""Text cleanup applied before section splitting and pattern matching."""

import html
import re
import unicodedata

_SPACES_RE = re.compile(r"[ \t]+")
_BLANK_LINES_RE = re.compile(r"\n\s*\n\s*\n")
_BULLET_RE = re.compile(r"^[ \t]*[•·▪▫*-][ \t]*", re.MULTILINE)
_LIST_MARKER_RE = re.compile(r"^[ \t]*(\d+)[.)][ \t]*", re.MULTILINE)
_QUOTES = str.maketrans({"«": '"', "»": '"', "“": '"', "”": '"', "‘": "'", "’": "'"})
_DASHES_RE = re.compile(r"[—–]")

_MATCHING_STRIP_RE = re.compile(r"[^\w\s+#./-]")
_TAG_RE = re.compile(r"<[^>]*>")
_BREAK_TAG_RE = re.compile(r"<br\s*/?>|</(?:p|div|li|tr|h[1-6])>", re.IGNORECASE)
_HTML_MARKUP_RE = re.compile(r"</?(?:p|br|div|li|ul|ol|span|b|i|strong|em|table|tr|td|h[1-6])\b[^>]*>", re.IGNORECASE)


def normalize(text: str) -> str:
    """Normalize raw request text for consistent parsing."""
    if not text:
        return ""

    text = text.lstrip("\ufeff")
    text = unicodedata.normalize("NFC", text)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _SPACES_RE.sub(" ", text)
    text = _BLANK_LINES_RE.sub("\n\n", text)
    text = _BULLET_RE.sub("- ", text)
    text = _LIST_MARKER_RE.sub(r"\1. ", text)
    text = text.translate(_QUOTES)
    text = _DASHES_RE.sub("-", text)

    lines = [line.strip() for line in text.split("\n")]
    return "\n".join(lines).strip()


def clean_for_matching(text: str) -> str:
    """Aggressive cleanup for keyword matching: lowercase, little punctuation."""
    text = normalize(text).lower()
    text = _MATCHING_STRIP_RE.sub(" ", text)
    return " ".join(text.split())


def looks_like_html(text: str) -> bool:
    return bool(text) and _HTML_MARKUP_RE.search(text) is not None


def strip_html(text: str) -> str:
    """Remove HTML tags and decode entities; line and block tags become newlines."""
    text = _BREAK_TAG_RE.sub("\n", text)
    text = _TAG_RE.sub(" ", text)
    return html.unescape(text)
