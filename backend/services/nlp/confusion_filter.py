"""Reject recognised entities whose context points to a different meaning."""

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class ConfusionCheck:
    allow: bool
    matched_confusion: str | None = None
    reason: str | None = None


class ConfusionFilter:
    """Keeps an entity unless one of its confusable terms occurs as a whole word
    in the surrounding text."""

    def __init__(self, confusables: dict[str, list[str]]):
        self._patterns: dict[str, list[tuple[str, re.Pattern]]] = {
            name: [(word, re.compile(rf"(?<!\w){re.escape(word.lower())}(?!\w)")) for word in words]
            for name, words in confusables.items()
        }

    def check(self, canonical_name: str, surrounding_text: str) -> ConfusionCheck:
        lowered = surrounding_text.lower()
        for word, pattern in self._patterns.get(canonical_name, []):
            if pattern.search(lowered):
                return ConfusionCheck(
                    allow=False,
                    matched_confusion=word,
                    reason=f'"{canonical_name}" may be confused with "{word}" in this text',
                )
        return ConfusionCheck(allow=True)

    def should_keep(self, canonical_name: str, surrounding_text: str) -> bool:
        result = self.check(canonical_name, surrounding_text)
        if not result.allow:
            logger.debug("Dropping entity: %s", result.reason)
        return result.allow
