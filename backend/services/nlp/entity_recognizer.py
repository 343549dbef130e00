"""Vocabulary-seeded named-entity recognizer built on a spaCy EntityRuler.

The recognizer is an ordinary object: build it, call ``train()`` (or let
``ensure_ready()`` do it on first use), then pass it to the extractors and
strategies that need it. Tests construct their own isolated instances.
"""

import logging
import re
import threading
import time
from dataclasses import dataclass

import spacy
from spacy.language import Language

from services.nlp.confusion_filter import ConfusionFilter
from services.nlp.vocabulary import (
    CANONICAL_ALIASES,
    CONFUSABLES,
    ENTITY_TYPES,
    EXTRA_SYNONYMS,
)

logger = logging.getLogger(__name__)

_CYRILLIC_END_RE = re.compile(r"[а-яё]$")


@dataclass(frozen=True)
class RecognizedEntity:
    label: str  # technology | platform | skill | domain | role
    canonical: str
    text: str
    start_char: int
    end_char: int


def _inflections(keyword: str) -> list[str]:
    """Common Russian case forms of a lowercased Cyrillic keyword."""
    if not _CYRILLIC_END_RE.search(keyword):
        return []
    return [keyword + "а", keyword + "е", keyword[:-1] + "овский"]


def build_patterns(
    entity_types: dict[str, dict[str, list[str]]],
    canonical_aliases: dict[str, str],
    extra_synonyms: dict[str, list[str]] | None = None,
) -> list[dict]:
    """EntityRuler phrase patterns: one per (label, canonical name, synonym)."""
    extra_synonyms = extra_synonyms or {}
    patterns: list[dict] = []
    seen: set[tuple[str, str]] = set()

    for label, categories in entity_types.items():
        for keywords in categories.values():
            for keyword in keywords:
                lowered = keyword.lower()
                canonical = canonical_aliases.get(lowered, keyword)
                synonyms = [canonical, lowered, *_inflections(lowered)]
                synonyms += extra_synonyms.get(canonical, [])
                for synonym in synonyms:
                    key = (label, synonym.lower())
                    if key in seen:
                        continue
                    seen.add(key)
                    patterns.append({"label": label, "pattern": synonym, "id": canonical})
    return patterns


class EntityRecognizer:
    def __init__(
        self,
        entity_types: dict[str, dict[str, list[str]]] | None = None,
        canonical_aliases: dict[str, str] | None = None,
        confusables: dict[str, list[str]] | None = None,
        extra_synonyms: dict[str, list[str]] | None = None,
        language: str = "xx",
    ):
        self.entity_types = entity_types if entity_types is not None else ENTITY_TYPES
        self.canonical_aliases = canonical_aliases if canonical_aliases is not None else CANONICAL_ALIASES
        self.extra_synonyms = extra_synonyms if extra_synonyms is not None else EXTRA_SYNONYMS
        self.language = language
        self.confusion_filter = ConfusionFilter(confusables if confusables is not None else CONFUSABLES)
        self._nlp: Language | None = None
        self._lock = threading.Lock()

    @property
    def ready(self) -> bool:
        return self._nlp is not None

    def train(self) -> None:
        """Build the spaCy pipeline and load every vocabulary pattern."""
        with self._lock:
            if self._nlp is not None:
                return
            start = time.perf_counter()
            nlp = spacy.blank(self.language)
            nlp.add_pipe("sentencizer")
            ruler = nlp.add_pipe("entity_ruler", config={"phrase_matcher_attr": "LOWER"})
            patterns = build_patterns(self.entity_types, self.canonical_aliases, self.extra_synonyms)
            ruler.add_patterns(patterns)
            self._nlp = nlp
            logger.info(
                "Entity recognizer trained: %d patterns in %.0fms",
                len(patterns), (time.perf_counter() - start) * 1000,
            )

    def ensure_ready(self) -> None:
        if not self.ready:
            self.train()

    def recognize(self, text: str) -> list[RecognizedEntity]:
        """Entities in text order, confusable ones removed."""
        self.ensure_ready()
        if not text or not text.strip():
            return []

        doc = self._nlp(text)
        entities: list[RecognizedEntity] = []
        for ent in doc.ents:
            canonical = ent.ent_id_ or ent.text
            surrounding = ent.sent.text if doc.has_annotation("SENT_START") else text
            if not self.confusion_filter.should_keep(canonical, surrounding):
                continue
            entities.append(RecognizedEntity(
                label=ent.label_,
                canonical=canonical,
                text=ent.text,
                start_char=ent.start_char,
                end_char=ent.end_char,
            ))
        return entities

    def group(self, text: str) -> dict[str, list[str]]:
        """Canonical names per label, de-duplicated in order of first mention."""
        grouped: dict[str, list[str]] = {label: [] for label in self.entity_types}
        for entity in self.recognize(text):
            bucket = grouped.setdefault(entity.label, [])
            if entity.canonical not in bucket:
                bucket.append(entity.canonical)
        return grouped
