"""Candidate directory: the source of profiles handed to the matching engine."""

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Protocol

from models.schemas.candidate import CandidateProfile

logger = logging.getLogger(__name__)


class CandidateProvider(Protocol):
    def get_all(self) -> list[CandidateProfile]: ...

    def get_by_id(self, candidate_id: str) -> CandidateProfile | None: ...

    def get_by_external_id(self, external_id: str) -> CandidateProfile | None: ...

    def search(
        self,
        grade: str | None = None,
        role: str | None = None,
        country: str | None = None,
        skill: str | None = None,
    ) -> list[CandidateProfile]: ...


class InMemoryCandidateProvider:
    """Candidate directory held in memory, optionally loaded from a JSON file."""

    def __init__(self, candidates: Iterable[CandidateProfile | dict[str, Any]] = ()):
        self._candidates: list[CandidateProfile] = []
        for candidate in candidates:
            self.add(candidate)

    @classmethod
    def from_json_file(cls, path: str | Path) -> "InMemoryCandidateProvider":
        """Load a JSON array of sheet-style records (or ``{"candidates": [...]}``)."""
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        records = raw.get("candidates", []) if isinstance(raw, dict) else raw
        provider = cls(records)
        logger.info("Loaded %d candidates from %s", len(provider), path)
        return provider

    def add(self, candidate: CandidateProfile | dict[str, Any]) -> CandidateProfile:
        if not isinstance(candidate, CandidateProfile):
            candidate = CandidateProfile.from_record(candidate)
        self._candidates.append(candidate)
        return candidate

    def get_all(self) -> list[CandidateProfile]:
        return list(self._candidates)

    def get_by_id(self, candidate_id: str) -> CandidateProfile | None:
        return next((c for c in self._candidates if c.id == candidate_id), None)

    def get_by_external_id(self, external_id: str) -> CandidateProfile | None:
        return next((c for c in self._candidates if c.external_id == external_id), None)

    def search(
        self,
        grade: str | None = None,
        role: str | None = None,
        country: str | None = None,
        skill: str | None = None,
    ) -> list[CandidateProfile]:
        """Filter by exact grade, role/country substring and positive skill level."""
        found = []
        for c in self._candidates:
            if grade and c.grade.lower() != grade.lower():
                continue
            if role and role.lower() not in c.role.lower():
                continue
            if country and country.lower() not in c.country.lower():
                continue
            if skill and not c.has_skill(skill):
                continue
            found.append(c)
        return found

    def __len__(self) -> int:
        return len(self._candidates)
