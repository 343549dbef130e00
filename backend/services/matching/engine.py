"""Rank candidates against matching requirements."""

import logging

import numpy as np

from models.schemas.candidate import CandidateProfile
from models.schemas.matching import (
    CandidateSummary,
    MatchingRequirements,
    MatchResponse,
    MatchResult,
    ScoreBreakdown,
)
from services.matching import scoring
from services.matching.reasoning import build_reasoning

logger = logging.getLogger(__name__)

MIN_SCORE = 20
DEFAULT_MAX_RESULTS = 10
MAX_TOTAL_SCORE = 100


def summarize(candidate: CandidateProfile) -> CandidateSummary:
    return CandidateSummary(
        id=candidate.id,
        external_id=candidate.external_id,
        name=candidate.name,
        grade=candidate.grade,
        role=candidate.role,
        country=candidate.country,
        city=candidate.city,
    )


class MatchingEngine:
    def __init__(self, min_score: int = MIN_SCORE, max_results: int = DEFAULT_MAX_RESULTS):
        self.min_score = min_score
        self.max_results = max_results

    def score_candidate(self, requirements: MatchingRequirements, candidate: CandidateProfile) -> MatchResult:
        breakdown = ScoreBreakdown(
            level=scoring.score_level(requirements, candidate),
            experience=scoring.score_experience(requirements, candidate),
            languages=scoring.score_languages(requirements, candidate),
            location=scoring.score_location(requirements, candidate),
            skills=scoring.score_skills(requirements, candidate),
        )
        score = min(breakdown.total, MAX_TOTAL_SCORE)
        return MatchResult(
            candidate_summary=summarize(candidate),
            score=score,
            percentage=round(score * 100 / MAX_TOTAL_SCORE),
            breakdown=breakdown,
            reasoning=build_reasoning(breakdown),
        )

    def match(
        self,
        requirements: MatchingRequirements,
        candidates: list[CandidateProfile],
        max_results: int | None = None,
    ) -> MatchResponse:
        """Score, filter by ``min_score``, sort (stable) and cap; never raises.

        ``average_score`` is taken over every candidate that passed the
        threshold, before the cap is applied.
        """
        limit = self.max_results if max_results is None else max(0, max_results)
        try:
            scored = [self.score_candidate(requirements, c) for c in candidates]
            passed = [m for m in scored if m.score >= self.min_score]
            passed.sort(key=lambda m: m.score, reverse=True)
            average = round(float(np.mean([m.score for m in passed])), 2) if passed else 0.0

            logger.info(
                "Matched %d of %d candidates (min score %d, average %.2f)",
                len(passed), len(candidates), self.min_score, average,
            )
            return MatchResponse(
                matches=passed[:limit],
                total_candidates=len(candidates),
                matched_count=len(passed),
                average_score=average,
            )
        except Exception as e:
            logger.exception("Matching failed")
            return MatchResponse(total_candidates=len(candidates or []), error=f"Matching failed: {e}")


def match(
    requirements: MatchingRequirements,
    candidates: list[CandidateProfile],
    max_results: int | None = None,
) -> MatchResponse:
    return MatchingEngine().match(requirements, candidates, max_results)
