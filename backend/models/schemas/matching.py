"""Matching contracts: requirements consumed for scoring and ranked results."""

from pydantic import BaseModel

from models.schemas.structured_request import (
    ExperienceRequirement,
    LanguageRequirement,
    LocationRequirement,
    SkillRequirements,
)


class MatchingRequirements(BaseModel):
    """Subset of a structured request that the scorer actually reads."""
    levels: list[str] = []
    language_requirements: list[LanguageRequirement] = []
    team_size: int | None = None
    location: LocationRequirement | None = None
    experience: ExperienceRequirement | None = None
    role: str | None = None
    responsibilities: str | None = None
    industry: str | None = None
    skills: SkillRequirements | None = None


class CategoryScore(BaseModel):
    score: int = 0
    max: int
    details: str = ""


class ScoreBreakdown(BaseModel):
    level: CategoryScore = CategoryScore(max=25)
    experience: CategoryScore = CategoryScore(max=30)
    languages: CategoryScore = CategoryScore(max=25)
    location: CategoryScore = CategoryScore(max=10)
    skills: CategoryScore = CategoryScore(max=10)

    def categories(self) -> list[tuple[str, CategoryScore]]:
        return [
            ("level", self.level),
            ("experience", self.experience),
            ("languages", self.languages),
            ("location", self.location),
            ("skills", self.skills),
        ]

    @property
    def total(self) -> int:
        return sum(cat.score for _, cat in self.categories())


class CandidateSummary(BaseModel):
    id: str
    external_id: str | None = None
    name: str = ""
    grade: str = ""
    role: str = ""
    country: str = ""
    city: str = ""


class MatchResult(BaseModel):
    candidate_summary: CandidateSummary
    score: int = 0
    percentage: int = 0
    breakdown: ScoreBreakdown = ScoreBreakdown()
    reasoning: str = ""


class MatchResponse(BaseModel):
    matches: list[MatchResult] = []
    total_candidates: int = 0
    matched_count: int = 0
    average_score: float = 0.0
    error: str | None = None
