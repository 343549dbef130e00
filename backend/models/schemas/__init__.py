"""Pydantic contracts shared by the parsing pipeline and the matching engine."""

from models.schemas.candidate import CandidateProfile
from models.schemas.extraction import (
    ExtractionMethod,
    ExtractionResult,
    ExtractorContext,
    PatternMatch,
    SplitResult,
)
from models.schemas.matching import (
    CandidateSummary,
    CategoryScore,
    MatchingRequirements,
    MatchResponse,
    MatchResult,
    ScoreBreakdown,
)
from models.schemas.stage import (
    PipelineResult,
    StageError,
    StageErrorCode,
    StageInput,
    StageMetadata,
    StageResult,
)
from models.schemas.structured_request import (
    ExperienceRequirement,
    LanguageRequirement,
    LocationRequirement,
    MetaInfo,
    ParseResult,
    PrimaryRequirements,
    RequestStatus,
    SkillRequirements,
    StructuredRequest,
)

__all__ = [
    "CandidateProfile",
    "CandidateSummary",
    "CategoryScore",
    "ExperienceRequirement",
    "ExtractionMethod",
    "ExtractionResult",
    "ExtractorContext",
    "LanguageRequirement",
    "LocationRequirement",
    "MatchResponse",
    "MatchResult",
    "MatchingRequirements",
    "MetaInfo",
    "ParseResult",
    "PatternMatch",
    "PipelineResult",
    "PrimaryRequirements",
    "RequestStatus",
    "ScoreBreakdown",
    "SkillRequirements",
    "SplitResult",
    "StageError",
    "StageErrorCode",
    "StageInput",
    "StageMetadata",
    "StageResult",
    "StructuredRequest",
]
