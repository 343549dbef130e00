"""Map a parsed request onto the requirement subset the scorer reads."""

from models.schemas.matching import MatchingRequirements
from models.schemas.structured_request import (
    ExperienceRequirement,
    LocationRequirement,
    ParseResult,
    SkillRequirements,
    StructuredRequest,
)
from services import confidence


def _text(value: str | None) -> str | None:
    """Finalized records carry the sentinel; the scorer wants None."""
    return None if confidence.is_empty_value(value) else value


def map_parse_result_to_matching_requirements(
    parsed: StructuredRequest | ParseResult | None,
) -> MatchingRequirements:
    request = parsed.data if isinstance(parsed, ParseResult) else parsed
    if request is None:
        return MatchingRequirements()

    location = None
    if request.location is not None:
        location = LocationRequirement(
            regions=list(request.location.regions),
            work_type=_text(request.location.work_type),
            is_global=request.location.is_global,
            timezone=_text(request.location.timezone),
        )

    experience = None
    if request.experience is not None:
        experience = ExperienceRequirement(
            min_total_years=request.experience.min_total_years,
            leadership_required=request.experience.leadership_required,
            role_experience=list(request.experience.role_experience),
        )

    skills = None
    if request.skills is not None:
        skills = SkillRequirements(
            required=[s for s in request.skills.required if _text(s)],
            preferred=[s for s in request.skills.preferred if _text(s)],
        )

    return MatchingRequirements(
        levels=list(request.levels),
        language_requirements=list(request.language_requirements),
        team_size=request.team_size,
        location=location,
        experience=experience,
        role=_text(request.role),
        responsibilities=_text(request.responsibilities),
        industry=_text(request.industry),
        skills=skills,
    )
