"""Per-category candidate scores.

Each function returns a CategoryScore capped at its category maximum. A category
whose requirement is absent grants full credit (half credit for level), which
favours candidates on under-specified requests; callers that want stricter
ranking must fill in the requirement.
"""

import math
import re

from models.schemas.candidate import CandidateProfile
from models.schemas.matching import CategoryScore, MatchingRequirements
from models.schemas.structured_request import LocationRequirement
from services import confidence, text_normalizer

LEVEL_MAX = 25
EXPERIENCE_MAX = 30
LANGUAGES_MAX = 25
LOCATION_MAX = 10
SKILLS_MAX = 10

GRADE_ORDER: dict[str, int] = {
    "intern": 0,
    "junior": 1,
    "middle": 2,
    "senior": 3,
    "lead": 4,
    "architect": 5,
    "principal": 5,
}

# Candidates rarely list explicit years, so they are estimated from the grade
YEARS_BY_GRADE: dict[str, int] = {
    "intern": 0,
    "junior": 1,
    "middle": 3,
    "senior": 5,
    "lead": 7,
    "architect": 8,
    "principal": 10,
}

CEFR_ORDER: dict[str, int] = {
    "a1": 1, "a2": 2, "b1": 3, "b2": 4, "c1": 5, "c2": 6, "native": 7,
}

LANGUAGE_WEIGHTS: dict[str, int] = {"required": 10, "preferred": 7, "nice-to-have": 4}

REQUIRED_SKILL_POINTS = 3
PREFERRED_SKILL_POINTS = 1

EU_COUNTRIES: tuple[str, ...] = (
    "austria", "австрия", "belgium", "бельгия", "bulgaria", "болгария",
    "croatia", "хорватия", "cyprus", "кипр", "czech", "чехия",
    "denmark", "дания", "estonia", "эстония", "finland", "финляндия",
    "france", "франция", "germany", "германия", "greece", "греция",
    "hungary", "венгрия", "ireland", "ирландия", "italy", "италия",
    "latvia", "латвия", "lithuania", "литва", "luxembourg", "люксембург",
    "malta", "мальта", "netherlands", "нидерланды", "poland", "польша",
    "portugal", "португалия", "romania", "румыния", "slovakia", "словакия",
    "slovenia", "словения", "spain", "испания", "sweden", "швеция",
)

# region code -> lowercase country substrings
REGION_COUNTRIES: dict[str, tuple[str, ...]] = {
    "RU": ("russia", "россия"),
    "BY": ("belarus", "беларусь"),
    "US": ("usa", "united states", "сша"),
    "AM": ("armenia", "армения"),
    "GE": ("georgia", "грузия"),
    "EU": EU_COUNTRIES,
}

_MODIFIER_RE = re.compile(r"[+-]+$")


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def base_level(value: str | None) -> str:
    """Lowercase grade or CEFR level with trailing +/- modifiers removed."""
    return _MODIFIER_RE.sub("", (value or "").strip()).strip().lower()


def grade_rank(grade: str | None) -> int | None:
    return GRADE_ORDER.get(base_level(grade))


def estimated_years(grade: str | None) -> int:
    return YEARS_BY_GRADE.get(base_level(grade), 0)


def language_rank(level: str | None) -> int | None:
    return CEFR_ORDER.get(base_level(level))


def _has_text(value: str | None) -> bool:
    return not confidence.is_empty_value(value)


def score_level(requirements: MatchingRequirements, candidate: CandidateProfile) -> CategoryScore:
    ranks = [r for r in (grade_rank(level) for level in requirements.levels) if r is not None]
    if not ranks:
        return CategoryScore(score=round_half_up(LEVEL_MAX / 2), max=LEVEL_MAX, details="No level requirement")

    candidate_rank = grade_rank(candidate.grade)
    minimum = min(ranks)
    if candidate_rank is not None and candidate_rank >= minimum:
        return CategoryScore(
            score=LEVEL_MAX, max=LEVEL_MAX,
            details=f"{candidate.grade} meets {', '.join(requirements.levels)}",
        )
    return CategoryScore(
        score=0, max=LEVEL_MAX,
        details=f"{candidate.grade or 'Unknown'} below {', '.join(requirements.levels)}",
    )


def score_experience(requirements: MatchingRequirements, candidate: CandidateProfile) -> CategoryScore:
    required = requirements.experience.min_total_years if requirements.experience else None
    if not required or required <= 0:
        return CategoryScore(score=EXPERIENCE_MAX, max=EXPERIENCE_MAX, details="No experience requirement")

    years = estimated_years(candidate.grade)
    if years >= required:
        score = EXPERIENCE_MAX
    else:
        score = min(EXPERIENCE_MAX, round_half_up(EXPERIENCE_MAX * years / required))
    return CategoryScore(
        score=score, max=EXPERIENCE_MAX,
        details=f"~{years} years estimated from grade, {required}+ required",
    )


def _candidate_language_level(candidate: CandidateProfile, language: str) -> str | None:
    wanted = language.strip().lower()
    for name, level in candidate.languages.items():
        if name.strip().lower() == wanted:
            return level
    return None


def score_languages(requirements: MatchingRequirements, candidate: CandidateProfile) -> CategoryScore:
    if not requirements.language_requirements:
        return CategoryScore(score=LANGUAGES_MAX, max=LANGUAGES_MAX, details="No language requirement")

    total = 0
    notes = []
    for req in requirements.language_requirements:
        level = _candidate_language_level(candidate, req.language)
        candidate_rank = language_rank(level)
        required_rank = language_rank(req.level)
        if candidate_rank is None:
            met = False
        elif required_rank is None:
            # Unknown requirement level: any known level satisfies it
            met = True
        else:
            met = candidate_rank >= required_rank
        if met:
            total += LANGUAGE_WEIGHTS.get(req.priority, 0)
        notes.append(f"{req.language} {req.level} ({req.priority}): {level or 'none'}{'' if met else ' - not met'}")

    return CategoryScore(score=min(total, LANGUAGES_MAX), max=LANGUAGES_MAX, details="; ".join(notes))


def has_location_requirement(location: LocationRequirement | None) -> bool:
    if location is None:
        return False
    return bool(location.regions) or location.is_global or _has_text(location.work_type)


def score_location(requirements: MatchingRequirements, candidate: CandidateProfile) -> CategoryScore:
    location = requirements.location
    if not has_location_requirement(location):
        return CategoryScore(score=LOCATION_MAX, max=LOCATION_MAX, details="No location requirement")
    if location.is_global:
        return CategoryScore(score=LOCATION_MAX, max=LOCATION_MAX, details="No location restrictions")
    if (location.work_type or "").strip().lower() == "remote":
        return CategoryScore(score=LOCATION_MAX, max=LOCATION_MAX, details="Remote work")

    country = candidate.country.strip().lower()
    for region in location.regions:
        names = REGION_COUNTRIES.get(region.upper(), ())
        if country and any(name in country for name in names):
            return CategoryScore(
                score=LOCATION_MAX, max=LOCATION_MAX, details=f"{candidate.country} is in {region}",
            )
    return CategoryScore(
        score=0, max=LOCATION_MAX,
        details=f"{candidate.country or 'Unknown country'} outside {', '.join(location.regions) or location.work_type}",
    )


def _skill_matches(skill: str, known: list[str]) -> bool:
    wanted = text_normalizer.clean_for_matching(skill)
    if not wanted:
        return False
    return any(wanted in k or k in wanted for k in known if k)


def score_skills(requirements: MatchingRequirements, candidate: CandidateProfile) -> CategoryScore:
    skills = requirements.skills
    required = [s for s in (skills.required if skills else []) if _has_text(s)]
    preferred = [s for s in (skills.preferred if skills else []) if _has_text(s)]
    if not required and not preferred:
        return CategoryScore(score=SKILLS_MAX, max=SKILLS_MAX, details="No skill requirement")

    known = [text_normalizer.clean_for_matching(s) for s in candidate.known_skills()]
    matched_required = [s for s in required if _skill_matches(s, known)]
    matched_preferred = [s for s in preferred if _skill_matches(s, known)]
    score = REQUIRED_SKILL_POINTS * len(matched_required) + PREFERRED_SKILL_POINTS * len(matched_preferred)

    matched = matched_required + matched_preferred
    return CategoryScore(
        score=min(score, SKILLS_MAX), max=SKILLS_MAX,
        details=f"Matched: {', '.join(matched)}" if matched else "No matching skills",
    )
