"""Human-readable explanation of a score breakdown, one line per category."""

from models.schemas.matching import ScoreBreakdown

CATEGORY_LABELS: dict[str, str] = {
    "level": "Level",
    "experience": "Experience",
    "languages": "Languages",
    "location": "Location",
    "skills": "Skills",
}


def build_reasoning(breakdown: ScoreBreakdown) -> str:
    lines = []
    for name, category in breakdown.categories():
        line = f"{CATEGORY_LABELS[name]}: {category.score}/{category.max}"
        if category.details:
            line += f" - {category.details}"
        lines.append(line)
    return "\n".join(lines)
