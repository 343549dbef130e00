"""Candidate (employee) profile consumed by the matching engine."""

from typing import Any

from pydantic import BaseModel

# Skill columns of the employee sheet
SKILL_COLUMNS: tuple[str, ...] = (
    "JS, TS", "Java", "Python", "C#", "Kotlin", "Ruby", "Swift",
    "Performance", "Security", "Accessibility", "Testing Framework",
)

LANGUAGE_COLUMNS: tuple[str, ...] = ("English", "German", "Polish")

# Skill levels that count as having the skill
POSITIVE_SKILL_LEVELS: frozenset[str] = frozenset({"low", "medium", "high"})


class CandidateProfile(BaseModel):
    id: str
    external_id: str | None = None
    name: str = ""
    grade: str = "No"  # Intern | Junior | Middle | Senior | No
    role: str = ""
    country: str = ""
    city: str = ""
    team_lead: str = ""
    skills: dict[str, str] = {}  # skill -> Low | Medium | High | No | On check
    languages: dict[str, str] = {}  # language -> A1..C2 | Native | No

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "CandidateProfile":
        """Build a profile from an employee-sheet style record.

        Accepts the sheet column names ("Grade", "English", "Team Lead", ...)
        next to the snake_case field names.
        """
        def pick(*keys: str, default: str = "") -> str:
            for key in keys:
                value = record.get(key)
                if value not in (None, ""):
                    return str(value).strip()
            return default

        skills = dict(record.get("skills") or {})
        for column in SKILL_COLUMNS:
            if record.get(column):
                skills[column] = str(record[column]).strip()

        languages = dict(record.get("languages") or {})
        for column in LANGUAGE_COLUMNS:
            if record.get(column):
                languages[column] = str(record[column]).strip()

        external_id = pick("external_id", "externalId") or None
        return cls(
            id=pick("id", "_id", "external_id", "externalId", "Name", "name", default="unknown"),
            external_id=external_id,
            name=pick("name", "Name", "ФИО"),
            grade=pick("grade", "Grade", "Уровень", default="No"),
            role=pick("role", "Role", "Позиция"),
            country=pick("country", "Country", "Страна"),
            city=pick("city", "City", "Город"),
            team_lead=pick("team_lead", "Team Lead"),
            skills=skills,
            languages=languages,
        )

    def has_skill(self, skill: str) -> bool:
        return self.skills.get(skill, "").strip().lower() in POSITIVE_SKILL_LEVELS

    def known_skills(self) -> list[str]:
        return [name for name, level in self.skills.items() if level.strip().lower() in POSITIVE_SKILL_LEVELS]
