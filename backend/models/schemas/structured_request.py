"""Structured requirement record produced by the parsing strategies."""

from datetime import date, datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

LanguagePriority = Literal["required", "preferred", "nice-to-have"]


class RequestStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class LanguageRequirement(BaseModel):
    language: str
    level: str  # A1..C2 or Native
    modifier: Literal["+", "-"] | None = None
    priority: LanguagePriority = "required"


class LocationRequirement(BaseModel):
    regions: list[str] = []
    work_type: str | None = None  # Remote | Office | Hybrid | N/A
    is_global: bool = False
    timezone: str | None = None
    additional_requirements: str | None = None


class RoleExperience(BaseModel):
    role: str
    years: int | None = None


class ExperienceRequirement(BaseModel):
    min_total_years: int | None = None
    leadership_required: bool = False
    leadership_years: int | None = None
    role_experience: list[RoleExperience] = []


class SkillRequirements(BaseModel):
    required: list[str] = []
    preferred: list[str] = []


class PrimaryRequirements(BaseModel):
    """Vocabulary entities recognised in the detailed-requirements text."""
    technologies: list[str] = []
    platforms: list[str] = []
    skills: list[str] = []
    domains: list[str] = []
    roles: list[str] = []

    def is_empty(self) -> bool:
        return not any((self.technologies, self.platforms, self.skills, self.domains, self.roles))


class MetaInfo(BaseModel):
    """Fields parsed from the "CV - role - tech - company - manager - id" header."""
    role: str | None = None
    technology: str | None = None
    company: str | None = None
    manager: str | None = None
    request_id: str | None = None
    additional_technologies: list[str] = []
    salesforce_url: str | None = None
    cv_id: str | None = None
    dates: list[str] = []


class StructuredRequest(BaseModel):
    id: str | None = None

    levels: list[str] = []
    language_requirements: list[LanguageRequirement] = []
    team_size: int | None = None
    location: LocationRequirement | None = None
    experience: ExperienceRequirement | None = None
    skills: SkillRequirements | None = None
    primary_requirements: PrimaryRequirements | None = None

    role: str | None = None
    meta_technology: str | None = None
    meta_company: str | None = None
    industry: str | None = None
    domain: str | None = None
    responsibilities: str | None = None
    working_hours: str | None = None
    collaboration_duration: str | None = None
    deadline: date | None = None
    sales_manager: str | None = None
    coordinator: str | None = None
    missing_fields: list[str] = []

    # Bookkeeping
    strategy_name: str = ""
    confidence: float = 0.0
    raw_input: str | None = None
    status: RequestStatus = RequestStatus.PENDING
    created_at: datetime = Field(default_factory=datetime.now)
    processed_at: datetime | None = None


class ParseResult(BaseModel):
    success: bool = False
    data: StructuredRequest | None = None
    error: str | None = None
    confidence: float = 0.0
    strategy_name: str = ""
    extracted_field_names: list[str] = []
    field_confidences: dict[str, float] = {}
    fallback_used: bool = False
