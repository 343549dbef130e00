from typing import Any

from pydantic import BaseModel, Field, field_validator

from models.schemas.candidate import CandidateProfile
from models.schemas.matching import MatchingRequirements


class ParseRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=50000, description="Raw job request text")
    strategy: str | None = Field(None, description="standard | flexible | hybrid | nlp")


class MatchRequest(BaseModel):
    requirements: MatchingRequirements
    candidates: list[CandidateProfile] | None = Field(
        None, description="Employee records; the candidate directory is used when omitted",
    )
    max_results: int | None = Field(None, ge=0, le=100)

    @field_validator("candidates", mode="before")
    @classmethod
    def _convert_records(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        profiles = []
        for index, record in enumerate(value):
            if isinstance(record, CandidateProfile):
                profiles.append(record)
                continue
            if not isinstance(record, dict):
                raise ValueError(f"candidate {index} must be an object")
            try:
                profiles.append(CandidateProfile.from_record(record))
            except (TypeError, ValueError) as e:
                raise ValueError(f"candidate {index} is not a valid employee record: {e}") from e
        return profiles


class MatchTextRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=50000, description="Raw job request text")
    strategy: str | None = None
    max_results: int | None = Field(None, ge=0, le=100)
