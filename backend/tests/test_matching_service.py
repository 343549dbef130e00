from unittest.mock import MagicMock

from models.schemas.matching import MatchingRequirements
from models.schemas.structured_request import (
    ExperienceRequirement,
    LocationRequirement,
    ParseResult,
    SkillRequirements,
    StructuredRequest,
)
from services.candidates import InMemoryCandidateProvider
from services.matching.mapper import map_parse_result_to_matching_requirements
from services.matching.service import MatchingService


def finalized_request(**overrides):
    fields = dict(
        levels=["Senior"],
        role="N/A",
        industry="Banking",
        responsibilities="N/A",
        location=LocationRequirement(regions=["RU"], work_type="N/A", timezone="N/A"),
        experience=ExperienceRequirement(min_total_years=3),
        skills=SkillRequirements(required=["Java", "N/A"], preferred=["SQL"]),
    )
    fields.update(overrides)
    return StructuredRequest(**fields)


class TestMapper:
    def test_sentinels_become_none(self):
        requirements = map_parse_result_to_matching_requirements(finalized_request())
        assert requirements.role is None
        assert requirements.responsibilities is None
        assert requirements.industry == "Banking"
        assert requirements.location.work_type is None
        assert requirements.location.timezone is None
        assert requirements.location.regions == ["RU"]
        assert requirements.skills.required == ["Java"]
        assert requirements.skills.preferred == ["SQL"]
        assert requirements.experience.min_total_years == 3

    def test_from_parse_result(self):
        parsed = ParseResult(success=True, data=finalized_request(levels=["Lead"]))
        assert map_parse_result_to_matching_requirements(parsed).levels == ["Lead"]

    def test_missing_data(self):
        assert map_parse_result_to_matching_requirements(None) == MatchingRequirements()
        assert map_parse_result_to_matching_requirements(ParseResult(success=False)) == MatchingRequirements()

    def test_optional_parts_absent(self):
        requirements = map_parse_result_to_matching_requirements(StructuredRequest())
        assert requirements.location is None
        assert requirements.experience is None
        assert requirements.skills is None


class TestMatchingService:
    def setup_method(self):
        self.parser = MagicMock()
        self.provider = InMemoryCandidateProvider([
            {"id": "s", "Grade": "Senior", "Country": "Russia"},
            {"id": "j", "Grade": "Intern", "Country": "Armenia"},
        ])
        self.service = MatchingService(self.parser, self.provider)

    def test_parse_then_match(self):
        self.parser.parse.return_value = ParseResult(success=True, data=finalized_request())
        response = self.service.match_request("text", max_results=5, strategy_hint="flexible")
        self.parser.parse.assert_called_once_with("text", "flexible")
        assert response.error is None
        assert response.total_candidates == 2
        assert response.matches[0].candidate_summary.id == "s"

    def test_low_confidence_parse_still_matches(self):
        self.parser.parse.return_value = ParseResult(success=False, confidence=0.2, data=finalized_request())
        response = self.service.match_request("text")
        assert response.error is None
        assert response.matched_count >= 1

    def test_unparseable_request(self):
        self.parser.parse.return_value = ParseResult(success=False, error="Parsing failed: boom")
        response = self.service.match_request("text")
        assert response.error == "Parsing failed: boom"
        assert response.matches == []

    def test_provider_failure(self):
        self.parser.parse.return_value = ParseResult(success=True, data=finalized_request())
        provider = MagicMock()
        provider.get_all.side_effect = ConnectionError("sheet offline")
        response = MatchingService(self.parser, provider).match_request("text")
        assert response.error == "Candidates unavailable: sheet offline"
