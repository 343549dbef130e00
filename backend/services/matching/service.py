"""Parse a raw request and rank the candidate directory against it."""

import logging

from models.schemas.matching import MatchResponse
from services.candidates import CandidateProvider
from services.matching.engine import MatchingEngine
from services.matching.mapper import map_parse_result_to_matching_requirements
from services.parsing.request_parser import RequestParser

logger = logging.getLogger(__name__)


class MatchingService:
    def __init__(
        self,
        parser: RequestParser,
        provider: CandidateProvider,
        engine: MatchingEngine | None = None,
    ):
        self.parser = parser
        self.provider = provider
        self.engine = engine or MatchingEngine()

    def match_request(
        self,
        raw_text: str,
        max_results: int | None = None,
        strategy_hint: str | None = None,
    ) -> MatchResponse:
        """parse -> map -> fetch all candidates -> match; never raises."""
        parsed = self.parser.parse(raw_text, strategy_hint)
        # A low-confidence parse still carries usable requirements
        if parsed.data is None:
            logger.info("Request could not be parsed: %s", parsed.error)
            return MatchResponse(error=parsed.error or "Request could not be parsed")

        requirements = map_parse_result_to_matching_requirements(parsed)
        try:
            candidates = self.provider.get_all()
        except Exception as e:
            logger.exception("Candidate provider failed")
            return MatchResponse(error=f"Candidates unavailable: {e}")

        return self.engine.match(requirements, candidates, max_results)
