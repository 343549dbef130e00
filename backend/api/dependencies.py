"""Shared dependencies for API routes.

Each collaborator is built once per process; tests swap them through
``app.dependency_overrides``.
"""

import logging
from functools import lru_cache

from config import settings
from services.candidates import InMemoryCandidateProvider
from services.matching.engine import MatchingEngine
from services.matching.service import MatchingService
from services.nlp.entity_recognizer import EntityRecognizer
from services.parse_cache import MemoryParseCache
from services.parsing.engine import ParserEngine
from services.parsing.request_parser import RequestParser
from services.parsing.strategy_manager import StrategyManager

logger = logging.getLogger(__name__)


@lru_cache
def get_strategy_manager() -> StrategyManager:
    return StrategyManager(EntityRecognizer())


@lru_cache
def get_parse_cache() -> MemoryParseCache | None:
    if not settings.cache_enabled:
        return None
    return MemoryParseCache(max_entries=settings.cache_max_entries, default_ttl=settings.cache_ttl_seconds)


@lru_cache
def get_request_parser() -> RequestParser:
    engine = ParserEngine(
        get_strategy_manager(),
        default_strategy=settings.default_strategy,
        fallback_threshold=settings.fallback_confidence_threshold,
    )
    return RequestParser(engine, get_parse_cache())


@lru_cache
def get_candidate_provider() -> InMemoryCandidateProvider:
    if settings.candidates_file:
        return InMemoryCandidateProvider.from_json_file(settings.candidates_file)
    logger.info("No candidates file configured; candidate directory is empty")
    return InMemoryCandidateProvider()


@lru_cache
def get_matching_engine() -> MatchingEngine:
    return MatchingEngine(min_score=settings.match_min_score, max_results=settings.match_max_results)


def get_matching_service() -> MatchingService:
    return MatchingService(get_request_parser(), get_candidate_provider(), get_matching_engine())
