from fastapi import APIRouter, Depends, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import (
    get_candidate_provider,
    get_matching_engine,
    get_matching_service,
    get_parse_cache,
    get_request_parser,
)
from models.requests import MatchRequest, MatchTextRequest, ParseRequest
from models.responses import CacheStatsResponse, HealthResponse
from models.schemas.matching import MatchResponse
from models.schemas.structured_request import ParseResult
from services.candidates import InMemoryCandidateProvider
from services.matching.engine import MatchingEngine
from services.matching.service import MatchingService
from services.parse_cache import MemoryParseCache
from services.parsing.request_parser import RequestParser

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


@router.get("/health", response_model=HealthResponse)
def health(
    parser: RequestParser = Depends(get_request_parser),
    provider: InMemoryCandidateProvider = Depends(get_candidate_provider),
):
    strategies = parser.engine.strategies
    return HealthResponse(
        status="ok",
        strategies=strategies.names(),
        default_strategy=parser.engine.default_strategy,
        recognizer_ready=strategies.recognizer.ready,
        cache_enabled=parser.cache is not None,
        candidate_count=len(provider.get_all()),
    )


@router.post("/parse", response_model=ParseResult)
@limiter.limit("30/minute")
def parse(
    request: Request,
    body: ParseRequest,
    parser: RequestParser = Depends(get_request_parser),
):
    return parser.parse(body.text, body.strategy)


@router.post("/match", response_model=MatchResponse)
@limiter.limit("30/minute")
def match(
    request: Request,
    body: MatchRequest,
    engine: MatchingEngine = Depends(get_matching_engine),
    provider: InMemoryCandidateProvider = Depends(get_candidate_provider),
):
    candidates = body.candidates if body.candidates is not None else provider.get_all()
    return engine.match(body.requirements, candidates, body.max_results)


@router.post("/match/request", response_model=MatchResponse)
@limiter.limit("10/minute")
def match_request(
    request: Request,
    body: MatchTextRequest,
    service: MatchingService = Depends(get_matching_service),
):
    return service.match_request(body.text, body.max_results, body.strategy)


@router.get("/cache/stats", response_model=CacheStatsResponse)
def cache_stats(cache: MemoryParseCache | None = Depends(get_parse_cache)):
    if cache is None:
        return CacheStatsResponse(enabled=False)
    return CacheStatsResponse(enabled=True, stats=cache.stats())


@router.delete("/cache", response_model=CacheStatsResponse)
def clear_cache(cache: MemoryParseCache | None = Depends(get_parse_cache)):
    if cache is None:
        return CacheStatsResponse(enabled=False)
    cache.clear()
    return CacheStatsResponse(enabled=True, stats=cache.stats())
