"""Parse facade: parse-cache lookup in front of the parser engine."""

import logging

from models.schemas.structured_request import ParseResult
from services.parse_cache import ParseCache, fingerprint
from services.parsing.engine import ParserEngine

logger = logging.getLogger(__name__)


class RequestParser:
    def __init__(self, engine: ParserEngine | None = None, cache: ParseCache | None = None):
        self.engine = engine or ParserEngine()
        self.cache = cache

    def parse(self, raw_text: str, strategy_hint: str | None = None) -> ParseResult:
        """Cached parse. Only successful results are stored; never raises."""
        strategy = strategy_hint or self.engine.default_strategy
        key = fingerprint(raw_text, strategy)

        if self.cache is not None:
            try:
                cached = self.cache.get(key)
            except Exception:
                logger.exception("Parse cache lookup failed")
                cached = None
            if cached is not None:
                logger.info("Parse cache hit (%s)", key[:12])
                return cached
            logger.debug("Parse cache miss (%s)", key[:12])

        result = self.engine.parse(raw_text, strategy_hint)

        if self.cache is not None and result.success:
            try:
                self.cache.set(key, result)
            except Exception:
                logger.exception("Parse cache write failed")
        return result
