"""Lazy strategy registry with a static fallback chain.

Strategies are created on first use and cached per manager instance. The
entity recognizer is injected once and shared by every strategy that needs it.
"""

import logging
from typing import Callable

from rapidfuzz import process

from services.exceptions import UnknownStrategyError
from services.nlp.entity_recognizer import EntityRecognizer
from services.strategies.base import ParseStrategy

logger = logging.getLogger(__name__)

# strategy -> strategy to retry with when its confidence is low
FALLBACK_CHAIN: dict[str, str] = {
    "nlp": "hybrid",
    "hybrid": "standard",
    "flexible": "standard",
}

DEFAULT_FALLBACK = "standard"


def _create_strategy(name: str, recognizer: EntityRecognizer) -> ParseStrategy:
    """Factory: create a strategy by name with deferred imports."""
    if name == "standard":
        from services.strategies.standard import StandardStrategy
        return StandardStrategy(recognizer)
    elif name == "flexible":
        from services.strategies.structured_list import StructuredListStrategy
        return StructuredListStrategy()
    elif name == "hybrid":
        from services.strategies.hybrid import HybridStrategy
        return HybridStrategy(recognizer)
    elif name == "nlp":
        from services.strategies.nlp import NlpStrategy
        return NlpStrategy(recognizer)
    raise UnknownStrategyError(name)


BUILTIN_STRATEGIES: tuple[str, ...] = ("standard", "flexible", "hybrid", "nlp")


class StrategyManager:
    def __init__(self, recognizer: EntityRecognizer | None = None):
        self.recognizer = recognizer or EntityRecognizer()
        self._strategies: dict[str, ParseStrategy] = {}
        self._factories: dict[str, Callable[[], ParseStrategy]] = {}

    def register(self, name: str, factory: Callable[[], ParseStrategy]) -> None:
        """Register a custom strategy factory, replacing any cached instance."""
        self._factories[name] = factory
        self._strategies.pop(name, None)

    def names(self) -> list[str]:
        return list(dict.fromkeys([*BUILTIN_STRATEGIES, *self._factories]))

    def has(self, name: str) -> bool:
        return name in self.names()

    def get(self, name: str) -> ParseStrategy:
        """Strategy by name, created on first access.

        Raises:
            UnknownStrategyError: no built-in or registered strategy has this name.
        """
        if name not in self._strategies:
            if name in self._factories:
                self._strategies[name] = self._factories[name]()
            elif name in BUILTIN_STRATEGIES:
                self._strategies[name] = _create_strategy(name, self.recognizer)
            else:
                suggestion = process.extractOne(name, self.names(), score_cutoff=60)
                raise UnknownStrategyError(name, suggestion[0] if suggestion else None)
            logger.info("Strategy created: %s", name)
        return self._strategies[name]

    def fallback_for(self, name: str) -> str:
        return FALLBACK_CHAIN.get(name, DEFAULT_FALLBACK)

    def preload(self, *names: str) -> None:
        """Create strategies ahead of time and train the recognizer."""
        self.recognizer.ensure_ready()
        for name in names or BUILTIN_STRATEGIES:
            self.get(name)

    def clear(self) -> None:
        self._strategies.clear()
