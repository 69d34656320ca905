"""Analyzer registry — every complexity strategy is a class registered via decorator.

Usage:
    @analyzer(AnalysisStrategy.FAST, description="Sobel gradient + spatial frequency + color variance")
    class FastAnalyzer:
        def analyze(self, data: ProcessedPixelData) -> ComplexityResult:
            ...

Adding a new strategy = one module with the decorator plus an enum member.
Construction goes through ``create_analyzer`` so unknown tags fail before
any image is touched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Protocol

from texsizer.engine.constants import (
    COMBINED_DEFAULT_FAST_WEIGHT,
    COMBINED_DEFAULT_HIGH_ACCURACY_WEIGHT,
    COMBINED_DEFAULT_PERCEPTUAL_WEIGHT,
)
from texsizer.engine.context import AnalysisStrategy

if TYPE_CHECKING:
    from texsizer.engine.context import ComplexityResult, ProcessedPixelData

logger = logging.getLogger(__name__)


class ComplexityAnalyzer(Protocol):
    def analyze(self, data: "ProcessedPixelData") -> "ComplexityResult": ...


@dataclass
class AnalyzerSpec:
    strategy: AnalysisStrategy
    factory: Callable[..., ComplexityAnalyzer]
    description: str = ""


class AnalyzerRegistry:
    """Registry of analyzer classes keyed by strategy."""

    def __init__(self) -> None:
        self._analyzers: dict[AnalysisStrategy, AnalyzerSpec] = {}

    def register(self, spec: AnalyzerSpec) -> None:
        if spec.strategy in self._analyzers:
            raise ValueError(f"Duplicate analyzer for strategy: {spec.strategy.value}")
        self._analyzers[spec.strategy] = spec
        logger.debug("Registered analyzer %s", spec.strategy.value)

    def get(self, strategy: AnalysisStrategy | str) -> AnalyzerSpec:
        key = _coerce_strategy(strategy)
        try:
            return self._analyzers[key]
        except KeyError:
            raise ValueError(f"No analyzer registered for strategy: {key.value}") from None

    def all(self) -> list[AnalyzerSpec]:
        return sorted(self._analyzers.values(), key=lambda s: s.strategy.value)

    def __contains__(self, strategy: object) -> bool:
        return strategy in self._analyzers

    @property
    def count(self) -> int:
        return len(self._analyzers)


def _coerce_strategy(strategy: AnalysisStrategy | str) -> AnalysisStrategy:
    if isinstance(strategy, AnalysisStrategy):
        return strategy
    try:
        return AnalysisStrategy(str(strategy).lower())
    except ValueError:
        raise ValueError(f"Unknown strategy type: {strategy!r}") from None


# Module-level singleton
_registry = AnalyzerRegistry()


def get_registry() -> AnalyzerRegistry:
    _ensure_builtin_analyzers()
    return _registry


def analyzer(strategy: AnalysisStrategy, *, description: str = ""):
    """Class decorator registering an analyzer for ``strategy``."""

    def decorator(cls):
        _registry.register(AnalyzerSpec(strategy=strategy, factory=cls, description=description))
        return cls

    return decorator


def _ensure_builtin_analyzers() -> None:
    """Import the bundled analyzer modules so their decorators fire."""
    import importlib
    import pkgutil

    package = importlib.import_module("texsizer.engine.analyzers")
    for _, module_name, _ in pkgutil.iter_modules(package.__path__):
        importlib.import_module(f"{package.__name__}.{module_name}")


def create_analyzer(
    strategy: AnalysisStrategy | str,
    fast_weight: float = COMBINED_DEFAULT_FAST_WEIGHT,
    high_accuracy_weight: float = COMBINED_DEFAULT_HIGH_ACCURACY_WEIGHT,
    perceptual_weight: float = COMBINED_DEFAULT_PERCEPTUAL_WEIGHT,
) -> ComplexityAnalyzer:
    """Instantiate the analyzer for a strategy tag. Raises ValueError for unknown tags."""
    spec = get_registry().get(strategy)
    kwargs: dict[str, Any] = {}
    if spec.strategy is AnalysisStrategy.COMBINED:
        kwargs = {
            "fast_weight": fast_weight,
            "high_accuracy_weight": high_accuracy_weight,
            "perceptual_weight": perceptual_weight,
        }
    return spec.factory(**kwargs)


def create_normal_map_analyzer() -> ComplexityAnalyzer:
    return create_analyzer(AnalysisStrategy.NORMAL_MAP)
