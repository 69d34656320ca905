"""Texture complexity analysis and sizing engine."""

from texsizer.engine.registry import analyzer, create_analyzer, get_registry
from texsizer.engine.context import AnalysisStrategy, BatchItem, PixelBuffer, TextureDecision
from texsizer.engine.config import EngineConfig, Preset
from texsizer.engine.batch import BatchAnalyzer, BatchReporter

__all__ = [
    "analyzer",
    "create_analyzer",
    "get_registry",
    "AnalysisStrategy",
    "BatchItem",
    "PixelBuffer",
    "TextureDecision",
    "EngineConfig",
    "Preset",
    "BatchAnalyzer",
    "BatchReporter",
]
