"""Batch orchestrator — analyses many textures in parallel and returns one decision per image.

Per image: sample → preprocess → analyzer (normal maps override the
configured strategy) → complexity → divisor/dimensions → format.
A failing image is logged and left out of the result; it never aborts
the batch.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Hashable, Mapping
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import TypeVar

from texsizer.engine.config import EngineConfig
from texsizer.engine.constants import (
    DEFAULT_COMPLEXITY_SCORE,
    EMISSION_COMPLEXITY_FACTOR,
    MIN_OPAQUE_PIXELS_FOR_STANDARD_ANALYSIS,
    SPARSE_TEXTURE_SCORE,
)
from texsizer.engine.context import (
    BatchItem,
    ComplexityResult,
    ProcessedPixelData,
    TextureDecision,
)
from texsizer.engine.formats import FormatSelector, estimate_memory, resolve_pinned_format
from texsizer.engine.preprocess import has_significant_alpha, preprocess
from texsizer.engine.registry import create_analyzer, create_normal_map_analyzer
from texsizer.engine.sizing import ComplexityCalculator

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)

# Collaborators that rasterize through one shared scratch surface must hold
# this while doing so. Analysis itself never takes it.
RASTER_LOCK = threading.Lock()


@dataclass
class BatchReporter:
    """Caller-owned record of skipped images and already-emitted warnings."""

    skipped: dict[Hashable, str] = field(default_factory=dict)
    _warned: set[str] = field(default_factory=set)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def warn_once(self, key: str, message: str, *args: object) -> bool:
        """Log ``message`` the first time ``key`` is seen. Returns True if it was logged."""
        with self._lock:
            if key in self._warned:
                return False
            self._warned.add(key)
        logger.warning(message, *args)
        return True

    def skip(self, image_id: Hashable, reason: str) -> None:
        with self._lock:
            self.skipped[image_id] = reason


class BatchAnalyzer:
    """Runs the analysis pipeline for a batch of images."""

    def __init__(self, config: EngineConfig | None = None, reporter: BatchReporter | None = None) -> None:
        self.config = config or EngineConfig()
        self.reporter = reporter
        c = self.config
        # Unknown strategy tags fail here, before any image is read
        self.standard_analyzer = create_analyzer(
            c.strategy, c.fast_weight, c.high_accuracy_weight, c.perceptual_weight
        )
        self.normal_map_analyzer = create_normal_map_analyzer()
        self.calculator = ComplexityCalculator(c)
        self.format_selector = FormatSelector(
            c.platform,
            c.use_high_quality_format_for_high_complexity,
            c.high_quality_complexity_threshold,
        )

    def analyze_batch(
        self,
        items: Mapping[K, BatchItem],
        reporter: BatchReporter | None = None,
    ) -> dict[K, TextureDecision]:
        """Decide every image in ``items``.

        Skipped or failed images are absent from the result and recorded on
        the reporter (the one passed here, else the analyzer's own, else a
        fresh one for this call).
        """
        start = time.perf_counter()
        reporter = reporter or self.reporter or BatchReporter()
        results: dict[K, TextureDecision] = {}
        pending: list[tuple[K, BatchItem]] = []

        for image_id, item in items.items():
            pinned = item.pinned
            if pinned is not None and pinned.skip:
                reporter.skip(image_id, "pinned as skipped")
                continue
            if item.pixels.is_empty:
                reporter.skip(image_id, "no readable pixels")
                reporter.warn_once("empty-buffer", "Skipping image %s: no readable pixels", image_id)
                continue
            if pinned is not None:
                try:
                    results[image_id] = self.decide_pinned(item)
                except Exception as e:
                    reporter.skip(image_id, str(e))
                    logger.warning("  %s FAILED (pinned): %s", image_id, e)
                else:
                    logger.debug("  %s using pinned settings (divisor %s)", image_id, pinned.divisor)
                continue
            pending.append((image_id, item))

        logger.info("Batch: %d images queued (%d skipped, %d pinned)",
                    len(pending), len(reporter.skipped), len(results))

        if pending:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                futures = {executor.submit(self._timed_single, image_id, item): image_id
                           for image_id, item in pending}
                for future in as_completed(futures):
                    image_id = futures[future]
                    try:
                        results[image_id] = future.result()
                    except Exception as e:
                        reporter.skip(image_id, str(e))
                        logger.warning("  %s FAILED: %s", image_id, e)

        total = (time.perf_counter() - start) * 1000
        logger.info("Batch complete: %d/%d images decided in %.0fms", len(results), len(items), total)
        return results

    def _timed_single(self, image_id: Hashable, item: BatchItem) -> TextureDecision:
        t0 = time.perf_counter()
        decision = self.analyze_single(item)
        elapsed = (time.perf_counter() - t0) * 1000
        logger.debug("  %s: %s in %.1fms", image_id, decision.summary, elapsed)
        return decision

    def analyze_single(self, item: BatchItem) -> TextureDecision:
        """Full analysis path for one image (no pin handling)."""
        c = self.config
        buffer = item.pixels
        data = preprocess(
            buffer,
            is_normal_map=item.is_normal_map,
            is_emission=item.is_emission,
            max_pixels=c.max_sampled_pixels,
            min_dimension=c.min_sampled_dimension,
        )
        complexity = self.analyze_complexity(data)
        size = self.calculator.decide(buffer.width, buffer.height, complexity.score)
        fmt = self.format_selector.predict_format(item.is_normal_map, complexity.score, self._has_alpha(item))
        return TextureDecision(
            complexity=complexity,
            size=size,
            format=fmt,
            source_width=buffer.width,
            source_height=buffer.height,
            estimated_bytes=estimate_memory(size.width, size.height, fmt),
        )

    def analyze_complexity(self, data: ProcessedPixelData) -> ComplexityResult:
        if data.is_normal_map:
            return self.normal_map_analyzer.analyze(data)

        if 0 < data.opaque_count < MIN_OPAQUE_PIXELS_FOR_STANDARD_ANALYSIS:
            return ComplexityResult(SPARSE_TEXTURE_SCORE, "Too few opaque pixels for analysis")

        result = self.standard_analyzer.analyze(data)
        if data.is_emission:
            result = ComplexityResult(
                result.score * EMISSION_COMPLEXITY_FACTOR,
                f"{result.summary} (emission boost applied)",
            )
        return result

    def decide_pinned(self, item: BatchItem) -> TextureDecision:
        """Decision from pinned settings; complexity is reported as the neutral default."""
        pinned = item.pinned
        buffer = item.pixels
        size = self.calculator.decide_with_divisor(buffer.width, buffer.height, pinned.divisor)
        fmt = resolve_pinned_format(pinned.format)
        if fmt is None:
            fmt = self.format_selector.predict_format(
                item.is_normal_map, DEFAULT_COMPLEXITY_SCORE, self._has_alpha(item)
            )
        return TextureDecision(
            complexity=ComplexityResult(DEFAULT_COMPLEXITY_SCORE, "Pinned settings"),
            size=size,
            format=fmt,
            source_width=buffer.width,
            source_height=buffer.height,
            estimated_bytes=estimate_memory(size.width, size.height, fmt),
            pinned=True,
        )

    @staticmethod
    def _has_alpha(item: BatchItem) -> bool:
        if item.has_alpha is not None:
            return item.has_alpha
        return has_significant_alpha(item.pixels.pixels)


def analyze_batch(
    items: Mapping[K, BatchItem],
    config: EngineConfig | None = None,
    reporter: BatchReporter | None = None,
) -> dict[K, TextureDecision]:
    """One-shot convenience wrapper around ``BatchAnalyzer``."""
    return BatchAnalyzer(config).analyze_batch(items, reporter)
