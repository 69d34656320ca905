"""Serializable batch report — the JSON-friendly view of a set of texture decisions."""

from __future__ import annotations

from collections.abc import Hashable, Mapping

from pydantic import BaseModel, Field

from texsizer.engine.context import TextureDecision
from texsizer.engine.formats import estimate_memory


class TextureReport(BaseModel):
    image_id: str
    complexity: float = 0.0
    summary: str = ""
    divisor: int = 1
    source_size: tuple[int, int] = (0, 0)
    target_size: tuple[int, int] = (0, 0)
    format: str = ""
    original_bytes: int = 0  # same format at source resolution
    estimated_bytes: int = 0
    pinned: bool = False


class BatchReport(BaseModel):
    textures: list[TextureReport] = Field(default_factory=list)
    skipped: dict[str, str] = Field(default_factory=dict)
    total_original_bytes: int = 0
    total_estimated_bytes: int = 0

    @property
    def saved_bytes(self) -> int:
        return self.total_original_bytes - self.total_estimated_bytes

    @property
    def savings_ratio(self) -> float:
        if self.total_original_bytes <= 0:
            return 0.0
        return self.saved_bytes / self.total_original_bytes


def texture_report(image_id: Hashable, decision: TextureDecision) -> TextureReport:
    return TextureReport(
        image_id=str(image_id),
        complexity=round(decision.complexity.score, 4),
        summary=decision.complexity.summary,
        divisor=decision.size.divisor,
        source_size=(decision.source_width, decision.source_height),
        target_size=(decision.size.width, decision.size.height),
        format=decision.format.value,
        original_bytes=estimate_memory(decision.source_width, decision.source_height, decision.format),
        estimated_bytes=decision.estimated_bytes,
        pinned=decision.pinned,
    )


def build_report(
    decisions: Mapping[Hashable, TextureDecision],
    skipped: Mapping[Hashable, str] | None = None,
) -> BatchReport:
    """Summarize batch output; textures are listed in image-id order."""
    textures = [texture_report(image_id, d) for image_id, d in decisions.items()]
    textures.sort(key=lambda t: t.image_id)
    return BatchReport(
        textures=textures,
        skipped={str(k): v for k, v in (skipped or {}).items()},
        total_original_bytes=sum(t.original_bytes for t in textures),
        total_estimated_bytes=sum(t.estimated_bytes for t in textures),
    )
