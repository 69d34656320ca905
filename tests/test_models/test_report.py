"""Tests for the serializable batch report."""

import json

from texsizer.engine.batch import BatchAnalyzer, BatchReporter
from texsizer.engine.config import EngineConfig
from texsizer.engine.context import AnalysisStrategy, BatchItem, PixelBuffer
from texsizer.models.report import BatchReport, build_report
from tests.conftest import item_of, solid_image


def test_build_report_totals():
    reporter = BatchReporter()
    items = {
        "wall": item_of(solid_image(512)),
        "empty": BatchItem(pixels=PixelBuffer(width=8, height=8)),
    }
    decisions = BatchAnalyzer(EngineConfig(strategy=AnalysisStrategy.FAST)).analyze_batch(items, reporter)
    report = build_report(decisions, reporter.skipped)

    assert [t.image_id for t in report.textures] == ["wall"]
    wall = report.textures[0]
    assert wall.format == "DXT1"
    assert wall.target_size == (64, 64)
    assert wall.original_bytes == 512 * 512 // 2
    assert wall.estimated_bytes == 64 * 64 // 2
    assert report.total_original_bytes == wall.original_bytes
    assert report.saved_bytes == wall.original_bytes - wall.estimated_bytes
    assert 0.9 < report.savings_ratio < 1.0
    assert report.skipped == {"empty": "no readable pixels"}


def test_report_json():
    report = build_report({})
    payload = json.loads(report.model_dump_json())
    assert payload["textures"] == []
    assert payload["total_estimated_bytes"] == 0
    assert BatchReport.model_validate(payload).savings_ratio == 0.0
