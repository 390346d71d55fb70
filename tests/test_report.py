from __future__ import annotations

import json
from pathlib import Path

import pytest

from site_forge.errors import FilesystemError, ParseError
from site_forge.models import (
    NOT_RUN,
    AssetsResult,
    BuildResult,
    LighthouseResult,
    Report,
    ScreenshotsResult,
    Status,
    Thresholds,
    VisionResult,
)
from site_forge.report import load_report, render_summary, write_report


def _finished_report() -> Report:
    report = Report.pending("/srv/dist", Thresholds(80, 90, 95), vision_threshold=8)
    report.record_assets(AssetsResult(Status.PASS, total=4, details="4/4 assets verified"))
    report.record_build(BuildResult(Status.PASS, pages=2, details="Valid HTML, 2 page(s), meta tags present"))
    report.record_lighthouse(
        LighthouseResult(Status.PASS, 92, 97, 100, Thresholds(80, 90, 95), "Perf: 92, A11y: 97, SEO: 100")
    )
    report.record_screenshots(
        ScreenshotsResult(
            Status.PASS,
            desktop="shots/desktop.png",
            mobile="shots/mobile.png",
            desktop_size=(1280, 900),
            mobile_size=(390, 844),
            details="Desktop: shots/desktop.png, Mobile: shots/mobile.png",
        )
    )
    report.record_vision(VisionResult(Status.SKIP, threshold=8, details="no baseline provided"))
    report.set_overall(Status.PASS)
    return report


def test_pending_report_marks_every_check_not_run() -> None:
    report = Report.pending("dist")

    assert report.overall is Status.FAIL
    assert [r.status for r in (report.assets, report.build, report.lighthouse, report.screenshots)] == [Status.FAIL] * 4
    assert report.vision.status is Status.SKIP
    assert report.build.details == NOT_RUN


def test_written_report_round_trips(tmp_path: Path) -> None:
    report = _finished_report()

    path = write_report(report, tmp_path / "nested" / "forge-report.json")
    loaded = load_report(path)

    assert loaded == report
    assert report.timestamp.endswith("Z")
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["overall"] == "PASS"
    assert data["checks"]["lighthouse"]["thresholds"] == {"performance": 80, "accessibility": 90, "seo": 95}
    assert data["checks"]["screenshots"]["desktop_size"] == [1280, 900]


def test_sealed_report_rejects_new_results(tmp_path: Path) -> None:
    report = _finished_report()
    write_report(report, tmp_path / "forge-report.json")

    with pytest.raises(RuntimeError):
        report.record_vision(VisionResult(Status.PASS, score=9))
    with pytest.raises(RuntimeError):
        report.set_overall(Status.FAIL)


def test_overall_cannot_be_skip() -> None:
    with pytest.raises(ValueError):
        Report.pending("dist").set_overall(Status.SKIP)


def test_unwritable_report_path_raises(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(FilesystemError):
        write_report(_finished_report(), blocker / "forge-report.json")


def test_summary_lists_every_check_with_markers() -> None:
    summary = render_summary(_finished_report())

    assert summary.splitlines()[0] == "site-forge verify results:"
    assert "  ✅ ASSETS: 4/4 assets verified" in summary
    assert "  ✅ LIGHTHOUSE: Perf 92 | A11y 97 | SEO 100" in summary
    assert "  ✅ SCREENSHOTS: Desktop + Mobile captured" in summary
    assert "VISION: SKIP - no baseline provided" in summary
    assert summary.splitlines()[-2:] == ["OVERALL: PASS", "✅"]


def test_summary_lists_missing_assets_under_assets_line() -> None:
    report = Report.pending("dist")
    report.record_assets(AssetsResult(Status.FAIL, total=3, missing=("/a.css", "/b.js"), details="Missing 2 assets"))

    lines = render_summary(report).splitlines()

    assert lines[1] == "  ❌ ASSETS: FAIL - Missing 2 assets"
    assert lines[2:4] == ["      missing: /a.css", "      missing: /b.js"]
    assert lines[4] == "  ❌ BUILD: FAIL - not run"


def test_load_report_rejects_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "forge-report.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ParseError):
        load_report(path)


def test_load_report_rejects_check_without_status(tmp_path: Path) -> None:
    path = write_report(_finished_report(), tmp_path / "forge-report.json")
    data = json.loads(path.read_text(encoding="utf-8"))
    del data["checks"]["build"]["status"]
    path.write_text(json.dumps(data), encoding="utf-8")

    with pytest.raises(ParseError, match="incomplete"):
        load_report(path)
