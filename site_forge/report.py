"""
Rendering and persistence for the verification report.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from site_forge.errors import FilesystemError, ParseError
from site_forge.models import (
    AssetsResult,
    BuildResult,
    LighthouseResult,
    Report,
    ScreenshotsResult,
    Status,
    Thresholds,
    VisionResult,
)

MARKERS = {Status.PASS: "✅", Status.SKIP: "⚠️ ", Status.FAIL: "❌"}


def utc_timestamp() -> str:
    return datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def _pick(status: Status, *, passed: str, skipped: str, failed: str) -> str:
    if status is Status.PASS:
        return passed
    if status is Status.SKIP:
        return skipped
    if status is Status.FAIL:
        return failed
    raise ValueError(f"unknown status: {status!r}")


def _line(label: str, status: Status, text: str) -> str:
    return f"  {MARKERS[status]} {label}: {text}"


def render_summary(report: Report) -> str:
    assets, build, lh, shots, vision = report.assets, report.build, report.lighthouse, report.screenshots, report.vision
    scores = f"Perf {lh.performance} | A11y {lh.accessibility} | SEO {lh.seo}"
    vision_score = f"Score {vision.score}/10 (threshold: {vision.threshold})"
    lines = [
        "site-forge verify results:",
        _line(
            "ASSETS",
            assets.status,
            _pick(
                assets.status,
                passed=f"{assets.total}/{assets.total} assets verified",
                skipped=f"SKIP - {assets.details}",
                failed=f"FAIL - {assets.details}",
            ),
        ),
        *[f"      missing: {missing}" for missing in assets.missing],
        _line(
            "BUILD",
            build.status,
            _pick(build.status, passed=build.details, skipped=f"SKIP - {build.details}", failed=f"FAIL - {build.details}"),
        ),
        _line(
            "LIGHTHOUSE",
            lh.status,
            _pick(lh.status, passed=scores, skipped=f"SKIP - {lh.details}", failed=f"FAIL - {lh.details}"),
        ),
        _line(
            "SCREENSHOTS",
            shots.status,
            _pick(
                shots.status,
                passed="Desktop + Mobile captured",
                skipped=f"SKIP - {shots.details}",
                failed=f"FAIL - {shots.details}",
            ),
        ),
        _line(
            "VISION",
            vision.status,
            _pick(
                vision.status,
                passed=vision_score,
                skipped=f"SKIP - {vision.details}",
                failed=f"{vision_score} - {vision.analysis or vision.details}",
            ),
        ),
        "",
        f"OVERALL: {report.overall.value}",
        MARKERS[report.overall].strip(),
    ]
    return "\n".join(lines)


def _result_dict(result: Any) -> dict[str, Any]:
    data = asdict(result)
    data["status"] = result.status.value
    return data


def report_to_dict(report: Report) -> dict[str, Any]:
    return {
        "timestamp": report.timestamp,
        "directory": report.directory,
        "overall": report.overall.value,
        "checks": {
            "assets": _result_dict(report.assets),
            "build": _result_dict(report.build),
            "lighthouse": _result_dict(report.lighthouse),
            "screenshots": _result_dict(report.screenshots),
            "vision": _result_dict(report.vision),
        },
    }


def to_json(report: Report) -> str:
    return json.dumps(report_to_dict(report), indent=2, ensure_ascii=False)


def _size(value: Any) -> tuple[int, int] | None:
    if not value:
        return None
    return int(value[0]), int(value[1])


def report_from_dict(data: dict[str, Any]) -> Report:
    checks = data.get("checks") or {}
    a = checks.get("assets") or {}
    b = checks.get("build") or {}
    lh = checks.get("lighthouse") or {}
    th = lh.get("thresholds") or {}
    s = checks.get("screenshots") or {}
    v = checks.get("vision") or {}
    return Report(
        directory=str(data.get("directory") or ""),
        timestamp=str(data.get("timestamp") or ""),
        overall=Status(data.get("overall", Status.FAIL.value)),
        assets=AssetsResult(
            Status(a["status"]),
            total=int(a.get("total", 0)),
            missing=tuple(str(x) for x in a.get("missing") or ()),
            details=str(a.get("details", "")),
        ),
        build=BuildResult(Status(b["status"]), pages=int(b.get("pages", 0)), details=str(b.get("details", ""))),
        lighthouse=LighthouseResult(
            Status(lh["status"]),
            performance=int(lh.get("performance", 0)),
            accessibility=int(lh.get("accessibility", 0)),
            seo=int(lh.get("seo", 0)),
            thresholds=Thresholds(
                performance=int(th.get("performance", 90)),
                accessibility=int(th.get("accessibility", 90)),
                seo=int(th.get("seo", 90)),
            ),
            details=str(lh.get("details", "")),
        ),
        screenshots=ScreenshotsResult(
            Status(s["status"]),
            desktop=str(s.get("desktop", "")),
            mobile=str(s.get("mobile", "")),
            desktop_size=_size(s.get("desktop_size")),
            mobile_size=_size(s.get("mobile_size")),
            details=str(s.get("details", "")),
        ),
        vision=VisionResult(
            Status(v["status"]),
            score=int(v.get("score", 0)),
            threshold=int(v.get("threshold", 7)),
            analysis=str(v.get("analysis", "")),
            details=str(v.get("details", "")),
        ),
    )


def write_report(report: Report, path: Path) -> Path:
    """Stamp the report and write it as JSON. The report is sealed afterwards."""
    report.seal(utc_timestamp())
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(to_json(report) + "\n", encoding="utf-8")
    except OSError as exc:
        raise FilesystemError(f"cannot write report to {path}: {exc}") from exc
    return path


def load_report(path: Path) -> Report:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise FilesystemError(f"cannot read report {path}: {exc}") from exc
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ParseError(f"report {path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ParseError(f"report {path} is not a JSON object")
    try:
        return report_from_dict(data)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise ParseError(f"report {path} is incomplete: {exc!r}") from exc
