from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
import requests
from PIL import Image

from site_forge.checks.lighthouse import AuditScores
from site_forge.checks.screenshots import ScreenshotPair
from site_forge.config import VerifyConfig
from site_forge.errors import ForgeError
from site_forge.models import Thresholds
from site_forge.pipeline import Toolkit

VALID_INDEX = """<!DOCTYPE html>
<html lang="en">
<head>
  <title>Test Site</title>
  <meta name="description" content="A test site">
  <meta property="og:title" content="Test Site">
  <link rel="stylesheet" href="/_astro/site.css">
</head>
<body>
  <h1>Hello</h1>
  <img src="/images/hero.jpg" alt="Hero">
</body>
</html>
"""


def write_png(path: Path, size: tuple[int, int] = (64, 48)) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, (240, 240, 240)).save(path, format="PNG")
    return path


def write_files(root: Path, files: dict[str, str | bytes]) -> Path:
    for rel, content in files.items():
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            target.write_bytes(content)
        else:
            target.write_text(content, encoding="utf-8")
    return root


class FakeAuditor:
    def __init__(self, scores: AuditScores | None = None, unavailable: ForgeError | None = None, error: ForgeError | None = None) -> None:
        self.scores = scores or AuditScores(performance=95, accessibility=98, seo=100)
        self.unavailable = unavailable
        self.error = error
        self.urls: list[str] = []

    def ensure_available(self) -> None:
        if self.unavailable is not None:
            raise self.unavailable

    def audit(self, url: str) -> AuditScores:
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return self.scores


class FakeCapturer:
    def __init__(self, error: ForgeError | None = None) -> None:
        self.error = error
        self.calls = 0
        self.statuses: list[int] = []

    def capture(self, url: str, out_dir: Path) -> ScreenshotPair:
        self.calls += 1
        if self.error is not None:
            raise self.error
        self.statuses.append(requests.get(url + "/", timeout=5).status_code)
        return ScreenshotPair(
            desktop=write_png(out_dir / "desktop.png", (1280, 900)),
            mobile=write_png(out_dir / "mobile.png", (390, 844)),
        )


class FakeVision:
    def __init__(self, analysis: str = "OVERALL: 8/10\nANALYSIS: Looks good.", error: ForgeError | None = None) -> None:
        self.analysis = analysis
        self.error = error
        self.calls: list[tuple[ScreenshotPair, ScreenshotPair]] = []

    def compare(self, baseline: ScreenshotPair, current: ScreenshotPair) -> str:
        self.calls.append((baseline, current))
        if self.error is not None:
            raise self.error
        return self.analysis


@pytest.fixture
def site(tmp_path: Path) -> Path:
    root = tmp_path / "dist"
    write_files(
        root,
        {
            "index.html": VALID_INDEX,
            "_astro/site.css": "body {}",
            "images/hero.jpg": b"\xff\xd8\xff",
        },
    )
    return root


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., VerifyConfig]:
    def build(site_dir: Path, **overrides: object) -> VerifyConfig:
        values: dict[str, object] = {
            "site_dir": site_dir,
            "report_path": tmp_path / "out" / "forge-report.json",
            "screenshots_dir": tmp_path / "out" / "screenshots",
            "thresholds": Thresholds(),
            "settle_delay": 0.0,
        }
        values.update(overrides)
        return VerifyConfig(**values)  # type: ignore[arg-type]

    return build


@pytest.fixture
def fakes() -> Callable[..., Toolkit]:
    def build(
        auditor: FakeAuditor | None = None,
        capturer: FakeCapturer | None = None,
        vision: FakeVision | None = None,
    ) -> Toolkit:
        return Toolkit(
            auditor=auditor or FakeAuditor(),
            capturer=capturer or FakeCapturer(),
            vision=vision or FakeVision(),
        )

    return build
