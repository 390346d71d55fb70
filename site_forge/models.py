"""
Typed check results and the report aggregate they fold into.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Status(str, Enum):
    PASS = "PASS"
    FAIL = "FAIL"
    SKIP = "SKIP"


@dataclass(frozen=True)
class AssetsResult:
    status: Status
    total: int = 0
    missing: tuple[str, ...] = ()
    details: str = ""


@dataclass(frozen=True)
class BuildResult:
    status: Status
    pages: int = 0
    details: str = ""


@dataclass(frozen=True)
class Thresholds:
    performance: int = 90
    accessibility: int = 90
    seo: int = 90


@dataclass(frozen=True)
class LighthouseResult:
    status: Status
    performance: int = 0
    accessibility: int = 0
    seo: int = 0
    thresholds: Thresholds = field(default_factory=Thresholds)
    details: str = ""


@dataclass(frozen=True)
class ScreenshotsResult:
    status: Status
    desktop: str = ""
    mobile: str = ""
    desktop_size: tuple[int, int] | None = None
    mobile_size: tuple[int, int] | None = None
    details: str = ""


@dataclass(frozen=True)
class VisionResult:
    status: Status
    score: int = 0
    threshold: int = 7
    analysis: str = ""
    details: str = ""


NOT_RUN = "not run"


@dataclass
class Report:
    """
    One verification run.

    Results are replaced through the ``record_*`` methods while the pipeline
    runs. ``seal`` stamps the timestamp right before the report is written;
    after that the report no longer accepts results.
    """

    directory: str
    assets: AssetsResult
    build: BuildResult
    lighthouse: LighthouseResult
    screenshots: ScreenshotsResult
    vision: VisionResult
    overall: Status = Status.FAIL
    timestamp: str = ""
    sealed: bool = field(default=False, repr=False, compare=False)

    @classmethod
    def pending(cls, directory: str, thresholds: Thresholds | None = None, vision_threshold: int = 7) -> Report:
        """Build the report an aborted run would leave behind: every check FAIL, vision SKIP."""
        return cls(
            directory=directory,
            assets=AssetsResult(Status.FAIL, details=NOT_RUN),
            build=BuildResult(Status.FAIL, details=NOT_RUN),
            lighthouse=LighthouseResult(Status.FAIL, thresholds=thresholds or Thresholds(), details=NOT_RUN),
            screenshots=ScreenshotsResult(Status.FAIL, details=NOT_RUN),
            vision=VisionResult(Status.SKIP, threshold=vision_threshold, details=NOT_RUN),
            overall=Status.FAIL,
        )

    def _ensure_open(self) -> None:
        if self.sealed:
            raise RuntimeError("report already written; results can no longer change")

    def record_assets(self, result: AssetsResult) -> None:
        self._ensure_open()
        self.assets = result

    def record_build(self, result: BuildResult) -> None:
        self._ensure_open()
        self.build = result

    def record_lighthouse(self, result: LighthouseResult) -> None:
        self._ensure_open()
        self.lighthouse = result

    def record_screenshots(self, result: ScreenshotsResult) -> None:
        self._ensure_open()
        self.screenshots = result

    def record_vision(self, result: VisionResult) -> None:
        self._ensure_open()
        self.vision = result

    def set_overall(self, verdict: Status) -> None:
        self._ensure_open()
        if verdict is Status.SKIP:
            raise ValueError("overall verdict is PASS or FAIL")
        self.overall = verdict

    def seal(self, timestamp: str) -> None:
        self._ensure_open()
        self.timestamp = timestamp
        self.sealed = True
